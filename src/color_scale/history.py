from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .adjust import Offsets
from .colorspace import Hex
from .scheduler import Clock, Debouncer, MonotonicClock

log = logging.getLogger(__name__)

DEBOUNCE_MS = 500.0


@dataclass(frozen=True)
class Checkpoint:
    colors: tuple[Hex, ...]
    offsets: Offsets

    @classmethod
    def of(cls, colors: Sequence[Hex], offsets: Offsets) -> "Checkpoint":
        return cls(tuple(colors), offsets)

    def to_dict(self) -> dict:
        return {"colors": list(self.colors), **self.offsets.to_dict()}


class HistoryManager:
    """Linear undo/redo over committed checkpoints.

    ``commit`` is debounced: a burst of commits inside one window becomes a
    single checkpoint holding the last payload.  The window is measured from
    the first commit of the burst.
    """

    def __init__(
        self,
        initial: Checkpoint,
        *,
        delay: float = DEBOUNCE_MS,
        clock: Optional[Clock] = None,
    ):
        self._entries: List[Checkpoint] = [initial]
        self._cursor = 0
        self._timer: Debouncer[Checkpoint] = Debouncer(
            self._append, delay=delay, clock=clock or MonotonicClock()
        )

    # Introspection -----------------------------------------------------
    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def entries(self) -> tuple[Checkpoint, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def current(self) -> Checkpoint:
        return self._entries[self._cursor]

    @property
    def pending(self) -> bool:
        return self._timer.pending

    @property
    def delay(self) -> float:
        return self._timer.delay

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    # Control -----------------------------------------------------------
    def commit(self, checkpoint: Checkpoint) -> None:
        self.poll()
        self._timer.schedule_once(checkpoint)

    def poll(self) -> bool:
        """Append the pending checkpoint if its deadline has passed."""
        return self._timer.fire_due()

    def flush(self) -> bool:
        return self._timer.flush()

    def reset(self, initial: Checkpoint) -> None:
        self._timer.cancel()
        self._entries = [initial]
        self._cursor = 0
        log.debug("history reset")

    def undo(self) -> Optional[Checkpoint]:
        if not self.can_undo():
            return None
        self._cursor -= 1
        return self._entries[self._cursor]

    def redo(self) -> Optional[Checkpoint]:
        if not self.can_redo():
            return None
        self._cursor += 1
        return self._entries[self._cursor]

    # Internal ----------------------------------------------------------
    def _append(self, checkpoint: Checkpoint) -> None:
        del self._entries[self._cursor + 1 :]
        self._entries.append(checkpoint)
        self._cursor = len(self._entries) - 1
        log.debug("checkpoint %d committed", self._cursor)


__all__ = ["Checkpoint", "HistoryManager", "DEBOUNCE_MS"]
