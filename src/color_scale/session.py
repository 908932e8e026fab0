"""One editing session: seed, base scale, offsets, displayed colors, history.

Every event handler builds the complete next :class:`SessionState` before
assigning it, so an exception from parsing or conversion leaves the
previous state in place.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, replace
from typing import Any, List, Optional

from . import colorspace as cs
from .adjust import AdjustmentEngine, Offsets, apply_edit, check_kind, reset_kind
from .colorspace import ColorLike, Hex, Oklch
from .errors import InvalidColorError
from .history import DEBOUNCE_MS, Checkpoint, HistoryManager
from .naming import color_name
from .scale import SCALE_LABELS, Scale, ScaleGenerator
from .scheduler import Clock
from .store import PaletteStore, SavedPalette

log = logging.getLogger(__name__)

DEFAULT_SEED = "#3b82f6"


@dataclass(frozen=True)
class SessionState:
    scale: Scale
    offsets: Offsets
    colors: tuple[Hex, ...]

    @property
    def seed(self) -> Hex:
        return self.scale.seed

    @property
    def base(self) -> List[Hex]:
        return self.scale.colors

    def checkpoint(self) -> Checkpoint:
        return Checkpoint.of(self.colors, self.offsets)


class ScaleSession:
    def __init__(
        self,
        seed: ColorLike = DEFAULT_SEED,
        *,
        generator: Optional[ScaleGenerator] = None,
        engine: Optional[AdjustmentEngine] = None,
        store: Optional[PaletteStore] = None,
        clock: Optional[Clock] = None,
        debounce_ms: float = DEBOUNCE_MS,
    ):
        self.generator = generator or ScaleGenerator()
        self.engine = engine or AdjustmentEngine()
        self.store = store if store is not None else PaletteStore()
        self.state = self._fresh_state(seed)
        self.history = HistoryManager(
            self.state.checkpoint(), delay=debounce_ms, clock=clock
        )

    # ---- read side ----

    @property
    def seed(self) -> Hex:
        return self.state.seed

    @property
    def seed_oklch(self) -> Oklch:
        return cs.to_oklch(self.state.seed)

    @property
    def colors(self) -> List[Hex]:
        return list(self.state.colors)

    @property
    def offsets(self) -> Offsets:
        return self.state.offsets

    def palettes(self) -> List[SavedPalette]:
        return self.store.list()

    def snapshot(self) -> dict[str, Any]:
        l, c, h = self.seed_oklch
        return {
            "seed": self.seed,
            "seed_oklch": {"l": l, "c": c, "h": h},
            "labels": list(SCALE_LABELS),
            "base": self.state.base,
            "colors": self.colors,
            "offsets": self.state.offsets.to_dict(),
            "history": {
                "cursor": self.history.cursor,
                "length": len(self.history),
                "can_undo": self.history.can_undo(),
                "can_redo": self.history.can_redo(),
                "pending": self.history.pending,
            },
            "store_error": self.store.last_error,
        }

    # ---- events ----

    def tick(self) -> bool:
        """Let a due history commit land; call on every incoming event."""
        return self.history.poll()

    def set_seed(self, text: ColorLike) -> SessionState:
        self.tick()
        state = self._fresh_state(text)
        self._install(state)
        self.history.reset(state.checkpoint())
        log.info("seed set to %s", state.seed)
        return state

    def set_seed_oklch(self, l: float, c: float, h: float) -> SessionState:
        if not all(math.isfinite(v) for v in (l, c, h)):
            raise InvalidColorError(f"oklch({l}, {c}, {h}) is not a color")
        return self.set_seed(cs.from_oklch(l, c, h))

    def set_slider(self, index: int, kind: str, value: float) -> SessionState:
        self.tick()
        offsets = apply_edit(self.state.offsets, index, value, kind)
        return self._apply_offsets(offsets)

    def reset_all(self) -> SessionState:
        self.tick()
        state = SessionState(self.state.scale, Offsets.zero(), tuple(self.state.base))
        self._install(state)
        self.history.commit(state.checkpoint())
        return state

    def reset_kind(self, kind: str) -> SessionState:
        self.tick()
        return self._apply_offsets(reset_kind(self.state.offsets, check_kind(kind)))

    def undo(self) -> Optional[Checkpoint]:
        self.tick()
        self.history.flush()
        return self._restore(self.history.undo())

    def redo(self) -> Optional[Checkpoint]:
        self.tick()
        self.history.flush()
        return self._restore(self.history.redo())

    def save_palette(self, name: Optional[str] = None) -> SavedPalette:
        self.tick()
        if not name:
            stamp = time.strftime("%H:%M:%S")
            name = f"{color_name(self.seed)} ({stamp})"
        palette = SavedPalette(
            name=name,
            seed=self.seed,
            colors=self.state.colors,
            offsets=self.state.offsets,
        )
        self.store.save(palette)
        log.info("saved palette %r (%s)", palette.name, palette.id)
        return palette

    def load_palette(self, palette_id: str) -> SessionState:
        self.tick()
        palette = self.store.get(palette_id)
        base = self._fresh_state(palette.seed)
        colors = self.engine.recompute(base.base, palette.offsets)
        state = SessionState(base.scale, palette.offsets, tuple(colors))
        self._install(state)
        self.history.reset(state.checkpoint())
        log.info("loaded palette %r", palette.name)
        return state

    def delete_palette(self, palette_id: str) -> None:
        self.tick()
        self.store.delete(palette_id)

    # ---- internals ----

    def _fresh_state(self, seed: ColorLike) -> SessionState:
        scale = self.generator.scale(seed)
        return SessionState(scale, Offsets.zero(), tuple(scale.colors))

    def _apply_offsets(self, offsets: Offsets) -> SessionState:
        colors = self.engine.recompute(self.state.base, offsets)
        state = replace(self.state, offsets=offsets, colors=tuple(colors))
        self._install(state)
        self.history.commit(state.checkpoint())
        return state

    def _restore(self, checkpoint: Optional[Checkpoint]) -> Optional[Checkpoint]:
        if checkpoint is not None:
            self._install(replace(self.state, offsets=checkpoint.offsets, colors=checkpoint.colors))
        return checkpoint

    def _install(self, state: SessionState) -> None:
        self.state = state


__all__ = ["DEFAULT_SEED", "SessionState", "ScaleSession"]
