"""Single-slot deferred action with a pluggable clock.

There is no background thread: the owner calls :meth:`Debouncer.fire_due`
whenever it handles an event (an HTTP request, a test step) and a payload
whose deadline has passed is delivered then.  Tests drive time with
:class:`ManualClock`; the app uses :class:`MonotonicClock`.

Semantics
---------
* ``schedule_once(payload)`` arms the deadline if nothing is pending.
* If something is pending, only the payload is replaced; the original
  deadline is kept, so a burst is delivered ``delay`` after its first event.
* ``cancel()`` drops the payload and the deadline.
* ``flush()`` delivers a pending payload immediately.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Generic, Optional, Protocol, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


class Clock(Protocol):
    def now(self) -> float:  # milliseconds
        ...


class MonotonicClock:
    def now(self) -> float:
        return time.monotonic() * 1000.0


@dataclass
class ManualClock:
    t: float = 0.0

    def now(self) -> float:
        return self.t

    def advance(self, ms: float) -> float:
        if ms < 0:
            raise ValueError("time only moves forward")
        self.t += ms
        return self.t


_EMPTY = object()


@dataclass
class Debouncer(Generic[T]):
    callback: Callable[[T], None]
    delay: float = 500.0
    clock: Clock = field(default_factory=MonotonicClock)

    _payload: object = field(default=_EMPTY, init=False, repr=False)
    _deadline: Optional[float] = field(default=None, init=False)

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def schedule_once(self, payload: T) -> bool:
        """Queue ``payload``; True when this call armed a new deadline."""
        if self.pending:
            self.reschedule(payload)
            return False
        self._payload = payload
        self._deadline = self.clock.now() + self.delay
        log.debug("deferred action armed, due at %.1f", self._deadline)
        return True

    def reschedule(self, payload: T) -> None:
        if not self.pending:
            raise RuntimeError("nothing scheduled")
        self._payload = payload

    def cancel(self) -> None:
        if self.pending:
            log.debug("deferred action cancelled")
        self._payload = _EMPTY
        self._deadline = None

    def fire_due(self) -> bool:
        if self._deadline is None or self.clock.now() < self._deadline:
            return False
        self._deliver()
        return True

    def flush(self) -> bool:
        if not self.pending:
            return False
        self._deliver()
        return True

    def _deliver(self) -> None:
        payload = self._payload
        # clear first so the callback may schedule again
        self._payload = _EMPTY
        self._deadline = None
        self.callback(payload)  # type: ignore[arg-type]


__all__ = ["Clock", "MonotonicClock", "ManualClock", "Debouncer"]
