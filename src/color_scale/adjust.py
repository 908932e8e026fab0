"""Per-step hue / lightness / chroma offsets and the equalizer edit rule.

An edit at one step bleeds into the four steps on each side with
linearly decaying strength (0.8, 0.6, 0.4, 0.2).  Neighbors are clamped to
a tighter band than the edited step itself, which is only held to its
slider's nominal range.

Offsets are stored as immutable tuples; the arithmetic runs in NumPy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Mapping, Sequence, get_args

import numpy as np

from . import colorspace as cs
from .colorspace import Hex
from .errors import InvalidEditError
from .scale import STEP_COUNT

log = logging.getLogger(__name__)

Kind = Literal["hue", "lightness", "chroma"]
KINDS: tuple[Kind, ...] = get_args(Kind)

DECAY: tuple[float, ...] = (0.8, 0.6, 0.4, 0.2)  # index = distance - 1

SLIDER_RANGES: Mapping[Kind, tuple[float, float]] = {
    "hue": (-60.0, 60.0),
    "lightness": (-40.0, 40.0),
    "chroma": (-40.0, 40.0),
}
NEIGHBOR_BOUNDS: Mapping[Kind, tuple[float, float]] = {
    "hue": (-30.0, 30.0),
    "lightness": (-20.0, 20.0),
    "chroma": (-20.0, 20.0),
}

MAX_CHROMA = 0.4
CLAMP_RECOMPUTED = True


def check_kind(kind: str) -> Kind:
    if kind not in KINDS:
        raise InvalidEditError(f"unknown offset kind {kind!r}; expected one of {KINDS}")
    return kind  # type: ignore[return-value]


def check_value(value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, np.number)):
        raise InvalidEditError(f"offset value must be a number, got {value!r}")
    if not np.isfinite(value):
        raise InvalidEditError(f"offset value must be finite, got {value!r}")
    return float(value)


def check_index(index: int, n: int = STEP_COUNT) -> int:
    if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
        raise InvalidEditError(f"step index must be an integer, got {index!r}")
    if not 0 <= index < n:
        raise InvalidEditError(f"step index {index} outside [0, {n - 1}]")
    return int(index)


def _zeros() -> tuple[float, ...]:
    return (0.0,) * STEP_COUNT


@dataclass(frozen=True)
class Offsets:
    hue: tuple[float, ...] = _zeros()
    lightness: tuple[float, ...] = _zeros()
    chroma: tuple[float, ...] = _zeros()

    def __post_init__(self) -> None:
        for kind in KINDS:
            values = tuple(float(v) for v in getattr(self, kind))
            if len(values) != STEP_COUNT:
                raise InvalidEditError(
                    f"{kind} offsets need {STEP_COUNT} values, got {len(values)}"
                )
            object.__setattr__(self, kind, values)

    @classmethod
    def zero(cls) -> "Offsets":
        return cls()

    def get(self, kind: Kind) -> tuple[float, ...]:
        return getattr(self, check_kind(kind))

    def replace(self, kind: Kind, values: Sequence[float]) -> "Offsets":
        data = self.to_dict()
        data[check_kind(kind)] = list(values)
        return Offsets(**data)

    def is_zero(self) -> bool:
        return not any(v for kind in KINDS for v in self.get(kind))

    def to_dict(self) -> dict[str, list[float]]:
        return {kind: list(self.get(kind)) for kind in KINDS}

    @classmethod
    def from_dict(cls, data: Mapping[str, Sequence[float]]) -> "Offsets":
        return cls(**{kind: tuple(data.get(kind) or _zeros()) for kind in KINDS})


def propagate(
    offsets: Sequence[float],
    index: int,
    delta: float,
    decay: Sequence[float] = DECAY,
    bounds: tuple[float, float] = (-30.0, 30.0),
) -> np.ndarray:
    """Spread ``delta`` from ``index`` to its neighbors; the edited step is left alone.

    Neighbors past either end of the array are dropped, there is no wraparound.
    """
    out = np.array(offsets, dtype=np.float64)
    n = out.shape[0]
    lo, hi = bounds
    for distance, factor in enumerate(decay, start=1):
        for j in (index - distance, index + distance):
            if 0 <= j < n:
                out[j] = np.clip(out[j] + delta * factor, lo, hi)
    return out


def apply_edit(offsets: Offsets, index: int, value: float, kind: str) -> Offsets:
    """Set step ``index`` of the ``kind`` vector to ``value`` and propagate the change."""
    k = check_kind(kind)
    i = check_index(index)
    lo, hi = SLIDER_RANGES[k]
    value = float(np.clip(check_value(value), lo, hi))

    current = offsets.get(k)
    delta = value - current[i]
    updated = propagate(current, i, delta, DECAY, NEIGHBOR_BOUNDS[k])
    updated[i] = value
    log.debug("edit %s[%d] = %.3f (delta %.3f)", k, i, value, delta)
    return offsets.replace(k, updated.tolist())


def reset_kind(offsets: Offsets, kind: str) -> Offsets:
    return offsets.replace(check_kind(kind), _zeros())


@dataclass
class AdjustmentEngine:
    clamp: bool = CLAMP_RECOMPUTED
    max_chroma: float = MAX_CHROMA

    def coordinates(self, base: Sequence[Hex], offsets: Offsets) -> np.ndarray:
        """11×3 array of adjusted (L, C, H)."""
        if len(base) != STEP_COUNT:
            raise ValueError(f"base scale needs {STEP_COUNT} colors, got {len(base)}")
        lch = np.array([cs.to_oklch(c) for c in base], dtype=np.float64)
        L = lch[:, 0] + np.asarray(offsets.lightness) / 100.0
        C = lch[:, 1] + np.asarray(offsets.chroma) / 100.0
        H = np.mod(lch[:, 2] + np.asarray(offsets.hue), 360.0)
        if self.clamp:
            L = np.clip(L, 0.0, 1.0)
            C = np.clip(C, 0.0, self.max_chroma)
        return np.stack([L, C, H], axis=1)

    def recompute(self, base: Sequence[Hex], offsets: Offsets) -> list[Hex]:
        """Displayed colors for ``base`` under ``offsets``.

        Either every step converts or a ColorConversionError propagates;
        the caller never sees a partial list.
        """
        coords = self.coordinates(base, offsets)
        return [cs.oklch_to_hex(*row) for row in coords.tolist()]


def recompute(
    base: Sequence[Hex], offsets: Offsets, *, clamp: bool = CLAMP_RECOMPUTED
) -> list[Hex]:
    return AdjustmentEngine(clamp=clamp).recompute(base, offsets)


__all__ = [
    "Kind",
    "KINDS",
    "DECAY",
    "SLIDER_RANGES",
    "NEIGHBOR_BOUNDS",
    "Offsets",
    "propagate",
    "apply_edit",
    "reset_kind",
    "recompute",
    "AdjustmentEngine",
]
