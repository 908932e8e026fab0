from __future__ import annotations

from dataclasses import dataclass
from typing import List

from . import colorspace as cs
from .colorspace import ColorLike, Hex

# Tailwind-style step labels, lightest → darkest.
SCALE_LABELS: tuple[int, ...] = (50, 100, 200, 300, 400, 500, 600, 700, 800, 900, 950)
STEP_COUNT = len(SCALE_LABELS)
ANCHOR_LABEL = 500
ANCHOR_INDEX = SCALE_LABELS.index(ANCHOR_LABEL)
LABEL_SPAN = 450.0  # 50 → 500 and 500 → 950

LIGHTNESS_CEILING = 1.0  # lightness reached at step 50
DARKEN_DAMPING = 1.0  # fraction of the seed lightness removed by step 950


def step_lightness(
    l0: float,
    label: int,
    *,
    ceiling: float = LIGHTNESS_CEILING,
    damping: float = DARKEN_DAMPING,
) -> float:
    """
    OKLCH lightness of one scale step for a seed of lightness ``l0``.
      label < 500 – linear blend from l0 toward ``ceiling``
      label = 500 – l0 unchanged (anchor)
      label > 500 – l0 scaled down linearly, at most by ``damping``
    """
    if label < ANCHOR_LABEL:
        factor = (ANCHOR_LABEL - label) / LABEL_SPAN
        return l0 + (ceiling - l0) * factor
    if label > ANCHOR_LABEL:
        factor = (label - ANCHOR_LABEL) / LABEL_SPAN
        return l0 * (1.0 - factor * damping)
    return l0


@dataclass(frozen=True)
class ScaleStep:
    label: int
    l: float
    c: float
    h: float
    hex: Hex


@dataclass(frozen=True)
class Scale:
    seed: Hex
    steps: tuple[ScaleStep, ...]

    @property
    def colors(self) -> List[Hex]:
        return [s.hex for s in self.steps]

    @property
    def labels(self) -> List[int]:
        return [s.label for s in self.steps]

    @property
    def anchor(self) -> ScaleStep:
        return self.steps[ANCHOR_INDEX]


@dataclass
class ScaleGenerator:
    ceiling: float = LIGHTNESS_CEILING
    damping: float = DARKEN_DAMPING

    def __post_init__(self) -> None:
        if not 0.0 < self.damping <= 1.0:
            raise ValueError("damping must be in (0, 1]")
        if not 0.0 <= self.ceiling <= 1.0:
            raise ValueError("ceiling must be in [0, 1]")

    def scale(self, seed: ColorLike) -> Scale:
        """Derive the 11-step scale; chroma and hue are carried from the seed."""
        color = cs.parse(seed)
        l0, c0, h0 = cs.to_oklch(color)
        steps: List[ScaleStep] = []
        for label in SCALE_LABELS:
            L = step_lightness(l0, label, ceiling=self.ceiling, damping=self.damping)
            steps.append(ScaleStep(label, L, c0, h0, cs.oklch_to_hex(L, c0, h0)))
        return Scale(seed=cs.to_hex(color), steps=tuple(steps))

    def generate(self, seed: ColorLike) -> List[Hex]:
        return self.scale(seed).colors


def generate_scale(
    seed: ColorLike,
    *,
    ceiling: float = LIGHTNESS_CEILING,
    damping: float = DARKEN_DAMPING,
) -> List[Hex]:
    return ScaleGenerator(ceiling=ceiling, damping=damping).generate(seed)


__all__ = [
    "SCALE_LABELS",
    "STEP_COUNT",
    "ANCHOR_INDEX",
    "LIGHTNESS_CEILING",
    "DARKEN_DAMPING",
    "ScaleStep",
    "Scale",
    "ScaleGenerator",
    "generate_scale",
    "step_lightness",
]
