"""Human-readable names for seed colors (nearest entry by CIEDE2000)."""

from __future__ import annotations

from functools import lru_cache
from typing import Mapping

from coloraide import Color

from . import colorspace as cs
from .colorspace import ColorLike

NAMED_COLORS: Mapping[str, str] = {
    "Black": "#000000",
    "Charcoal": "#36454f",
    "Gray": "#808080",
    "Silver": "#c0c0c0",
    "White": "#ffffff",
    "Maroon": "#800000",
    "Crimson": "#dc143c",
    "Red": "#ff0000",
    "Coral": "#ff7f50",
    "Salmon": "#fa8072",
    "Brown": "#964b00",
    "Chocolate": "#d2691e",
    "Orange": "#ffa500",
    "Amber": "#ffbf00",
    "Gold": "#ffd700",
    "Yellow": "#ffff00",
    "Beige": "#f5f5dc",
    "Olive": "#808000",
    "Lime": "#bfff00",
    "Green": "#008000",
    "Emerald": "#50c878",
    "Mint": "#98ff98",
    "Teal": "#008080",
    "Turquoise": "#40e0d0",
    "Cyan": "#00ffff",
    "Sky Blue": "#87ceeb",
    "Azure": "#007fff",
    "Royal Blue": "#4169e1",
    "Blue": "#0000ff",
    "Navy Blue": "#000080",
    "Indigo": "#4b0082",
    "Violet": "#8f00ff",
    "Purple": "#800080",
    "Lavender": "#e6e6fa",
    "Magenta": "#ff00ff",
    "Pink": "#ffc0cb",
    "Rose": "#ff007f",
}


@lru_cache(maxsize=None)
def _palette() -> tuple[tuple[str, Color], ...]:
    return tuple((name, Color(hex_)) for name, hex_ in NAMED_COLORS.items())


def color_name(color: ColorLike) -> str:
    c = cs.parse(color)
    return min(_palette(), key=lambda item: c.delta_e(item[1], method="2000"))[0]


__all__ = ["NAMED_COLORS", "color_name"]
