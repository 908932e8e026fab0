"""OKLCH / HSL / sRGB adapter built on ColorAide.

Every color that crosses the engine boundary goes through this module, so
it is the single place where parse failures and conversion failures turn
into :class:`InvalidColorError` and :class:`ColorConversionError`.

Colors are ``coloraide.Color`` objects internally; the display format is a
lowercase ``#rrggbb`` string without alpha.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Union

from coloraide import Color

from .errors import ColorConversionError, InvalidColorError

log = logging.getLogger(__name__)

Hex = str
ColorLike = Union[str, Color]
Oklch = tuple[float, float, float]

FIT_HEX = {"method": "raytrace"}  # consistent gamut-fit for hex output

# Worst-case drift of an in-gamut OKLCH triple after 8-bit hex quantisation.
ROUND_TRIP_TOLERANCE: Oklch = (0.01, 0.01, 2.0)

_HEX_RE = re.compile(r"#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


def canon_hex(s: str) -> Hex:
    """Normalize to '#rrggbb'; accept 3- or 6-digit hex, with or without '#'."""
    m = _HEX_RE.fullmatch((s or "").strip())
    if m is None:
        raise InvalidColorError(f"hex must be 3 or 6 hex digits, got {s!r}")
    raw = m.group(1)
    if len(raw) == 3:
        raw = "".join(ch * 2 for ch in raw)
    return "#" + raw.lower()


def parse(text: ColorLike) -> Color:
    """Parse any CSS color string (or bare hex digits) into a Color."""
    if isinstance(text, Color):
        return text.clone()
    if not isinstance(text, str):
        raise InvalidColorError(f"expected a color string, got {type(text).__name__}")
    s = text.strip()
    if not s:
        raise InvalidColorError("empty color")
    if _HEX_RE.fullmatch(s):
        # ColorAide needs the leading '#'; also expands shorthand
        s = canon_hex(s)
    try:
        return Color(s)
    except (ValueError, TypeError) as exc:
        raise InvalidColorError(f"invalid color: {text!r}") from exc


def _finite(*coords: float) -> None:
    if not all(math.isfinite(float(v)) for v in coords):
        raise ColorConversionError(f"non-finite coordinates {coords!r}")


def to_oklch(color: ColorLike) -> Oklch:
    """(L, C, H) with L in [0,1], C >= 0 and H in [0,360).

    Achromatic colors have no hue; ColorAide reports NaN and we read it as 0.
    """
    c = parse(color) if isinstance(color, str) else color
    l, ch, h = c.convert("oklch").coords()[:3]
    if math.isnan(h):
        h = 0.0
    return float(l), float(ch), float(h) % 360.0


def from_oklch(l: float, c: float, h: float) -> Color:
    """Build a color from raw OKLCH coordinates.

    Out-of-range values (L > 1, negative chroma) are accepted as-is; only
    non-finite numbers are rejected.
    """
    _finite(l, c, h)
    try:
        return Color("oklch", [float(l), float(c), float(h)])
    except (ValueError, TypeError) as exc:
        raise ColorConversionError(f"oklch({l}, {c}, {h}) rejected") from exc


def to_hex(color: ColorLike) -> Hex:
    c = parse(color) if isinstance(color, str) else color
    try:
        return c.convert("srgb").to_string(hex=True, fit=FIT_HEX)
    except (ValueError, TypeError, ZeroDivisionError) as exc:
        raise ColorConversionError(f"cannot format {c!r} as hex") from exc


def oklch_to_hex(l: float, c: float, h: float) -> Hex:
    return to_hex(from_oklch(l, c, h))


def to_hsl(color: ColorLike) -> tuple[float, float, float]:
    """(H, S, L) in ColorAide's HSL channel scale."""
    c = parse(color) if isinstance(color, str) else color
    h, s, l = c.convert("hsl").coords()[:3]
    if math.isnan(h):
        h = 0.0
    return float(h) % 360.0, float(s), float(l)


def from_hsl(h: float, s: float, l: float) -> Color:
    _finite(h, s, l)
    try:
        return Color("hsl", [float(h), float(s), float(l)])
    except (ValueError, TypeError) as exc:
        raise ColorConversionError(f"hsl({h}, {s}, {l}) rejected") from exc


__all__ = [
    "FIT_HEX",
    "ROUND_TRIP_TOLERANCE",
    "canon_hex",
    "parse",
    "to_oklch",
    "from_oklch",
    "to_hex",
    "oklch_to_hex",
    "to_hsl",
    "from_hsl",
]
