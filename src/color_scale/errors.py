from __future__ import annotations


class ColorScaleError(Exception):
    """Base class for every error raised by the scale engine."""


class InvalidColorError(ColorScaleError, ValueError):
    """Input text (or an OKLCH-derived color) could not be parsed."""


class ColorConversionError(ColorScaleError):
    """The conversion layer rejected a set of coordinates."""


class InvalidEditError(ColorScaleError, ValueError):
    """Slider edit addressed an unknown step or offset kind."""


class PaletteNotFoundError(ColorScaleError, KeyError):
    """No saved palette carries the requested id."""


__all__ = [
    "ColorScaleError",
    "InvalidColorError",
    "ColorConversionError",
    "InvalidEditError",
    "PaletteNotFoundError",
]
