import math

import pytest

from color_scale import colorspace as cs
from color_scale.errors import ColorConversionError, InvalidColorError


def test_canon_hex():
    assert cs.canon_hex("ABC") == "#aabbcc"
    assert cs.canon_hex("#3B82F6") == "#3b82f6"
    with pytest.raises(InvalidColorError):
        cs.canon_hex("#12345")


@pytest.mark.parametrize("text", ["", "   ", "not-a-color", "#ggg"])
def test_parse_rejects_garbage(text):
    with pytest.raises(InvalidColorError):
        cs.parse(text)


def test_parse_accepts_css_and_bare_hex():
    assert cs.to_hex(cs.parse("3b82f6")) == "#3b82f6"
    assert cs.to_hex(cs.parse("rgb(255 0 0)")) == "#ff0000"
    assert cs.to_hex(cs.parse("hsl(0 100% 50%)")) == "#ff0000"
    assert cs.to_hex(cs.parse("ABC")) == "#aabbcc"
    assert cs.to_hex(cs.parse("  #FfF ")) == "#ffffff"


def test_hex_is_lowercase_without_alpha():
    out = cs.to_hex("#ABCDEF")
    assert out == "#abcdef"


def test_white_is_achromatic():
    l, c, h = cs.to_oklch("#ffffff")
    assert l == pytest.approx(1.0, abs=1e-4)
    assert c < 1e-4
    assert 0.0 <= h < 360.0


def test_out_of_range_coordinates_do_not_raise():
    for l, c, h in [(1.2, 0.05, 30.0), (0.5, -0.1, 120.0)]:
        out = cs.oklch_to_hex(l, c, h)
        assert out.startswith("#") and len(out) == 7


def test_non_finite_coordinates_rejected():
    with pytest.raises(ColorConversionError):
        cs.from_oklch(math.nan, 0.1, 10.0)
    with pytest.raises(ColorConversionError):
        cs.from_oklch(0.5, math.inf, 10.0)


@pytest.mark.parametrize(
    "lch", [(0.6, 0.1, 250.0), (0.8, 0.05, 90.0), (0.45, 0.12, 20.0)]
)
def test_round_trip_within_tolerance(lch):
    back = cs.to_oklch(cs.parse(cs.oklch_to_hex(*lch)))
    tl, tc, th = cs.ROUND_TRIP_TOLERANCE
    assert back[0] == pytest.approx(lch[0], abs=tl)
    assert back[1] == pytest.approx(lch[1], abs=tc)
    dh = ((back[2] - lch[2] + 180.0) % 360.0) - 180.0
    assert abs(dh) <= th


def test_hsl_round_trip():
    h, s, l = cs.to_hsl("#3b82f6")
    assert cs.to_hex(cs.from_hsl(h, s, l)) == "#3b82f6"
