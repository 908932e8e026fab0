import math
import re

import pytest

from color_scale.adjust import AdjustmentEngine
from color_scale.errors import (
    ColorConversionError,
    InvalidColorError,
    InvalidEditError,
    PaletteNotFoundError,
)
from color_scale.scale import ANCHOR_INDEX, generate_scale
from color_scale.scheduler import ManualClock
from color_scale.session import ScaleSession
from color_scale.store import PaletteStore


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def session(clock):
    return ScaleSession("#3b82f6", clock=clock, store=PaletteStore())


def settle(clock, session):
    clock.advance(500)
    session.tick()


def test_initial_state(session):
    assert session.seed == "#3b82f6"
    assert session.colors == generate_scale("#3b82f6")
    assert session.offsets.is_zero()
    assert len(session.history) == 1


def test_slider_updates_live_and_commits_later(session, clock):
    before = session.colors
    session.set_slider(5, "hue", 20.0)
    assert session.colors != before
    assert session.offsets.hue[6] == pytest.approx(16.0)
    assert len(session.history) == 1
    settle(clock, session)
    assert len(session.history) == 2
    assert session.history.current.colors == tuple(session.colors)


def test_drag_burst_is_one_undo_step(session, clock):
    for v in range(1, 21):
        session.set_slider(3, "lightness", float(v))
        clock.advance(10)
    settle(clock, session)
    assert len(session.history) == 2
    session.undo()
    assert session.offsets.is_zero()
    assert session.colors == generate_scale("#3b82f6")


def test_undo_flushes_pending_edit(session):
    session.set_slider(5, "chroma", 5.0)
    session.undo()
    assert session.offsets.is_zero()
    assert session.history.can_redo()
    session.redo()
    assert session.offsets.chroma[5] == 5.0


def test_linear_history(session, clock):
    for v in (10.0, 20.0, 30.0):
        session.set_slider(5, "hue", v)
        settle(clock, session)
    session.undo()
    session.undo()
    assert session.offsets.hue[5] == 10.0
    session.set_slider(2, "hue", -5.0)
    settle(clock, session)
    assert not session.history.can_redo()
    assert len(session.history) == 3


def test_invalid_seed_leaves_state(session, clock):
    session.set_slider(5, "hue", 10.0)
    state = session.state
    with pytest.raises(InvalidColorError):
        session.set_seed("nonsense")
    assert session.state is state
    assert session.history.pending


def test_invalid_slider_leaves_state(session):
    state = session.state
    with pytest.raises(InvalidEditError):
        session.set_slider(11, "hue", 1.0)
    with pytest.raises(InvalidEditError):
        session.set_slider(1, "tint", 1.0)
    assert session.state is state


def test_new_seed_resets_everything(session, clock):
    session.set_slider(5, "hue", 10.0)
    session.set_seed("#ef4444")
    assert session.offsets.is_zero()
    assert session.colors == generate_scale("#ef4444")
    settle(clock, session)
    assert len(session.history) == 1


def test_seed_from_oklch(session):
    session.set_seed_oklch(0.6, 0.1, 250.0)
    assert session.state.scale.steps[ANCHOR_INDEX].l == 0.6
    l, c, h = session.seed_oklch
    assert l == pytest.approx(0.6, abs=0.01)


def test_reset_kind_and_all(session, clock):
    session.set_slider(5, "hue", 10.0)
    session.set_slider(5, "lightness", 10.0)
    session.reset_kind("hue")
    assert not any(session.offsets.hue)
    assert any(session.offsets.lightness)
    session.reset_all()
    assert session.offsets.is_zero()
    assert session.colors == session.state.base
    settle(clock, session)
    assert len(session.history) == 2


def test_palettes(session):
    session.set_slider(5, "hue", 12.0)
    saved = session.save_palette()
    assert re.match(r"^[A-Za-z ]+ \(\d\d:\d\d:\d\d\)$", saved.name)
    named = session.save_palette("mine")
    assert [p.name for p in session.palettes()] == [saved.name, "mine"]

    session.set_seed("#10b981")
    session.load_palette(saved.id)
    assert session.seed == "#3b82f6"
    assert session.offsets == saved.offsets
    assert tuple(session.colors) == saved.colors
    assert len(session.history) == 1

    session.delete_palette(named.id)
    assert len(session.palettes()) == 1
    with pytest.raises(PaletteNotFoundError):
        session.load_palette(named.id)


def test_snapshot_shape(session):
    snap = session.snapshot()
    assert snap["labels"][0] == 50 and snap["labels"][-1] == 950
    assert len(snap["colors"]) == 11
    assert set(snap["offsets"]) == {"hue", "lightness", "chroma"}
    assert snap["history"] == {
        "cursor": 0,
        "length": 1,
        "can_undo": False,
        "can_redo": False,
        "pending": False,
    }


class BrokenEngine(AdjustmentEngine):
    def recompute(self, base, offsets):
        raise ColorConversionError("rejected")


def test_conversion_failure_keeps_previous_colors(clock):
    session = ScaleSession("#3b82f6", clock=clock, engine=BrokenEngine())
    state = session.state
    with pytest.raises(ColorConversionError):
        session.set_slider(5, "hue", 10.0)
    with pytest.raises(ColorConversionError):
        session.reset_kind("hue")
    assert session.state is state
    assert session.offsets.is_zero()
    assert session.colors == generate_scale("#3b82f6")
    assert len(session.history) == 1
    assert not session.history.pending


@pytest.mark.parametrize("lch", [(math.nan, 0.1, 10.0), (0.5, math.inf, 10.0)])
def test_non_finite_oklch_seed_is_invalid_color(session, lch):
    state = session.state
    with pytest.raises(InvalidColorError):
        session.set_seed_oklch(*lch)
    assert session.state is state


@pytest.mark.parametrize("value", [math.nan, "5", True, None])
def test_malformed_slider_value(session, value):
    state = session.state
    with pytest.raises(InvalidEditError):
        session.set_slider(5, "hue", value)
    assert session.state is state
