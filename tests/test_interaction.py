import pytest

from statemap.geo import ZoomTarget, join_values, zoom_to_feature
from statemap.interaction import (
    apply_picks,
    chart_key,
    consume_pick,
    focused_value,
    init_view,
    reset_view,
)


@pytest.fixture
def join(geo):
    return join_values(geo, {"Texas": 76292.0, "Ohio": 69680.0})


@pytest.fixture
def state():
    s = {}
    init_view(s)
    return s


def _click(state, chart, name):
    state[chart_key(state, chart)] = {"selection": {"points": [{"location": name}]}}


def _bar_click(state, name):
    state[chart_key(state, "bars")] = {"selection": {"points": [{"x": name, "y": 1.0}]}}


def test_init_view_keeps_existing_state(state):
    state["focused"] = "Ohio"
    state["nonce"] = 4

    init_view(state)

    assert state["focused"] == "Ohio"
    assert chart_key(state, "map") == "map_4"


def test_nothing_selected(state, join):
    assert apply_picks(state, join) is None
    assert state["zoom"].is_identity


def test_map_click_focuses_and_zooms(state, join):
    _click(state, "map", "Ohio")

    assert apply_picks(state, join) == "Ohio"
    assert state["zoom"] == zoom_to_feature(join.feature("Ohio"))
    assert not state["zoom"].is_identity


def test_repeated_selection_is_consumed_once(state, join):
    _click(state, "map", "Ohio")
    assert consume_pick(state, "map") == "Ohio"
    assert consume_pick(state, "map") is None


def test_bar_click_focuses_without_zoom(state, join):
    _bar_click(state, "Texas")

    assert apply_picks(state, join) == "Texas"
    assert state["zoom"] == ZoomTarget.identity()


def test_bar_click_keeps_existing_zoom(state, join):
    _click(state, "map", "Ohio")
    apply_picks(state, join)
    zoom = state["zoom"]

    _bar_click(state, "Texas")

    assert apply_picks(state, join) == "Texas"
    assert state["zoom"] == zoom


def test_stale_map_selection_does_not_override_bar_click(state, join):
    _click(state, "map", "Ohio")
    apply_picks(state, join)

    # the map chart still reports Ohio on the next rerun
    _bar_click(state, "Texas")
    assert apply_picks(state, join) == "Texas"


def test_map_click_on_state_without_boundary_is_ignored(state, join):
    _click(state, "map", "Vermont")

    assert apply_picks(state, join) is None
    assert state["zoom"].is_identity


def test_reset_view_clears_focus_and_rotates_keys(state, join):
    _click(state, "map", "Ohio")
    apply_picks(state, join)
    old_key = chart_key(state, "map")

    reset_view(state)

    assert state["focused"] is None
    assert state["zoom"].is_identity
    assert chart_key(state, "map") != old_key
    # the old selection lives under the old key and no longer applies
    assert apply_picks(state, join) is None


def test_same_state_can_be_picked_again_after_reset(state, join):
    _click(state, "map", "Ohio")
    apply_picks(state, join)
    reset_view(state)

    _click(state, "map", "Ohio")

    assert apply_picks(state, join) == "Ohio"


def test_focused_value_uses_join(join):
    assert focused_value(join, {"Ohio": 1.0}, "Ohio") == 69680.0
    assert focused_value(join, {}, "Utah") is None


def test_focused_value_falls_back_to_dataset(join):
    lookup = {"Texas": 76292.0, "Ohio": 69680.0, "Vermont": 78024.0}

    assert focused_value(join, lookup, "Vermont") == 78024.0
    assert focused_value(join, lookup, "Atlantis") is None
