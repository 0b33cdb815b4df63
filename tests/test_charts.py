import pandas as pd
import pytest

from statemap.charts import (
    build_choropleth,
    build_sequential_choropleth,
    build_top_bars,
    selected_state,
)
from statemap.config import SIMPLE_UNMATCHED_FILL, UNMATCHED_FILL
from statemap.geo import ZoomTarget, join_values
from statemap.scales import QuantizeScale, SequentialScale


@pytest.fixture
def join(geo):
    return join_values(geo, {"Texas": 76292.0, "Ohio": 69680.0})


@pytest.fixture
def scale():
    return QuantizeScale.from_scheme((69680.0, 76292.0), "Blues")


def _by_name(fig):
    return {t.name: t for t in fig.data}


def test_choropleth_bins_and_unmatched(join, scale):
    fig = build_choropleth(join, scale)
    traces = _by_name(fig)

    assert traces[scale.colors[0]].locations == ("Ohio",)
    assert traces[scale.colors[-1]].locations == ("Texas",)
    assert traces["unmatched"].locations == ("Utah", "Puerto Rico")
    assert traces["unmatched"].colorscale[0][1] == UNMATCHED_FILL
    assert all(t.featureidkey == "properties.name" for t in fig.data)
    assert fig.layout.geo.scope == "usa"


def test_choropleth_hover_text(join, scale):
    fig = build_choropleth(join, scale)
    texas = _by_name(fig)[scale.colors[-1]]

    assert tuple(texas.customdata[0]) == ("Texas", "Value: 76,292")
    unmatched = _by_name(fig)["unmatched"]
    assert tuple(unmatched.customdata[0]) == ("Utah", "Value: N/A")


def test_focused_state_is_outlined(join, scale):
    fig = build_choropleth(join, scale, focused="Ohio")
    outline = _by_name(fig)["focused"]

    assert outline.locations == ("Ohio",)
    assert outline.marker.line.width == 3


def test_focus_on_unknown_state_is_ignored(join, scale):
    fig = build_choropleth(join, scale, focused="Atlantis")

    assert "focused" not in _by_name(fig)


def test_zoom_applied(join, scale):
    fig = build_choropleth(join, scale, zoom=ZoomTarget(-100.0, 32.0, 2.5))

    assert fig.layout.geo.projection.scale == 2.5
    assert fig.layout.geo.center.lon == -100.0
    assert fig.layout.geo.center.lat == 32.0


def test_identity_zoom_leaves_view(join, scale):
    fig = build_choropleth(join, scale, zoom=ZoomTarget.identity())

    assert fig.layout.geo.projection.scale is None


def test_sequential_choropleth(join):
    fig = build_sequential_choropleth(join, SequentialScale((69680.0, 76292.0)))
    traces = _by_name(fig)

    assert traces["states"].locations == ("Texas", "Ohio")
    assert traces["states"].zmin == 69680.0
    assert tuple(traces["states"].customdata[0]) == ("Texas", "Median Income: $76,292")
    assert traces["unmatched"].colorscale[0][1] == SIMPLE_UNMATCHED_FILL


def test_top_bars_order_and_focus(scale):
    df = pd.DataFrame({
        "state": ["Ohio", "Texas", "Utah", "Vermont"],
        "value": [69680.0, 76292.0, float("nan"), 78024.0],
    })

    fig = build_top_bars(df, n=10, focused="Texas", scale=scale)
    bar = fig.data[0]

    assert tuple(bar.x) == ("Vermont", "Texas", "Ohio")
    assert tuple(bar.marker.line.width) == (0, 3, 0)
    assert fig.layout.title.text == "Top 10 States by Value"
    assert fig.layout.yaxis.tickformat == "~s"
    assert fig.layout.xaxis.tickangle == -65


def test_selected_state_from_location():
    event = {"selection": {"points": [{"location": "Ohio", "curve_number": 0}]}}

    assert selected_state(event) == "Ohio"


def test_selected_state_from_customdata():
    event = {"selection": {"points": [{"customdata": ["Texas", "Value: 1"]}]}}

    assert selected_state(event) == "Texas"


def test_selected_state_from_trace_index(join, scale):
    fig = build_choropleth(join, scale)
    curve = [t.name for t in fig.data].index("unmatched")
    event = {"selection": {"points": [{"curve_number": curve, "point_index": 1}]}}

    assert selected_state(event, fig) == "Puerto Rico"


def test_selected_state_from_bar_x():
    event = {"selection": {"points": [{"x": "Vermont", "y": 78024}]}}

    assert selected_state(event) == "Vermont"


def test_selected_state_empty():
    assert selected_state(None) is None
    assert selected_state({"selection": {"points": []}}) is None
    assert selected_state({}) is None
