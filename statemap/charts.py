import plotly.express as px
import plotly.graph_objects as go

from .config import (
    BAR_HEIGHT,
    FOCUS_OUTLINE,
    MAP_HEIGHT,
    SIMPLE_UNMATCHED_FILL,
    STATE_OUTLINE,
    TOP_N,
    UNMATCHED_FILL,
)
from .data import top_states
from .scales import format_currency, format_value

FEATURE_KEY = "properties.name"
HOVER = "<b>%{customdata[0]}</b><br>%{customdata[1]}<extra></extra>"


def _solid(color):
    return [[0, color], [1, color]]


def _state_trace(geojson, names, label_fn, fill, values=None, name=None):
    return go.Choropleth(
        geojson=geojson,
        featureidkey=FEATURE_KEY,
        locations=names,
        z=[1] * len(names),
        colorscale=_solid(fill),
        showscale=False,
        customdata=[[n, label_fn(values[i] if values else None)] for i, n in enumerate(names)],
        hovertemplate=HOVER,
        marker_line_color=STATE_OUTLINE,
        marker_line_width=0.5,
        name=name or fill,
    )


def _focus_trace(join, focused):
    feature = join.feature(focused) if focused else None
    if feature is None:
        return None
    return go.Choropleth(
        geojson={"type": "FeatureCollection", "features": [feature]},
        featureidkey=FEATURE_KEY,
        locations=[focused],
        z=[1],
        colorscale=_solid("rgba(0,0,0,0)"),
        showscale=False,
        customdata=[[focused, ""]],
        hoverinfo="skip",
        marker_line_color=FOCUS_OUTLINE,
        marker_line_width=3,
        name="focused",
    )


def apply_zoom(fig, zoom):
    if zoom is None or zoom.is_identity:
        return fig
    fig.update_geos(
        center=dict(lon=zoom.center_lon, lat=zoom.center_lat),
        projection_scale=zoom.scale,
    )
    return fig


def _map_layout(fig, height=MAP_HEIGHT):
    fig.update_geos(
        scope="usa",
        projection_type="albers usa",
        showlakes=False,
        bgcolor="rgba(0,0,0,0)",
    )
    fig.update_layout(
        height=height,
        margin=dict(l=0, r=0, t=0, b=0),
        showlegend=False,
        dragmode="pan",
        clickmode="event+select",
    )
    return fig


def build_choropleth(join, scale, focused=None, zoom=None):
    """Quantized map: one trace per color bin plus one for unmatched states."""
    fig = go.Figure()
    geojson = join.geojson

    by_color = {}
    unmatched = []
    for f in join.features:
        name, val = f["properties"]["name"], f["properties"]["value"]
        if val is None:
            unmatched.append(name)
        else:
            by_color.setdefault(scale(val), []).append((name, val))

    def label(v):
        return "Value: " + format_value(v)

    for color in scale.colors:
        members = by_color.get(color)
        if not members:
            continue
        names = [m[0] for m in members]
        values = [m[1] for m in members]
        fig.add_trace(_state_trace(geojson, names, label, color, values=values))

    if unmatched:
        fig.add_trace(_state_trace(geojson, unmatched, label, UNMATCHED_FILL, name="unmatched"))

    outline = _focus_trace(join, focused)
    if outline is not None:
        fig.add_trace(outline)

    _map_layout(fig)
    return apply_zoom(fig, zoom)


def build_sequential_choropleth(join, scale, zoom=None):
    """Continuous map for the simple view; unmatched states drawn light gray."""
    fig = go.Figure()
    geojson = join.geojson
    lo, hi = scale.domain

    matched = [f["properties"] for f in join.features if f["properties"]["value"] is not None]
    if matched:
        fig.add_trace(go.Choropleth(
            geojson=geojson,
            featureidkey=FEATURE_KEY,
            locations=[p["name"] for p in matched],
            z=[p["value"] for p in matched],
            zmin=lo,
            zmax=hi if hi > lo else lo + 1,
            colorscale=scale.name,
            showscale=False,
            customdata=[[p["name"], "Median Income: " + format_currency(p["value"])] for p in matched],
            hovertemplate=HOVER,
            marker_line_color=STATE_OUTLINE,
            marker_line_width=0.5,
            name="states",
        ))

    if join.unmatched:
        fig.add_trace(_state_trace(
            geojson, list(join.unmatched), lambda v: "Median Income: " + format_currency(v),
            SIMPLE_UNMATCHED_FILL, name="unmatched",
        ))

    _map_layout(fig)
    return apply_zoom(fig, zoom)


def build_top_bars(df, n=TOP_N, focused=None, scale=None):
    top = top_states(df, n)
    fig = px.bar(
        top,
        x="state",
        y="value",
        title=f"Top {n} States by Value",
        labels={"state": "", "value": "Value"},
    )

    colors = [scale(v) for v in top["value"]] if scale is not None else ["#0a9396"] * len(top)
    line_widths = [3 if s == focused else 0 for s in top["state"]]
    opacity = [1.0 if focused is None or s == focused else 0.55 for s in top["state"]]
    fig.update_traces(
        marker_color=colors,
        marker_line_color=FOCUS_OUTLINE,
        marker_line_width=line_widths,
        marker_opacity=opacity,
        customdata=[[s, "Value: " + format_value(v)] for s, v in zip(top["state"], top["value"])],
        hovertemplate=HOVER,
    )
    fig.update_xaxes(tickangle=-65)
    fig.update_yaxes(tickformat="~s", nticks=6)
    fig.update_layout(
        height=BAR_HEIGHT,
        margin=dict(l=60, r=10, t=40, b=90),
        title_x=0.5,
        clickmode="event+select",
    )
    return fig


def selected_state(event, fig=None):
    """Name of the state picked in a Streamlit plotly selection event, or None."""
    if not event:
        return None
    selection = event.get("selection") if isinstance(event, dict) else getattr(event, "selection", None)
    if not selection:
        return None
    points = selection.get("points") if isinstance(selection, dict) else getattr(selection, "points", None)
    if not points:
        return None

    point = points[0]
    if point.get("location"):
        return point["location"]

    custom = point.get("customdata")
    if isinstance(custom, (list, tuple)) and custom:
        return custom[0]
    if isinstance(custom, str):
        return custom

    if fig is not None:
        curve = point.get("curve_number")
        idx = point.get("point_index", point.get("point_number"))
        if curve is not None and idx is not None and curve < len(fig.data):
            trace = fig.data[curve]
            names = trace.locations if trace.type == "choropleth" else trace.x
            if names is not None and idx < len(names):
                return names[idx]

    if isinstance(point.get("x"), str):
        return point["x"]
    return None
