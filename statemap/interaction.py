"""Focus and zoom state shared across dashboard reruns.

Functions take any mutable mapping, so ``st.session_state`` works in the app
and a plain dict works in tests.
"""

from .charts import selected_state
from .geo import ZoomTarget, zoom_to_feature

CHARTS = ("map", "bars")


def init_view(state):
    if "focused" not in state:
        state["focused"] = None
        state["zoom"] = ZoomTarget.identity()
        state["nonce"] = 0
        state["last_pick"] = {c: None for c in CHARTS}


def chart_key(state, chart):
    return f"{chart}_{state['nonce']}"


def reset_view(state):
    state["focused"] = None
    state["zoom"] = ZoomTarget.identity()
    state["last_pick"] = {c: None for c in CHARTS}
    # fresh widget keys drop the charts' stale selections
    state["nonce"] += 1


def consume_pick(state, chart):
    """Return a newly selected state on `chart`, or None when nothing changed."""
    pick = selected_state(state.get(chart_key(state, chart)))
    if pick == state["last_pick"][chart]:
        return None
    state["last_pick"][chart] = pick
    return pick


def apply_picks(state, join):
    """Map clicks focus and zoom, bar clicks only focus. Returns the focused state."""
    map_pick = consume_pick(state, "map")
    bar_pick = consume_pick(state, "bars")

    if map_pick and join.feature(map_pick) is not None:
        state["focused"] = map_pick
        state["zoom"] = zoom_to_feature(join.feature(map_pick))
    elif bar_pick:
        state["focused"] = bar_pick
    return state["focused"]


def focused_value(join, lookup, name):
    """Value shown in the details box; rows without a boundary use their own value."""
    if join.feature(name) is not None:
        return join.value_of(name)
    return lookup.get(name)
