# ============================================================
# Median Household Income by State (simple view)
# Continuous Viridis map + matching panel
# ============================================================

import streamlit as st

from statemap.charts import build_sequential_choropleth, selected_state
from statemap.config import DATA_CSV_PATH, GEOJSON_FALLBACK_PATH, GEOJSON_URL, LEGEND_STEPS
from statemap.data import load_state_values, value_extent, value_lookup
from statemap.errors import StatemapError
from statemap.geo import ZoomTarget, join_values, load_geojson_with_fallback, zoom_to_feature
from statemap.legend import sequential_legend_html
from statemap.report import format_match_summary, match_summary
from statemap.scales import SequentialScale

# ------------------------------------------------------------
# 1. Page Config
# ------------------------------------------------------------
st.set_page_config(page_title="Median Household Income by State", layout="wide")

st.markdown("""
    <style>
        .block-container { padding-top: 2rem; }
        footer {visibility: hidden;}
        .legend-item { margin: 2px 0; }
    </style>
""", unsafe_allow_html=True)

# ------------------------------------------------------------
# 2. Load Data
# ------------------------------------------------------------
@st.cache_data(show_spinner="Loading state boundaries...")
def load_geo(url, fallback):
    return load_geojson_with_fallback(url, fallback)


@st.cache_data
def load_rows(path):
    return load_state_values(path)


try:
    df_rows = load_rows(str(DATA_CSV_PATH))
    geo = load_geo(GEOJSON_URL, str(GEOJSON_FALLBACK_PATH))
    extent = value_extent(df_rows)
    join = join_values(geo, value_lookup(df_rows))
except StatemapError as e:
    st.error(f"Error loading map or data: {e}")
    st.stop()

color = SequentialScale(extent, "Viridis")

# ------------------------------------------------------------
# 3. Zoom State
# ------------------------------------------------------------
if "simple_zoom" not in st.session_state:
    st.session_state.simple_zoom = ZoomTarget.identity()
    st.session_state.simple_nonce = 0
    st.session_state.simple_pick = None


def reset_zoom():
    st.session_state.simple_zoom = ZoomTarget.identity()
    st.session_state.simple_pick = None
    st.session_state.simple_nonce += 1


map_key = f"simple_map_{st.session_state.simple_nonce}"
pick = selected_state(st.session_state.get(map_key))
if pick and pick != st.session_state.simple_pick and join.feature(pick) is not None:
    st.session_state.simple_pick = pick
    st.session_state.simple_zoom = zoom_to_feature(join.feature(pick))

# ------------------------------------------------------------
# 4. Layout
# ------------------------------------------------------------
st.markdown("### Median Household Income by State")

col_map, col_side = st.columns([3, 1])

with col_map:
    fig = build_sequential_choropleth(join, color, zoom=st.session_state.simple_zoom)
    st.plotly_chart(
        fig,
        use_container_width=True,
        config={"scrollZoom": True, "displaylogo": False},
        on_select="rerun",
        selection_mode="points",
        key=map_key,
    )
    st.button("Reset zoom", on_click=reset_zoom)

with col_side:
    st.markdown(sequential_legend_html(color, LEGEND_STEPS), unsafe_allow_html=True)

    summary = match_summary(join, df_rows)
    text = format_match_summary(summary)
    if summary.ok:
        st.success(text)
    else:
        st.warning(text)
