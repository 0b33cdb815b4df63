# ============================================================
# US States Choropleth Dashboard
# Map + linked Top 10 bars, legend, tooltip, zoom & click-to-zoom
# ============================================================

import matplotlib.pyplot as plt
import streamlit as st

from statemap.charts import build_choropleth, build_top_bars
from statemap.config import DATA_CSV_PATH, GEOJSON_FALLBACK_PATH, GEOJSON_URL, TOP_N
from statemap.data import load_state_values, value_extent, value_lookup
from statemap.errors import StatemapError
from statemap.geo import join_values, load_geojson_with_fallback
from statemap.interaction import apply_picks, chart_key, focused_value, init_view, reset_view
from statemap.legend import details_html, legend_html
from statemap.prefs import load_scheme, save_scheme
from statemap.report import bin_counts, format_match_summary, generate_summary_report, match_summary
from statemap.scales import SCHEMES, QuantizeScale, mpl_color

# ------------------------------------------------------------
# 1. Page Config & Styling
# ------------------------------------------------------------
st.set_page_config(page_title="US States Choropleth", layout="wide")

st.markdown("""
    <style>
        .block-container {
            padding-top: 2rem;
            padding-bottom: 1rem;
            padding-left: 2rem;
            padding-right: 2rem;
        }
        footer {visibility: hidden;}

        .legend-title { margin-bottom: 0.35rem; }
        .swatch-row { margin: 2px 0; font-size: 0.9rem; }

        .details-box {
            border: 1px solid #0a9396;
            border-radius: 5px;
            padding: 0.5rem 0.75rem;
            margin-bottom: 0.75rem;
        }
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
    lookup = value_lookup(df_rows)
    join = join_values(geo, lookup)
except StatemapError as e:
    st.error(f"❌ Error loading map or data: {e}")
    st.stop()

# ------------------------------------------------------------
# 3. Session State (focus + zoom)
# ------------------------------------------------------------
init_view(st.session_state)
focused = apply_picks(st.session_state, join)

# ------------------------------------------------------------
# 4. Sidebar (Scheme + View)
# ------------------------------------------------------------
scheme_names = list(SCHEMES)

if "scheme" not in st.session_state:
    st.session_state.scheme = load_scheme()


def on_scheme_change():
    try:
        save_scheme(st.session_state.scheme)
    except OSError as e:
        st.toast(f"Could not save color scheme: {e}")


with st.sidebar:
    st.title("US States Choropleth")
    st.caption("Value per state, joined to boundaries by name")

    st.selectbox("Color scheme:", scheme_names, key="scheme", on_change=on_scheme_change)

    st.button("Reset zoom", on_click=reset_view, args=(st.session_state,), use_container_width=True)

    with st.expander("❓ How to use this app", expanded=False):
        st.markdown(
            """
            - Hover a state for its value; scroll to zoom and drag to pan.
            - **Click a state** to zoom to it. **Reset zoom** returns to the full map.
            - Click a bar in the Top 10 chart to highlight its state.
            - The color scheme you pick is remembered next time.
            """
        )

scheme = st.session_state.scheme
scale = QuantizeScale.from_scheme(extent, scheme)

# ------------------------------------------------------------
# 5. Page Title
# ------------------------------------------------------------
st.markdown("### Value by U.S. State")
st.markdown("---")

tab_map, tab_data, tab_about = st.tabs(["Map", "Data", "About"])

# ------------------------------------------------------------
# TAB 1 — Map + Bars
# ------------------------------------------------------------
with tab_map:
    col_map, col_side = st.columns([3, 1])

    with col_map:
        fig_map = build_choropleth(join, scale, focused=focused, zoom=st.session_state.zoom)
        st.plotly_chart(
            fig_map,
            use_container_width=True,
            config={"scrollZoom": True, "displaylogo": False},
            on_select="rerun",
            selection_mode="points",
            key=chart_key(st.session_state, "map"),
        )

    with col_side:
        if focused:
            st.markdown(
                f'<div class="details-box">{details_html(focused, focused_value(join, lookup, focused))}</div>',
                unsafe_allow_html=True,
            )
        st.markdown(legend_html(scale, extent, scheme), unsafe_allow_html=True)

    st.markdown(" ")
    fig_bars = build_top_bars(df_rows, TOP_N, focused=focused, scale=scale)
    st.plotly_chart(
        fig_bars,
        use_container_width=True,
        config={"displaylogo": False},
        on_select="rerun",
        selection_mode="points",
        key=chart_key(st.session_state, "bars"),
    )

# ------------------------------------------------------------
# TAB 2 — Data
# ------------------------------------------------------------
with tab_data:
    summary = match_summary(join, df_rows)

    c1, c2, c3 = st.columns(3)
    c1.metric("Geo features", summary.features)
    c2.metric("Matched states", summary.matched)
    c3.metric("Unmatched states", summary.unmatched)

    if summary.ok:
        st.success(format_match_summary(summary, money=False))
    else:
        st.warning(format_match_summary(summary, money=False))

    st.subheader("Dataset")
    view = df_rows.assign(matched=df_rows["state"].isin(join.matched))
    st.dataframe(view, use_container_width=True)
    st.download_button(
        "💾 Download dataset as CSV",
        data=df_rows.to_csv(index=False).encode("utf-8"),
        file_name="states_data.csv",
        mime="text/csv",
    )

    st.subheader("Value distribution")
    counts = bin_counts(df_rows, scale)
    labels = [f"{lo:,}–{hi:,}" for _, lo, hi in scale.legend_bins()]
    fig, ax = plt.subplots(figsize=(8, 3))
    ax.bar(labels, counts, color=[mpl_color(c) for c in scale.colors], edgecolor="#999")
    ax.set_ylabel("States")
    ax.set_title("States per color bin")
    plt.xticks(rotation=45, ha="right", fontsize=7)
    st.pyplot(fig)
    plt.close(fig)

    with st.expander("🧩 Quick summary report (text)", expanded=False):
        report_text = generate_summary_report(df_rows, join)
        st.text_area("Summary Output", report_text, height=250)
        st.download_button(
            label="💾 Download Summary Report",
            data=report_text,
            file_name="State_Values_Summary.txt",
            mime="text/plain",
        )

# ------------------------------------------------------------
# TAB 3 — About
# ------------------------------------------------------------
with tab_about:
    st.subheader("About This Dashboard")
    st.markdown(
        f"""
        ### Data
        - Values: `{DATA_CSV_PATH.name}` with columns `state,value`.
        - Boundaries: PublicaMundi US states GeoJSON, with a local fallback file.
        - Rows are joined to boundaries by **state name**; states without a value are drawn dark gray.

        ### Colors
        - Values are split into nine equal-width bins between the minimum and maximum.
        - Schemes: {", ".join(scheme_names)}.
        """
    )
