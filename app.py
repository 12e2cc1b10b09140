import logging

import pandas as pd
import streamlit as st

from fuelcore.display import cards_html, dashboard_css, footer_html, insights_html, to_csv_bytes
from fuelcore.settings import normalize_settings
from fuelcore.state import DashboardSession

logging.basicConfig(level=logging.INFO)


def get_session() -> DashboardSession:
    session = st.session_state.get("dashboard_session")
    if session is None:
        session = DashboardSession(normalize_settings({}))
        session.load_sync()
        st.session_state["dashboard_session"] = session
    return session


def render_theme_toggle(session: DashboardSession):
    cols = st.columns([1, 5])
    dark = cols[0].toggle("Dark mode", value=session.theme == "dark", label_visibility="collapsed")
    if dark != (session.theme == "dark"):
        session.toggle_theme()
    cols[1].markdown(f"**{session.theme_label}**")


def render_exports(payload: dict):
    quality = payload["quality"]
    st.write(f"Rows loaded: {quality['row_count']:,}")
    if quality["missing_columns"]:
        st.warning(f"Missing columns: {', '.join(quality['missing_columns'])}")
    st.dataframe(pd.DataFrame(quality["fields"]).T, use_container_width=True)

    exports = [
        ("Fleet CSV", "fleet", "fleet.csv"),
        ("Top vehicles CSV", "top10", "top10.csv"),
        ("Cost distribution CSV", "top5_cost", "top5_cost.csv"),
    ]
    cols = st.columns(len(exports))
    for col, (label, key, file_name) in zip(cols, exports):
        col.download_button(label, data=to_csv_bytes(pd.DataFrame(payload[key])), file_name=file_name, mime="text/csv")


# ---------- UI setup ----------
st.set_page_config(page_title="Fleet Fuel Efficiency & Cost Dashboard", layout="wide")
session = get_session()

with st.sidebar:
    st.markdown("### Display")
    top_n = st.slider("Top N vehicles by fuel usage", min_value=5, max_value=25, value=session.settings.top_n)
    cost_top_n = st.slider("Vehicles in cost distribution", min_value=1, max_value=10, value=session.settings.cost_top_n)

render_theme_toggle(session)
overrides = {"top_n": top_n, "cost_top_n": cost_top_n}
settings = session.view_settings(overrides)
st.markdown(dashboard_css(settings.theme), unsafe_allow_html=True)

st.title("🚛 Fleet Fuel Efficiency & Cost Dashboard")
st.write("Visual insights for reducing fuel consumption and operational cost")

payload = session.payload(overrides)
charts = session.charts(overrides)
if session.fleet.empty:
    st.info(f"No fleet records loaded. Place {settings.csv_path} in the public/ folder.")

st.markdown(cards_html(payload["cards"]), unsafe_allow_html=True)

chart_cols = st.columns(3)
for col, key in zip(chart_cols, ["top10_litres", "distance_vs_litres", "cost_distribution"]):
    with col:
        st.altair_chart(charts[key], use_container_width=True)

st.markdown(insights_html(payload["recommendations"]), unsafe_allow_html=True)

with st.expander("Data quality & export", expanded=False):
    render_exports(payload)

st.markdown(footer_html(), unsafe_allow_html=True)
