from __future__ import annotations

import streamlit as st

from core.config import get_settings
from core.logger import setup_logger
from core.state import get_state, reset_state
from core.utils import format_uk_date

st.title("🌵 Agave Production Estimator")
st.caption("Track agave batches, forecast fermented liquid and bottle output, and split bottles between the Kenya and UK markets.")

settings = get_settings()
setup_logger("core", settings.log_level, settings.log_dir)
state = get_state(st.session_state, settings)

with st.sidebar:
    st.subheader("Seed settings")
    st.write(f"**First batch:** {settings.seed_batch} on {format_uk_date(settings.seed_date)}")
    st.write(f"**Batches:** {settings.row_count}, every {settings.cadence_weeks} weeks")
    st.write(f"**Default bottle ratio:** {settings.bottle_ratio:g}")

st.info(
    "Use **🧮 Production Estimator** to edit batches and the global bottle ratio, then "
    "**📊 Market Distribution** to set Kenya sales per month. Edits live for this browser session only.",
    icon="ℹ️",
)

c1, c2 = st.columns(2)
c1.metric("Batches", f"{len(state.rows)}")
c2.metric("Months covered", f"{len(state.aggregates())}")

if st.button("Reset to seed data"):
    try:
        reset_state(st.session_state, settings)
        st.success("Production table reset.")
        st.rerun()
    except Exception as e:
        st.error(str(e))
