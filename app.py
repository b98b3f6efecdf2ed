from __future__ import annotations

import streamlit as st

st.set_page_config(page_title="Agave Production Estimator", page_icon="🌵", layout="wide")

pages = [
    st.Page("home.py", title="Home", icon="🏠"),
    st.Page("pages/1_🧮_Estimator.py", title="Production Estimator", icon="🧮"),
    st.Page("pages/2_📊_Distribution.py", title="Market Distribution", icon="📊"),
]

st.navigation(pages).run()
