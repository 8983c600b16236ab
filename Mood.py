# Mood.py
# Entry point and landing route: page config, secrets, navigation links.

import streamlit as st

from core.config import PAGE_TITLE, PAGE_ICON
from core.view import load_api_key, unmount_options_view

# --- UI CONFIGURATION ---
st.set_page_config(page_title=PAGE_TITLE, layout="wide", page_icon=PAGE_ICON)

# --- SECRETS (optional) ---
if not load_api_key(st.session_state, st.secrets):
    st.sidebar.caption("No CoinGecko API key configured. Using the public quote endpoint.")

# Landing on this route unmounts the options view and drops its in-flight quote
unmount_options_view(st.session_state)

# --- NAVIGATION ---
nav_home, nav_option, _ = st.columns([1, 1, 6])
with nav_home:
    st.page_link("Mood.py", label="Home", icon="🏠")
with nav_option:
    st.page_link("pages/01_options.py", label="Option", icon="⌥")

st.markdown("---")
st.title("MOOD")
st.markdown(
    "**M**onad **O**ption **O**rderbook **D**ex  \n"
    "Browse the ETH options chain by expiry and strike, then confirm an order intent."
)
st.page_link("pages/01_options.py", label="Launch Options Chain", icon="⚡")
