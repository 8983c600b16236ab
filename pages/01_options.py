# pages/01_options.py
# ETH options chain: spot quote header, expiry selector, strike grid and order confirmation.

import streamlit as st

from core.config import (
    ASSET_SYMBOL, EXPIRY_OPTIONS, GRID_HEIGHT_PX, QUOTE_POLL_SECONDS,
)
from core.chain import (
    CALLS_GROUP, PUTS_GROUP, CHAIN_COLUMNS, CLICKABLE_CELLS, STRIKE_COLUMN,
    build_chain_frame, build_confirm_dialog, expiry_header,
    select_expiry, select_cell, confirm, cancel,
)
from core.quotes import format_quote_text
from core.view import load_api_key, mount_options_view, apply, today_str

# ── View mount (fresh UI state + one quote refresh per mount) ────────────────
view = mount_options_view(st.session_state, api_key=load_api_key(st.session_state, st.secrets))

st.title(f"Options({ASSET_SYMBOL})")

# ── Header: spot quote + today's date ─────────────────────────────────────────
# Polls only while the quote is pending; settlement triggers one full rerun.
_poll = QUOTE_POLL_SECONDS if view.quote.pending else None


@st.fragment(run_every=_poll)
def _quote_header():
    quote = view.quote.state
    text = format_quote_text(quote).replace("$", "\\$")
    st.markdown(f"{ASSET_SYMBOL} Current Value: {text}")
    if _poll is not None and quote.settled:
        st.rerun()


_quote_header()
st.markdown(f"Today Date: {today_str()}")

# ── Expiry selector ───────────────────────────────────────────────────────────
for col, option in zip(st.columns(len(EXPIRY_OPTIONS)), EXPIRY_OPTIONS):
    col.button(
        option.label,
        key=f"expiry_{option.value}",
        type="primary" if view.ui.selected_expiry == option.value else "secondary",
        on_click=apply,
        args=(st.session_state, select_expiry, option.value),
        use_container_width=True,
    )

# ── Confirmation panel ───────────────────────────────────────────────────────
dialog = build_confirm_dialog(view.ui)
if dialog is not None:
    with st.container(border=True):
        st.markdown(f"#### Option: {dialog.instrument_id}")
        st.markdown(f"Strike: {dialog.strike}")
        st.markdown(f"Fair Value: {dialog.fair_value}")

        # Presentational only: confirm does not read these until order submission exists
        in_price, in_size = st.columns(2)
        in_price.number_input(f"Price ({ASSET_SYMBOL})", min_value=0.0, step=0.001, format="%.3f", value=None)
        in_size.number_input("Size", min_value=1, step=1, value=None)

        b_confirm, b_cancel = st.columns(2)
        b_confirm.button(
            "Confirm", key="confirm_order", type="primary", use_container_width=True,
            on_click=apply, args=(st.session_state, confirm),
        )
        b_cancel.button(
            "Cancel", key="cancel_order", use_container_width=True,
            on_click=apply, args=(st.session_state, cancel),
        )

# ── Chain grid ───────────────────────────────────────────────────────────────
frame = build_chain_frame(expiry_header(view.ui))
n_leg = STRIKE_COLUMN

with st.container(height=GRID_HEIGHT_PX, border=True):
    g_calls, g_expiry, g_puts = st.columns([n_leg, 1, n_leg])
    g_calls.markdown(f"**{CALLS_GROUP}**")
    g_expiry.markdown(f"**{frame.columns[STRIKE_COLUMN][0]}**")
    g_puts.markdown(f"**{PUTS_GROUP}**")

    for col, label in zip(st.columns(len(CHAIN_COLUMNS)), CHAIN_COLUMNS):
        col.markdown(f"**{label}**")

    for strike, row in frame.iterrows():
        cells = st.columns(len(CHAIN_COLUMNS))
        for pos, (col, value) in enumerate(zip(cells, row)):
            if pos in CLICKABLE_CELLS:
                leg, side = CLICKABLE_CELLS[pos]
                col.button(
                    "-",
                    key=f"cell_{leg}_{side.value}_{strike}",
                    help=f"{leg} {side.value} @ {strike}",
                    on_click=apply,
                    args=(st.session_state, select_cell, side, strike),
                    use_container_width=True,
                )
            elif pos == STRIKE_COLUMN:
                col.markdown(f"**{value}**")
            else:
                col.write(value)
