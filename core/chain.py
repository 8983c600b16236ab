# core/chain.py
# Options chain interaction controller: pure transitions over UIState, the grid layout
# and the confirmation dialog view model. No Streamlit imports.

from dataclasses import dataclass
from typing import Protocol

import pandas as pd

from core.config import (
    EXPIRY_OPTIONS, STRIKES, INSTRUMENT_PREFIX, FAIR_VALUE_PLACEHOLDER,
    EXPIRY_HEADER_PLACEHOLDER, INSTRUMENT_EXPIRY_PLACEHOLDER,
)
from core.models import OrderIntent, Side, UIState

EXPIRY_VALUES = tuple(o.value for o in EXPIRY_OPTIONS)

# ── Grid Layout ───────────────────────────────────────────────────────────────
CALLS_GROUP = "calls"
PUTS_GROUP = "puts"
# Column keys are unique per leg; CHAIN_COLUMNS holds the displayed header labels
LEG_FIELDS = ("BidSize", "Bid", "Mark", "Ask", "AskSize")
LEG_LABELS = ("Size", "Bid", "Mark", "Ask", "Size")
CHAIN_COLUMNS = LEG_LABELS + ("Strike",) + LEG_LABELS
STRIKE_COLUMN = len(LEG_FIELDS)

# Column position → (leg, side) for the four clickable cells of each row
CLICKABLE_CELLS = {
    1: ("call", Side.BID),
    3: ("call", Side.ASK),
    7: ("put", Side.BID),
    9: ("put", Side.ASK),
}


# ─────────────────────────────────────────────────────────────────────────────
# Transitions
# ─────────────────────────────────────────────────────────────────────────────
def select_expiry(state: UIState, value: str) -> UIState:
    """Unknown expiries are rejected as a no-op. An open dialog stays open."""
    # tuple membership compares by equality, so unhashable input is just unknown
    if value not in EXPIRY_VALUES or value == state.selected_expiry:
        return state
    return UIState(value, state.selected_order, state.confirm_open)


def select_cell(state: UIState, side, strike: str) -> UIState:
    """Records the clicked (side, strike) and opens the confirmation dialog."""
    try:
        side = Side(side)
    except ValueError:
        return state
    if strike not in STRIKES:
        return state
    return UIState(state.selected_expiry, OrderIntent(side, strike), True)


def confirm(state: UIState, gateway: "OrderGateway | None" = None) -> UIState:
    """
    Closes the dialog and clears the intent. When a gateway is given it receives
    the ticket first; the page passes none while order submission is unimplemented.
    """
    if not state.confirm_open:
        return state
    if gateway is not None:
        gateway.submit_order(OrderTicket(state.selected_order, state.selected_expiry))
    return UIState(state.selected_expiry, None, False)


def cancel(state: UIState) -> UIState:
    """Closes the dialog and clears the intent, same as confirm minus any submission."""
    if not state.confirm_open:
        return state
    return UIState(state.selected_expiry, None, False)


# ─────────────────────────────────────────────────────────────────────────────
# Order backend seam
# ─────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class OrderTicket:
    intent: OrderIntent
    expiry: str | None


@dataclass(frozen=True)
class SubmitResult:
    accepted: bool
    message: str = ""


class OrderGateway(Protocol):
    def submit_order(self, ticket: OrderTicket) -> SubmitResult: ...


# ─────────────────────────────────────────────────────────────────────────────
# View models
# ─────────────────────────────────────────────────────────────────────────────
def expiry_header(state: UIState) -> str:
    return state.selected_expiry or EXPIRY_HEADER_PLACEHOLDER


def build_chain_frame(expiry_label: str, strikes=STRIKES) -> pd.DataFrame:
    """
    Chain grid as a DataFrame: one row per strike, MultiIndex columns
    (group, field) with calls on the left, the expiry column in the middle and
    puts on the right. Quote cells are blank; only the strike column is filled.
    """
    columns = pd.MultiIndex.from_tuples(
        [(CALLS_GROUP, f) for f in LEG_FIELDS]
        + [(expiry_label, "Strike")]
        + [(PUTS_GROUP, f) for f in LEG_FIELDS]
    )
    rows = [[""] * STRIKE_COLUMN + [s] + [""] * len(LEG_FIELDS) for s in strikes]
    return pd.DataFrame(rows, index=pd.Index(list(strikes), name="strike"), columns=columns)


def instrument_id(expiry: str | None, side: Side) -> str:
    """ETHUSD-<expiry without separators, uppercased> (<SIDE>), e.g. ETHUSD-20250831 (BID)."""
    code = expiry.replace("-", "").upper() if expiry else INSTRUMENT_EXPIRY_PLACEHOLDER
    return f"{INSTRUMENT_PREFIX}-{code} ({Side(side).value.upper()})"


@dataclass(frozen=True)
class ConfirmDialogView:
    instrument_id: str
    strike: str
    fair_value: str


def build_confirm_dialog(state: UIState) -> ConfirmDialogView | None:
    if not state.confirm_open or state.selected_order is None:
        return None
    order = state.selected_order
    return ConfirmDialogView(
        instrument_id=instrument_id(state.selected_expiry, order.side),
        strike=order.strike,
        fair_value=f"{FAIR_VALUE_PLACEHOLDER:.2f}",
    )
