# core/models.py
# Immutable value types shared by the chain controller, quote fetcher and pages.
# No Streamlit imports, so these are safe to use from tests and background threads.

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ExpiryOption:
    """One offered expiry: display label plus ISO calendar date (e.g. 2025-08-31)."""
    label: str
    value: str


class Side(str, Enum):
    BID = "bid"
    ASK = "ask"


@dataclass(frozen=True)
class OrderIntent:
    """A (side, strike) pair picked from the grid, pending confirmation."""
    side: Side
    strike: str


@dataclass(frozen=True)
class UIState:
    """
    Interaction state of one options view.

    Invariant: confirm_open implies selected_order is not None.
    """
    selected_expiry: str | None = None
    selected_order: OrderIntent | None = None
    confirm_open: bool = False


class QuoteStatus(Enum):
    PENDING = "pending"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class QuoteState:
    status: QuoteStatus
    price: float | None = None

    @classmethod
    def pending(cls) -> "QuoteState":
        return cls(QuoteStatus.PENDING)

    @classmethod
    def available(cls, price: float) -> "QuoteState":
        return cls(QuoteStatus.AVAILABLE, float(price))

    @classmethod
    def unavailable(cls) -> "QuoteState":
        return cls(QuoteStatus.UNAVAILABLE)

    @property
    def settled(self) -> bool:
        return self.status is not QuoteStatus.PENDING
