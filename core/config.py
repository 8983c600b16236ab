# core/config.py
# All hardcoded constants for the options chain view, kept as a single source of truth.

from core.models import ExpiryOption

# ── Underlying Asset ─────────────────────────────────────────────────────────
ASSET_ID = "ethereum"           # CoinGecko coin id
ASSET_SYMBOL = "ETH"
QUOTE_CURRENCY = "usd"
INSTRUMENT_PREFIX = "ETHUSD"    # Prefix of the derived instrument identifier

# ── Quote Source ─────────────────────────────────────────────────────────────
QUOTE_URL = "https://api.coingecko.com/api/v3/simple/price"
QUOTE_API_KEY_HEADER = "x-cg-demo-api-key"
QUOTE_TIMEOUT_SECONDS = 8
QUOTE_POLL_SECONDS = 0.5        # Header fragment refresh while the quote is pending

# ── Chain Catalogs (closed sets) ─────────────────────────────────────────────
EXPIRY_OPTIONS = (
    ExpiryOption(label="31 JUL 25", value="2025-07-31"),
    ExpiryOption(label="31 AUG 25", value="2025-08-31"),
    ExpiryOption(label="30 SEP 25", value="2025-09-30"),
)

STRIKES = ("2,700", "2,800", "2,900", "3,000", "3,100", "3,200")

# ── Placeholders (no pricing backend yet) ────────────────────────────────────
FAIR_VALUE_PLACEHOLDER = 0.0
EXPIRY_HEADER_PLACEHOLDER = "Expiry Date"
INSTRUMENT_EXPIRY_PLACEHOLDER = "TBD"

# ── Layout ───────────────────────────────────────────────────────────────────
GRID_HEIGHT_PX = 520            # Fixed height of the scrollable chain grid

# ── Session State Keys ───────────────────────────────────────────────────────
OPTIONS_VIEW_KEY = "options_view"
API_KEY_SESSION_KEY = "coingecko_api_key"
API_KEY_SECRET = "coingecko_api_key"       # Key name in .streamlit/secrets.toml

# ── App Identity ──────────────────────────────────────────────────────────────
PAGE_TITLE = "MOOD | Monad Option Orderbook Dex"
PAGE_ICON = "⌥"
