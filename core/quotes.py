# core/quotes.py
# Spot price fetching for the header. CoinGecko's simple/price endpoint is the only source.
# Every failure degrades to QuoteState.unavailable(); nothing here raises to the page.

import logging
import math
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError

import requests

from core.config import (
    ASSET_ID, QUOTE_CURRENCY, QUOTE_URL, QUOTE_API_KEY_HEADER, QUOTE_TIMEOUT_SECONDS,
)
from core.models import QuoteState, QuoteStatus

logger = logging.getLogger(__name__)


def parse_quote_payload(data, asset: str = ASSET_ID, currency: str = QUOTE_CURRENCY) -> QuoteState:
    """
    Reads data[asset][currency] from a simple/price response.
    Anything other than a finite real number at that path is Unavailable.
    """
    if not isinstance(data, dict):
        return QuoteState.unavailable()
    by_currency = data.get(asset)
    if not isinstance(by_currency, dict):
        return QuoteState.unavailable()
    price = by_currency.get(currency)
    # bool is an int subclass; reject it explicitly
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        return QuoteState.unavailable()
    if not math.isfinite(price):
        return QuoteState.unavailable()
    return QuoteState.available(float(price))


def fetch_spot_quote(
    asset: str = ASSET_ID,
    currency: str = QUOTE_CURRENCY,
    api_key: str | None = None,
    timeout: float = QUOTE_TIMEOUT_SECONDS,
) -> QuoteState:
    """
    Issues one GET to the quote source and returns the settled state.

    Parameters
    ----------
    asset    : CoinGecko coin id (e.g. "ethereum")
    currency : quote currency id (e.g. "usd")
    api_key  : optional CoinGecko demo key, sent as a header when present
    timeout  : seconds before the request is abandoned

    Returns
    -------
    QuoteState, either Available(price) or Unavailable.
    """
    params = {"ids": asset, "vs_currencies": currency}
    headers = {QUOTE_API_KEY_HEADER: api_key} if api_key else None
    try:
        res = requests.get(QUOTE_URL, params=params, headers=headers, timeout=timeout)
        if res.status_code != 200:
            logger.warning("Quote source returned HTTP %s for %s/%s", res.status_code, asset, currency)
            return QuoteState.unavailable()
        data = res.json()
    except requests.exceptions.Timeout:
        logger.warning("Timeout fetching %s/%s quote after %ss", asset, currency, timeout)
        return QuoteState.unavailable()
    except requests.exceptions.ConnectionError:
        logger.warning("Cannot reach quote source at %s", QUOTE_URL)
        return QuoteState.unavailable()
    except requests.exceptions.RequestException as e:
        logger.warning("Quote request failed: %s", e)
        return QuoteState.unavailable()
    except ValueError as e:
        logger.warning("Quote response is not valid JSON: %s", e)
        return QuoteState.unavailable()

    state = parse_quote_payload(data, asset, currency)
    if state.status is QuoteStatus.UNAVAILABLE:
        logger.warning("Quote response has no numeric %s/%s price: %r", asset, currency, data)
    return state


def format_quote_text(state: QuoteState) -> str:
    """Header text: LOADING... while pending, $<price> when available, blank otherwise."""
    if state.status is QuoteStatus.PENDING:
        return "LOADING..."
    if state.status is QuoteStatus.AVAILABLE:
        price = float(state.price)
        return f"${int(price)}" if price.is_integer() else f"${price!r}"
    return ""


class QuoteFetcher:
    """
    One quote refresh bound to the lifetime of an options view.

    refresh_quote() starts a single background fetch; its result is applied
    only while the fetcher is open. After close() a late completion is dropped,
    so a torn-down view never receives a write.
    """

    def __init__(self, fetch=fetch_spot_quote, api_key: str | None = None):
        self._fetch = fetch
        self._api_key = api_key
        self._lock = threading.Lock()
        self._state = QuoteState.pending()
        self._executor: ThreadPoolExecutor | None = None
        self._future: Future | None = None
        self._closed = False

    @property
    def thread_name_prefix(self) -> str:
        return f"quote-fetch-{id(self):x}"

    @property
    def state(self) -> QuoteState:
        with self._lock:
            return self._state

    @property
    def pending(self) -> bool:
        return not self.state.settled

    @property
    def closed(self) -> bool:
        return self._closed

    def refresh_quote(self) -> QuoteState:
        """Starts the one fetch of this mount. Repeated calls are no-ops."""
        with self._lock:
            if self._future is not None or self._closed:
                return self._state
            self._state = QuoteState.pending()
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=self.thread_name_prefix)
            self._future = self._executor.submit(self._run)
            return self._state

    def _run(self) -> QuoteState:
        try:
            result = self._fetch(api_key=self._api_key)
        except Exception:
            logger.exception("Quote fetch raised; treating quote as unavailable")
            result = QuoteState.unavailable()
        if not isinstance(result, QuoteState) or not result.settled:
            result = QuoteState.unavailable()
        self._settle(result)
        # one fetch per mount: release the worker thread as soon as it is done
        self._executor.shutdown(wait=False)
        return result

    def _settle(self, result: QuoteState) -> None:
        with self._lock:
            if self._closed:
                logger.debug("Discarding quote for a closed view: %s", result)
                return
            if self._state.settled:
                return
            self._state = result
        logger.debug("Quote settled: %s", result)

    def wait(self, timeout: float | None = None) -> QuoteState:
        """Blocks until the fetch completes or timeout elapses; returns the current state."""
        future = self._future
        if future is not None:
            try:
                future.result(timeout=timeout)
            except (FuturesTimeoutError, CancelledError):
                pass
        return self.state

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            future, executor = self._future, self._executor
        if future is not None:
            future.cancel()
        if executor is not None:
            executor.shutdown(wait=False)
        logger.debug("Quote fetcher closed")
