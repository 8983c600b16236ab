"""Tests for quote fetching, payload parsing, header text and the fetcher lifecycle."""

from __future__ import annotations

import threading
import time
from unittest.mock import MagicMock, patch

import pytest
import requests

from core.models import QuoteState, QuoteStatus
from core.quotes import (
    QuoteFetcher,
    fetch_spot_quote,
    format_quote_text,
    parse_quote_payload,
)


def _response(status: int = 200, payload=None, json_error: Exception | None = None) -> MagicMock:
    res = MagicMock()
    res.status_code = status
    if json_error is not None:
        res.json.side_effect = json_error
    else:
        res.json.return_value = payload
    return res


def test_parse_quote_payload_reads_asset_currency_price() -> None:
    assert parse_quote_payload({"ethereum": {"usd": 3123.45}}) == QuoteState.available(3123.45)


def test_parse_quote_payload_accepts_integer_price() -> None:
    state = parse_quote_payload({"ethereum": {"usd": 3000}})
    assert state.status is QuoteStatus.AVAILABLE
    assert state.price == 3000.0


@pytest.mark.parametrize("payload", [
    None,
    [],
    {},
    {"ethereum": None},
    {"ethereum": {}},
    {"ethereum": {"eur": 2800.0}},
    {"bitcoin": {"usd": 60000.0}},
    {"ethereum": {"usd": "3123.45"}},
    {"ethereum": {"usd": True}},
    {"ethereum": {"usd": float("nan")}},
    {"ethereum": {"usd": float("inf")}},
])
def test_parse_quote_payload_malformed_is_unavailable(payload) -> None:
    assert parse_quote_payload(payload) == QuoteState.unavailable()


def test_fetch_spot_quote_available() -> None:
    with patch("core.quotes.requests.get", return_value=_response(200, {"ethereum": {"usd": 3123.45}})) as get:
        state = fetch_spot_quote()

    assert state == QuoteState.available(3123.45)
    _, kwargs = get.call_args
    assert kwargs["params"] == {"ids": "ethereum", "vs_currencies": "usd"}
    assert kwargs["timeout"] > 0
    assert kwargs["headers"] is None


def test_fetch_spot_quote_sends_api_key_header() -> None:
    with patch("core.quotes.requests.get", return_value=_response(200, {"ethereum": {"usd": 1.0}})) as get:
        fetch_spot_quote(api_key="demo-key")

    _, kwargs = get.call_args
    assert kwargs["headers"] == {"x-cg-demo-api-key": "demo-key"}


@pytest.mark.parametrize("error", [
    requests.exceptions.Timeout("slow"),
    requests.exceptions.ConnectionError("down"),
    requests.exceptions.RequestException("other"),
])
def test_fetch_spot_quote_network_errors_are_unavailable(error) -> None:
    with patch("core.quotes.requests.get", side_effect=error):
        assert fetch_spot_quote() == QuoteState.unavailable()


def test_fetch_spot_quote_http_error_is_unavailable() -> None:
    with patch("core.quotes.requests.get", return_value=_response(429, {"status": "rate limited"})):
        assert fetch_spot_quote() == QuoteState.unavailable()


def test_fetch_spot_quote_invalid_json_is_unavailable() -> None:
    with patch("core.quotes.requests.get", return_value=_response(200, json_error=ValueError("no json"))):
        assert fetch_spot_quote() == QuoteState.unavailable()


def test_fetch_spot_quote_malformed_payload_is_unavailable() -> None:
    with patch("core.quotes.requests.get", return_value=_response(200, {"ethereum": {"usd": None}})):
        assert fetch_spot_quote() == QuoteState.unavailable()


def test_format_quote_text() -> None:
    assert format_quote_text(QuoteState.pending()) == "LOADING..."
    assert format_quote_text(QuoteState.available(3123.45)) == "$3123.45"
    assert format_quote_text(QuoteState.available(3000.0)) == "$3000"
    assert format_quote_text(QuoteState.unavailable()) == ""


def test_fetcher_starts_pending_and_settles_available() -> None:
    release = threading.Event()

    def fetch(api_key=None):
        release.wait(5)
        return QuoteState.available(3123.45)

    fetcher = QuoteFetcher(fetch=fetch)
    assert fetcher.refresh_quote() == QuoteState.pending()
    assert fetcher.pending is True

    release.set()
    assert fetcher.wait(5) == QuoteState.available(3123.45)
    assert fetcher.pending is False
    fetcher.close()


def test_fetcher_issues_one_request_per_mount() -> None:
    calls = []

    def fetch(api_key=None):
        calls.append(api_key)
        return QuoteState.available(1.0)

    fetcher = QuoteFetcher(fetch=fetch, api_key="k")
    fetcher.refresh_quote()
    fetcher.wait(5)
    assert fetcher.refresh_quote() == QuoteState.available(1.0)
    fetcher.wait(5)

    assert calls == ["k"]
    fetcher.close()


def test_fetcher_exception_degrades_to_unavailable() -> None:
    def fetch(api_key=None):
        raise RuntimeError("boom")

    fetcher = QuoteFetcher(fetch=fetch)
    fetcher.refresh_quote()
    assert fetcher.wait(5) == QuoteState.unavailable()
    fetcher.close()


def test_fetcher_discards_result_after_close() -> None:
    started, release = threading.Event(), threading.Event()

    def fetch(api_key=None):
        started.set()
        release.wait(5)
        return QuoteState.available(3123.45)

    fetcher = QuoteFetcher(fetch=fetch)
    fetcher.refresh_quote()
    assert started.wait(5)
    fetcher.close()
    release.set()
    fetcher.wait(5)

    assert fetcher.closed is True
    assert fetcher.state == QuoteState.pending()


def test_fetcher_closed_before_start_never_fetches() -> None:
    fetch = MagicMock()
    fetcher = QuoteFetcher(fetch=fetch)
    fetcher.close()
    fetcher.refresh_quote()

    fetch.assert_not_called()
    assert fetcher.state == QuoteState.pending()


def test_format_quote_text_handles_integer_price() -> None:
    assert QuoteState.available(3000).price == 3000.0
    assert format_quote_text(QuoteState.available(3000)) == "$3000"
    assert format_quote_text(QuoteState(QuoteStatus.AVAILABLE, 3000)) == "$3000"


def test_fetcher_integer_result_formats() -> None:
    fetcher = QuoteFetcher(fetch=lambda api_key=None: QuoteState.available(2999))
    fetcher.refresh_quote()
    assert format_quote_text(fetcher.wait(5)) == "$2999"


def _worker_alive(fetcher: QuoteFetcher) -> bool:
    return any(
        t.name.startswith(fetcher.thread_name_prefix + "_") and t.is_alive()
        for t in threading.enumerate()
    )


def test_fetcher_releases_worker_thread_after_settling() -> None:
    fetcher = QuoteFetcher(fetch=lambda api_key=None: QuoteState.available(1.0))
    fetcher.refresh_quote()
    fetcher.wait(5)

    deadline = time.monotonic() + 5
    while _worker_alive(fetcher) and time.monotonic() < deadline:
        time.sleep(0.01)

    assert not _worker_alive(fetcher)
    assert fetcher.closed is False
    assert fetcher.state == QuoteState.available(1.0)
