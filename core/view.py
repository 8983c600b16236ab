# core/view.py
# Per-mount lifecycle of the options view. The session argument is any mutable mapping
# (st.session_state in the app, a plain dict in tests).

import datetime
import logging
from dataclasses import dataclass, field

from core.config import OPTIONS_VIEW_KEY, API_KEY_SESSION_KEY, API_KEY_SECRET
from core.models import UIState
from core.quotes import QuoteFetcher, fetch_spot_quote

logger = logging.getLogger(__name__)


@dataclass
class OptionsView:
    """UI state and quote fetcher of one options view mount."""
    quote: QuoteFetcher
    ui: UIState = field(default_factory=UIState)


def mount_options_view(session, api_key: str | None = None, fetch=fetch_spot_quote) -> OptionsView:
    """
    Returns the live view, creating a fresh one on first render after a mount.
    A fresh view starts its single quote refresh immediately.
    """
    view = session.get(OPTIONS_VIEW_KEY)
    if isinstance(view, OptionsView) and not view.quote.closed:
        return view
    view = OptionsView(quote=QuoteFetcher(fetch=fetch, api_key=api_key))
    session[OPTIONS_VIEW_KEY] = view
    view.quote.refresh_quote()
    logger.debug("Options view mounted")
    return view


def load_api_key(session, secrets) -> str | None:
    """
    Copies the optional CoinGecko key from secrets into the session and returns it.
    Either route may be the first one a browser session opens, so both call this.
    """
    if session.get(API_KEY_SESSION_KEY):
        return session[API_KEY_SESSION_KEY]
    try:
        api_key = str(secrets[API_KEY_SECRET]).strip()
    except (KeyError, FileNotFoundError):
        return None
    if not api_key:
        return None
    session[API_KEY_SESSION_KEY] = api_key
    return api_key


def unmount_options_view(session) -> None:
    """Closes the view's quote fetcher and discards its state."""
    view = session.get(OPTIONS_VIEW_KEY)
    if view is None:
        return
    if isinstance(view, OptionsView):
        view.quote.close()
    del session[OPTIONS_VIEW_KEY]
    logger.debug("Options view unmounted")


def apply(session, transition, *args) -> None:
    """Streamlit on_click callback: replaces the view's UIState with transition(state, *args)."""
    view = session.get(OPTIONS_VIEW_KEY)
    if not isinstance(view, OptionsView):
        return
    view.ui = transition(view.ui, *args)


def today_str(today: datetime.date | None = None) -> str:
    today = today or datetime.date.today()
    return today.strftime('%Y-%m-%d')
