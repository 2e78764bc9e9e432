"""Centralized session-state initialization and client wiring."""

import streamlit as st

from hubsearch.clients.history import HistoryClient
from hubsearch.session.orchestrator import SessionOrchestrator, build_orchestrator
from hubsearch.utils.env_cfg import load_api_env

PAGES: list[str] = [
    "Discovery",
    "History",
]
"""Ordered list of page names for sidebar navigation."""

PAGE_ICONS: dict[str, str] = {
    "Discovery": "🔎",
    "History": "🕘",
}
"""Emoji icon for each page."""


def init_session_state() -> None:
    """
    Initialise all session-state keys with sane defaults.

    Must be called once, before any widget is rendered, so that every key
    referenced elsewhere already exists.
    """
    api_cfg = load_api_env()
    defaults: dict[str, object] = {
        "current_page": "Discovery",
        "api_token": api_cfg.api_token or "",
        "workspaces": ", ".join(api_cfg.workspace_ids),
        "last_error": None,
        "search_results": None,
        "_last_audio_digest": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def current_token() -> str | None:
    """Return the bearer token entered in the sidebar, if any."""
    return st.session_state.get("api_token") or None


def get_orchestrator() -> SessionOrchestrator:
    """
    Return the orchestrator of this browser session, creating it on first use.

    Returns:
        SessionOrchestrator: The session driver for the Discovery page.
    """
    if "orchestrator" not in st.session_state:
        st.session_state.orchestrator = build_orchestrator(
            load_api_env(), token_provider=current_token
        )
    return st.session_state.orchestrator


def get_history_client() -> HistoryClient:
    """
    Return the history client of this browser session.

    Returns:
        HistoryClient: Client for past searches.
    """
    if "history_client" not in st.session_state:
        st.session_state.history_client = HistoryClient(load_api_env())
    return st.session_state.history_client


def start_new_search() -> None:
    """Abandon the current conversation and clear its results."""
    get_orchestrator().reset()
    st.session_state.last_error = None
    st.session_state.search_results = None
    st.session_state._last_audio_digest = None
