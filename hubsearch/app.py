import sys
from pathlib import Path

import streamlit as st
from loguru import logger
from streamlit.runtime import exists
from streamlit.web import cli as st_cli

from hubsearch.ui.discovery import render_discovery
from hubsearch.ui.history import render_history
from hubsearch.ui.state import (
    PAGE_ICONS,
    PAGES,
    get_orchestrator,
    init_session_state,
    start_new_search,
)
from hubsearch.utils.logging_cfg import setup_logging


@st.cache_resource
def _init_logging() -> Path:
    return setup_logging()


def setup_app() -> None:
    """
    Configure the page and initialise state for this browser session.
    """
    st.set_page_config(page_title="Hub Search", page_icon="🔎", layout="wide")
    _init_logging()
    init_session_state()


def render_sidebar() -> None:
    """Render navigation, the token field and the session summary."""
    with st.sidebar:
        st.markdown("## 🔎 Hub Search")
        st.caption("Find the right people in your network")

        st.divider()

        st.radio(
            "Navigation",
            options=PAGES,
            format_func=lambda p: f"{PAGE_ICONS.get(p, '')}  {p}",
            key="current_page",
            label_visibility="collapsed",
        )

        st.divider()

        st.text_input("API token", key="api_token", type="password")

        orchestrator = get_orchestrator()
        st.caption(f"State: {orchestrator.state.value}")
        if orchestrator.session_id:
            st.caption(f"Session: `{orchestrator.session_id}`")
            st.button("Start over", on_click=start_new_search, key="sidebar_reset")


def main() -> None:
    setup_app()
    render_sidebar()

    page = st.session_state.current_page
    if page == "History":
        render_history()
    else:
        render_discovery()


# ---- Streamlit CLI wrapper ----------------------------------------------- #
def run() -> None:
    """
    CLI entry point for the Streamlit app. This function is used to run the app from the command
    line. It sets up the command line arguments as if the user typed them. For example: `streamlit
    run app.py <any extra args>`.
    """
    app_path = Path(__file__).resolve()
    sys.argv = ["streamlit", "run", str(app_path)] + sys.argv[1:]
    sys.exit(st_cli.main())


if __name__ == "__main__":
    try:
        if exists():
            main()
        else:
            run()
    except ImportError as e:
        logger.exception("Failed to run the Streamlit app: {}", e)
        run()
