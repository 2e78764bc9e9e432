"""
History page: past searches and their ranked matches.
"""

import streamlit as st
from loguru import logger

from hubsearch.clients.errors import ApiError, NotFound
from hubsearch.ui.components import render_ranked_profile
from hubsearch.ui.state import current_token, get_history_client, get_orchestrator


def render_history() -> None:
    """
    Render the history list and the detail of the selected search.
    """
    st.header("🕘 History")

    token = current_token()
    if not token:
        st.info("Enter an API token in the sidebar to see your searches.")
        return

    client = get_history_client()
    try:
        items = client.list_history(token, limit=50)
    except ApiError as e:
        logger.error("Failed to fetch history: {}", e)
        st.error(str(e))
        return

    if not items:
        st.caption("No searches yet.")
        return

    labels = {
        item.search_id: f"{item.timestamp} · {item.query_text} ({item.final_result_count})"
        for item in items
    }
    selected = st.selectbox(
        "Search",
        options=list(labels),
        format_func=lambda sid: labels[sid],
    )
    if not selected:
        return

    try:
        detail = client.get_history_detail(token, selected)
    except NotFound as e:
        st.warning(str(e))
        return
    except ApiError as e:
        logger.error("Failed to fetch history detail {}: {}", selected, e)
        st.error(str(e))
        return

    if detail.response:
        st.markdown(detail.response)
    orchestrator = get_orchestrator()
    for item in detail.profiles:
        render_ranked_profile(item, selected, orchestrator)
