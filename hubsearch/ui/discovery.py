"""
Discovery page: refine a need through clarifying questions, by text or voice, then search.
"""

import hashlib

import streamlit as st
from loguru import logger

from hubsearch.clients.errors import ApiError
from hubsearch.session.orchestrator import SessionOrchestrator
from hubsearch.session.types import SessionState, TurnOutcome
from hubsearch.ui.components import render_search_profile
from hubsearch.ui.state import get_orchestrator, start_new_search


def render_discovery() -> None:
    """
    Render the discovery dialogue.
    This includes the turn history, text and voice input, the editable refined query and the results.
    """
    st.header("🔎 Discovery")
    orchestrator = get_orchestrator()

    st.button("✨ New search", on_click=start_new_search)

    # ── Turn history ─────────────────────────────────────────
    for turn in orchestrator.session.turns:
        with st.chat_message("user" if turn.role == "user" else "assistant"):
            st.markdown(turn.text)

    if st.session_state.last_error:
        st.error(st.session_state.last_error)

    if orchestrator.state is SessionState.COMPLETE:
        _render_handoff(orchestrator)
        return

    # ── Voice input ──────────────────────────────────────────
    audio = st.audio_input("🎙️ Describe who you need")
    if audio is not None:
        data = audio.getvalue()
        digest = hashlib.sha256(data).hexdigest()
        if data and digest != st.session_state._last_audio_digest:
            st.session_state._last_audio_digest = digest
            with st.spinner("Transcribing…"):
                outcome = orchestrator.submit_audio(
                    data,
                    filename=audio.name or "recording.wav",
                    content_type=audio.type or "audio/wav",
                )
            _apply(outcome)

    # ── Text input ───────────────────────────────────────────
    placeholder = (
        "Describe the person you are looking for…"
        if orchestrator.state is SessionState.IDLE
        else "Answer the question above…"
    )
    if prompt := st.chat_input(
        placeholder, disabled=orchestrator.state is SessionState.REFINING
    ):
        with st.spinner("Thinking…"):
            outcome = orchestrator.submit_text(prompt)
        _apply(outcome)


def _apply(outcome: TurnOutcome) -> None:
    """
    Store a turn outcome for display and rerun the page.

    Args:
        outcome: The result of the last input.
    """
    if outcome.stale:
        return
    st.session_state.last_error = outcome.error
    st.rerun()


def _render_handoff(orchestrator: SessionOrchestrator) -> None:
    """
    Show the refined query for editing and run the search.

    Args:
        orchestrator: The completed session driver.
    """
    st.success("Your search is ready.")
    edited = st.text_area("Refined query", value=orchestrator.refined_query or "")
    workspaces = st.text_input(
        "Workspaces (comma-separated)", key="workspaces"
    )

    if st.button("Search", type="primary"):
        workspace_ids = [w.strip() for w in workspaces.split(",") if w.strip()]
        try:
            with st.spinner("Searching your network…"):
                st.session_state.search_results = orchestrator.search(
                    workspace_ids, edited_query=edited
                )
            st.session_state.last_error = None
        except ApiError as e:
            logger.error("Search failed: {}", e)
            st.session_state.last_error = str(e)
        st.rerun()

    results = st.session_state.search_results
    if results is None:
        return
    if results.response:
        st.markdown(results.response)
    if not results.profiles:
        st.info("No matches found.")
    for rank, person in enumerate(results.profiles, start=1):
        render_search_profile(person, rank, orchestrator)
