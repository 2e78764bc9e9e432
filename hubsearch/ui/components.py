"""
Reusable rendering components for search matches.
"""

from typing import Any

import streamlit as st

from hubsearch.clients.schemas import (
    CriteriaMatch,
    RankedProfile,
    SearchProfile,
    TelemetryEventType,
)
from hubsearch.session.orchestrator import SessionOrchestrator


def format_score(score: Any) -> str:
    """
    Format score values for display.

    Args:
        score: The score value to format.

    Returns:
        Formatted score string.
    """
    try:
        return f"{float(score):.2f}"
    except (TypeError, ValueError):
        return "—"


def describe_criteria(match: str | CriteriaMatch) -> str:
    """
    Render one criteria match as a single markdown line.

    Args:
        match: A plain string or a structured match.

    Returns:
        Markdown text.
    """
    if isinstance(match, str):
        return match
    label = match.question or match.headline or match.criterion_id or "Criterion"
    level = f" ({match.match_level})" if match.match_level else ""
    evidence = f": {match.evidence}" if match.evidence else ""
    return f"**{label}**{level}{evidence}"


def _linkedin_button(
    url: str | None,
    person_id: str,
    key: str,
    orchestrator: SessionOrchestrator,
    search_id: str | None = None,
) -> None:
    if not url:
        return
    if st.button("in LinkedIn", key=f"li_{key}"):
        orchestrator.track(
            TelemetryEventType.LINKEDIN_CLICK,
            {"person_id": person_id, "linkedin_profile": url},
            search_id=search_id,
        )
        st.markdown(f"[Open profile]({url})")


def render_search_profile(
    person: SearchProfile, rank: int, orchestrator: SessionOrchestrator
) -> None:
    """
    Render one match of a live search.

    Args:
        person: The matched profile.
        rank: 1-based position in the result list.
        orchestrator: Session driver used for telemetry.
    """
    key = f"{rank}_{person.person_id}"
    with st.container(border=True):
        title = f"**{rank}. {person.name}**"
        if person.headline:
            title += f"  \n{person.headline}"
        st.markdown(title)
        meta = [v for v in (person.current_company, person.location) if v]
        if meta:
            st.caption(" · ".join(meta))
        if person.technical_skills:
            st.caption(", ".join(person.technical_skills))

        if st.toggle("Why this match", key=f"why_{key}"):
            if f"viewed_{key}" not in st.session_state:
                st.session_state[f"viewed_{key}"] = True
                orchestrator.track(
                    TelemetryEventType.PROFILE_VIEWED,
                    {
                        "person_id": person.person_id,
                        "workspace_id": person.workspace_id,
                        "rank": rank,
                    },
                )
            st.markdown(person.reason or "No rationale provided.")
            if person.s1_message:
                st.text_area(
                    "Suggested intro",
                    value=person.s1_message,
                    key=f"intro_{key}",
                    disabled=True,
                )

        _linkedin_button(person.linkedin_profile, person.person_id, key, orchestrator)


def render_ranked_profile(
    item: RankedProfile, search_id: str, orchestrator: SessionOrchestrator
) -> None:
    """
    Render one stored match of a past search.

    Args:
        item: The ranked profile from the history detail.
        search_id: The search it belongs to.
        orchestrator: Session driver used for telemetry.
    """
    profile = item.profile
    key = f"h_{search_id}_{item.rank}"
    with st.container(border=True):
        st.markdown(
            f"**{item.rank}. {profile.name}** · score {format_score(item.evaluation_score)}"
        )
        if profile.headline:
            st.caption(profile.headline)
        with st.expander("Assessment"):
            st.markdown(item.overall_assessment or "—")
            for match in item.criteria_matches:
                st.markdown(f"- {describe_criteria(match)}")
        _linkedin_button(
            profile.linkedin_profile,
            profile.person_id,
            key,
            orchestrator,
            search_id=search_id,
        )
