"""Refinement session package.

Holds the session model and the orchestrator that threads one session id
through transcription, refinement, search and telemetry.
"""

from hubsearch.session.types import (
    ChatTurn,
    SearchHandoff,
    Session,
    SessionState,
    SessionStateError,
    TranscriptOutcome,
    TurnOutcome,
)
from hubsearch.session.policies import IdlePolicy
from hubsearch.session.orchestrator import SessionOrchestrator, build_orchestrator

__all__ = [
    "ChatTurn",
    "IdlePolicy",
    "SearchHandoff",
    "Session",
    "SessionOrchestrator",
    "SessionState",
    "SessionStateError",
    "TranscriptOutcome",
    "TurnOutcome",
    "build_orchestrator",
]
