"""Shared types for the refinement session."""

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Protocol

from hubsearch.clients.schemas import (
    ChatTurnResponse,
    SearchResponse,
    TelemetryEventType,
    TranscriptionResult,
)


class SessionState(str, Enum):
    """Orchestrator states for one conversation."""

    IDLE = "idle"
    AWAITING_INPUT = "awaiting_input"
    REFINING = "refining"
    COMPLETE = "complete"


class SessionStateError(RuntimeError):
    """An operation was attempted in a state that does not allow it."""


@dataclass(frozen=True)
class ChatTurn:
    """One line of the clarification dialogue."""

    role: str
    text: str


@dataclass
class Session:
    """
    One continuous clarification dialogue.

    ``session_id`` is assigned by the backend on the first turn and
    ``search_id`` by the search run on the finished query. ``epoch``
    is local and identifies the conversation even before that, so replies
    to an abandoned conversation can be recognised.
    """

    session_id: str | None = None
    turns: list[ChatTurn] = field(default_factory=list)
    is_complete: bool = False
    query: str | None = None
    last_activity: float | None = None
    search_id: str | None = None
    epoch: str = field(default_factory=lambda: uuid.uuid4().hex)

    def snapshot(self) -> "Session":
        """Return a copy that later turns will not mutate."""
        return replace(self, turns=list(self.turns))


@dataclass
class TurnOutcome:
    """Result of one user input, as shown to the user."""

    state: SessionState
    session_id: str | None = None
    question: str | None = None
    query: str | None = None
    transcript: str | None = None
    error: str | None = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.stale

    @property
    def is_complete(self) -> bool:
        return self.state is SessionState.COMPLETE and self.query is not None


@dataclass
class TranscriptOutcome:
    """Result of transcribing one recording."""

    text: str | None = None
    duration_seconds: float | None = None
    language: str | None = None
    error: str | None = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.stale


@dataclass(frozen=True)
class SearchHandoff:
    """A finished query ready for the search flow."""

    query: str
    session_id: str | None


class ChatService(Protocol):
    """Interface for the refinement dialogue."""

    def send_turn(
        self, message: str, token: str | None, session_id: str | None = None
    ) -> ChatTurnResponse:  # pragma: no cover - interface
        ...


class TranscriptionService(Protocol):
    """Interface for speech-to-text."""

    def transcribe(
        self,
        audio: bytes,
        token: str | None,
        session_id: str | None = None,
        filename: str = "recording.webm",
        content_type: str = "audio/webm",
    ) -> TranscriptionResult:  # pragma: no cover - interface
        ...


class TelemetrySink(Protocol):
    """Interface for fire-and-forget usage events."""

    def emit(
        self,
        event_type: TelemetryEventType | str,
        event_data: dict[str, Any],
        token: str | None = None,
        search_id: str | None = None,
    ) -> Any:  # pragma: no cover - interface
        ...


class SearchService(Protocol):
    """Interface for the search flow a finished query is handed to."""

    def search_network(
        self,
        query: str,
        token: str | None,
        workspace_ids: list[str],
        session_id: str | None = None,
    ) -> SearchResponse:  # pragma: no cover - interface
        ...
