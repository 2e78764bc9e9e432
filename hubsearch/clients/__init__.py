"""Backend API clients.

Thin HTTP clients for the matching backend: chat refinement, transcription,
telemetry, history, search and onboarding.
"""

from hubsearch.clients.errors import (
    AccessDenied,
    ApiError,
    AuthenticationFailed,
    AuthenticationRequired,
    NotFound,
    RemoteRejected,
    RemoteUnavailable,
    TelemetryLost,
    ValidationFailed,
)
from hubsearch.clients.schemas import (
    ChatTurnResponse,
    HistoryDetail,
    HistoryItem,
    OnboardingSubmitResponse,
    SearchResponse,
    TelemetryEventResponse,
    TelemetryEventType,
    TranscriptionResult,
)
from hubsearch.clients.chat import ChatClient
from hubsearch.clients.history import HistoryClient
from hubsearch.clients.onboarding import OnboardingClient
from hubsearch.clients.search import SearchClient
from hubsearch.clients.telemetry import TelemetryClient
from hubsearch.clients.transcribe import TranscriptionClient

__all__ = [
    "AccessDenied",
    "ApiError",
    "AuthenticationFailed",
    "AuthenticationRequired",
    "ChatClient",
    "ChatTurnResponse",
    "HistoryClient",
    "HistoryDetail",
    "HistoryItem",
    "NotFound",
    "OnboardingClient",
    "OnboardingSubmitResponse",
    "RemoteRejected",
    "RemoteUnavailable",
    "SearchClient",
    "SearchResponse",
    "TelemetryClient",
    "TelemetryEventResponse",
    "TelemetryEventType",
    "TelemetryLost",
    "TranscriptionClient",
    "TranscriptionResult",
    "ValidationFailed",
]
