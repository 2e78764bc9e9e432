"""Pydantic models for backend request and response payloads."""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, model_validator


# --- Chat refinement ---


class ChatTurnResponse(BaseModel):
    session_id: str
    is_complete: bool = False
    next_question: str | None = Field(
        default=None, validation_alias=AliasChoices("next_question", "question")
    )
    query: str | None = Field(
        default=None, validation_alias=AliasChoices("query", "refined_query")
    )

    @model_validator(mode="after")
    def _check_branch(self) -> "ChatTurnResponse":
        """
        A complete turn must carry the refined query; an open one must carry the next question.
        """
        if self.is_complete and not self.query:
            raise ValueError("complete chat turn without a query")
        if not self.is_complete and not self.next_question:
            raise ValueError("open chat turn without a next question")
        return self


# --- Transcription ---


class TranscriptionResult(BaseModel):
    text: str = ""
    duration_seconds: float | None = None
    language: str = ""


# --- Telemetry ---


class TelemetryEventType(str, Enum):
    VOICE_USAGE = "voice_usage"
    PROFILE_VIEWED = "profile_viewed"
    LINKEDIN_CLICK = "linkedin_click"
    AI_DRAFT = "ai_draft"


class TelemetryEventIn(BaseModel):
    event_type: TelemetryEventType
    search_id: str | None = None
    event_data: dict[str, Any] = {}


class TelemetryEventResponse(BaseModel):
    success: bool
    event_id: int | None = None


# --- History ---


class HistoryItem(BaseModel):
    search_id: str
    timestamp: str
    query_text: str
    final_result_count: int = 0


class ProfileSummary(BaseModel):
    person_id: str
    name: str
    headline: str = ""
    picture_url: str | None = None
    current_company: str | None = None
    current_title: str | None = None
    linkedin_profile: str | None = None


class CriteriaMatch(BaseModel):
    evidence: str | None = None
    headline: str | None = None
    question: str | None = None
    reasoning: str | None = None
    match_level: str | None = None
    criterion_id: str | None = None


class RankedProfile(BaseModel):
    rank: int
    profile: ProfileSummary
    result_id: int | None = None
    search_result_id: int | None = None
    evaluation_score: float = 0.0
    criteria_matches: list[str | CriteriaMatch] = []
    overall_assessment: str = ""


class HistoryDetail(BaseModel):
    success: bool = True
    response: str = ""
    is_hub_user: bool = False
    requester_has_linkedin: bool = False
    profiles: list[RankedProfile] = []
    metadata: dict[str, Any] = {}


# --- Search ---


class SearchProfile(BaseModel):
    person_id: str
    name: str
    headline: str | None = None
    current_company: str | None = None
    location: str | None = None
    linkedin_profile: str | None = None
    reason: str | None = None
    technical_skills: list[str] = []
    workspace_id: str | None = None
    picture_url: str | None = None
    s1_message: str | None = None


class SearchMetadata(BaseModel):
    session_id: str | None = None
    execution_time: float | None = None
    tools_used: list[str] = []
    data_found: int | None = None
    workflow_status: str | None = None
    filters: dict[str, Any] = {}
    sub_queries: int | None = None


class SearchResponse(BaseModel):
    response: str = ""
    success: bool = True
    profiles: list[SearchProfile] = []
    metadata: SearchMetadata = Field(default_factory=SearchMetadata)


# --- Onboarding ---


class OnboardingSubmitResponse(BaseModel):
    success: bool
    message: str = ""
    workspace_id: str
    linkedin_connections_url: str = ""
    google_contacts_url: str = ""
