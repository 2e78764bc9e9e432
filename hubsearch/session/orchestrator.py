"""Session orchestrator that drives the refinement dialogue."""

import threading
import time
from typing import Any, Callable

import requests
from loguru import logger

from hubsearch.clients.chat import ChatClient
from hubsearch.clients.errors import ApiError
from hubsearch.clients.schemas import SearchResponse, TelemetryEventType
from hubsearch.clients.search import SearchClient
from hubsearch.clients.telemetry import TelemetryClient
from hubsearch.clients.transcribe import TranscriptionClient
from hubsearch.session.policies import IdlePolicy
from hubsearch.session.types import (
    ChatService,
    ChatTurn,
    SearchHandoff,
    SearchService,
    Session,
    SessionState,
    SessionStateError,
    TelemetrySink,
    TranscriptionService,
    TranscriptOutcome,
    TurnOutcome,
)
from hubsearch.utils.env_cfg import ApiConfig, SessionConfig, load_api_env

NO_SPEECH = "No speech detected. Please try again."


class SessionOrchestrator:
    """
    Own the active session and run the turn loop against the chat endpoint.

    States: ``IDLE`` (no session id) -> ``REFINING`` (turn in flight) ->
    ``AWAITING_INPUT`` (question shown) or ``COMPLETE`` (refined query
    ready). Failed turns return to ``AWAITING_INPUT`` and keep the session.

    The session is only written under ``_lock`` and only after a round trip
    that still belongs to the current conversation; replies for a
    conversation abandoned by ``reset`` are discarded.
    """

    def __init__(
        self,
        chat: ChatService,
        transcriber: TranscriptionService | None = None,
        telemetry: TelemetrySink | None = None,
        search: SearchService | None = None,
        token_provider: Callable[[], str | None] | None = None,
        policy: IdlePolicy | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the SessionOrchestrator.

        Args:
            chat (ChatService): Client for the refinement dialogue.
            transcriber (TranscriptionService | None, optional): Client for voice input. Defaults to None.
            telemetry (TelemetrySink | None, optional): Sink for usage events. Defaults to None.
            search (SearchService | None, optional): Search flow for finished queries. Defaults to None.
            token_provider (Callable[[], str | None] | None, optional): Returns the current bearer token. Defaults to None.
            policy (IdlePolicy | None, optional): Idle-session policy. Defaults to None.
            clock (Callable[[], float], optional): Time source for idle tracking. Defaults to time.monotonic.
        """
        self.chat = chat
        self.transcriber = transcriber
        self.telemetry = telemetry
        self.search_service = search
        self.token_provider = token_provider or (lambda: None)
        self.policy = policy or IdlePolicy()
        self._clock = clock
        self._lock = threading.Lock()
        self._session = Session()
        self._state = SessionState.IDLE
        self._transcribing_epoch: str | None = None

    # ── Read-only views ──────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Session:
        """A snapshot of the current session."""
        with self._lock:
            return self._session.snapshot()

    @property
    def session_id(self) -> str | None:
        return self._session.session_id

    @property
    def refined_query(self) -> str | None:
        return self._session.query

    @property
    def search_id(self) -> str | None:
        """Id of the last search run for this session, as the backend keys its history."""
        return self._session.search_id

    # ── Lifecycle ────────────────────────────────────────────

    def reset(self) -> None:
        """
        Abandon the current conversation and return to ``IDLE``.
        A reply still in flight for the old conversation will be discarded.
        """
        with self._lock:
            old = self._session
            self._session = Session()
            self._state = SessionState.IDLE
        logger.info(
            "Session reset (abandoned {}, {} turns)", old.session_id, len(old.turns)
        )

    def _guard_input(self) -> None:
        if self._state is SessionState.REFINING:
            raise SessionStateError("A refinement turn is already in flight.")
        if self._transcribing_epoch == self._session.epoch:
            raise SessionStateError("A recording is still being transcribed.")
        if self._state is SessionState.COMPLETE:
            raise SessionStateError(
                "Session is complete; start a new search to refine again."
            )

    def _expire_if_idle(self) -> None:
        if self.policy.is_expired(self._session, self._clock()):
            logger.info(
                "Session {} idle for too long; starting a new one",
                self._session.session_id,
            )
            self._session = Session()
            self._state = SessionState.IDLE

    def _is_stale(self, epoch: str, session_id: str | None) -> bool:
        return (
            self._session.epoch != epoch or self._session.session_id != session_id
        )

    def _stale_outcome(self, session_id: str | None) -> TurnOutcome:
        logger.info("Discarding reply for abandoned session {}", session_id)
        return TurnOutcome(state=self._state, session_id=session_id, stale=True)

    # ── Turn loop ────────────────────────────────────────────

    def submit_text(self, text: str) -> TurnOutcome:
        """
        Send one typed (or transcribed) utterance through the refinement loop.

        Args:
            text (str): The user's utterance.

        Returns:
            TurnOutcome: The next question, the refined query, or the failure message.

        Raises:
            SessionStateError: If a turn is already in flight or the session is complete.
        """
        text = text.strip()
        with self._lock:
            self._guard_input()
            if not text:
                return TurnOutcome(
                    state=self._state,
                    session_id=self._session.session_id,
                    error="Please enter a message.",
                )
            self._expire_if_idle()
            epoch = self._session.epoch
            session_id = self._session.session_id
            self._state = SessionState.REFINING

        try:
            response = self.chat.send_turn(text, self.token_provider(), session_id)
        except ApiError as e:
            return self._fail(epoch, session_id, e.message)
        except Exception:
            self._fail(epoch, session_id, "Failed to send message. Please try again.")
            raise

        with self._lock:
            if self._is_stale(epoch, session_id):
                return self._stale_outcome(response.session_id)

            session = self._session
            session.session_id = response.session_id
            session.turns.append(ChatTurn(role="user", text=text))
            session.last_activity = self._clock()

            if response.is_complete:
                session.is_complete = True
                session.query = response.query
                self._state = SessionState.COMPLETE
                logger.info("Session {} complete", session.session_id)
                return TurnOutcome(
                    state=self._state,
                    session_id=session.session_id,
                    query=session.query,
                )

            session.turns.append(
                ChatTurn(role="assistant", text=response.next_question or "")
            )
            self._state = SessionState.AWAITING_INPUT
            return TurnOutcome(
                state=self._state,
                session_id=session.session_id,
                question=response.next_question,
            )

    def _fail(self, epoch: str, session_id: str | None, message: str) -> TurnOutcome:
        with self._lock:
            if self._is_stale(epoch, session_id):
                return self._stale_outcome(session_id)
            self._state = SessionState.AWAITING_INPUT
            self._session.last_activity = self._clock()
            logger.warning("Turn failed for session {}: {}", session_id, message)
            return TurnOutcome(state=self._state, session_id=session_id, error=message)

    # ── Voice intake ─────────────────────────────────────────

    def transcribe(
        self,
        audio: bytes,
        filename: str = "recording.webm",
        content_type: str = "audio/webm",
    ) -> TranscriptOutcome:
        """
        Transcribe a recording so the user can review it before sending.

        Args:
            audio (bytes): The recorded clip.
            filename (str, optional): File name sent with the clip. Defaults to "recording.webm".
            content_type (str, optional): MIME type of the clip. Defaults to "audio/webm".

        Returns:
            TranscriptOutcome: The transcript or the failure message.

        Raises:
            SessionStateError: If no transcriber is configured, a turn is in flight, or the session is complete.
        """
        if self.transcriber is None:
            raise SessionStateError("Voice input is not configured.")
        with self._lock:
            self._guard_input()
            epoch = self._session.epoch
            session_id = self._session.session_id
            self._transcribing_epoch = epoch

        try:
            result = self.transcriber.transcribe(
                audio,
                self.token_provider(),
                session_id,
                filename=filename,
                content_type=content_type,
            )
        except ApiError as e:
            return self._fail_transcript(epoch, session_id, e.message)
        finally:
            with self._lock:
                if self._transcribing_epoch == epoch:
                    self._transcribing_epoch = None

        with self._lock:
            if self._is_stale(epoch, session_id):
                logger.info("Discarding transcript for abandoned session {}", session_id)
                return TranscriptOutcome(stale=True)

        self.track(
            TelemetryEventType.VOICE_USAGE,
            {
                "duration_seconds": result.duration_seconds,
                "language": result.language,
                "characters": len(result.text),
            },
        )

        text = result.text.strip()
        if not text:
            return self._fail_transcript(epoch, session_id, NO_SPEECH)
        return TranscriptOutcome(
            text=text,
            duration_seconds=result.duration_seconds,
            language=result.language,
        )

    def _fail_transcript(
        self, epoch: str, session_id: str | None, message: str
    ) -> TranscriptOutcome:
        with self._lock:
            if self._is_stale(epoch, session_id):
                return TranscriptOutcome(stale=True)
            self._state = SessionState.AWAITING_INPUT
        logger.warning("Transcription failed for session {}: {}", session_id, message)
        return TranscriptOutcome(error=message)

    def submit_audio(
        self,
        audio: bytes,
        filename: str = "recording.webm",
        content_type: str = "audio/webm",
    ) -> TurnOutcome:
        """
        Transcribe a recording and send the transcript as the next turn.

        Args:
            audio (bytes): The recorded clip.
            filename (str, optional): File name sent with the clip. Defaults to "recording.webm".
            content_type (str, optional): MIME type of the clip. Defaults to "audio/webm".

        Returns:
            TurnOutcome: The turn result, with the transcript attached.
        """
        transcript = self.transcribe(audio, filename=filename, content_type=content_type)
        if not transcript.ok:
            return TurnOutcome(
                state=self._state,
                session_id=self._session.session_id,
                error=transcript.error,
                stale=transcript.stale,
            )
        outcome = self.submit_text(transcript.text or "")
        outcome.transcript = transcript.text
        return outcome

    # ── Hand-off ─────────────────────────────────────────────

    def handoff(self, edited_query: str | None = None) -> SearchHandoff:
        """
        Return the finished query for the search flow.

        Args:
            edited_query (str | None, optional): User edit of the refined query. Defaults to None.

        Returns:
            SearchHandoff: The query to search with and the completed session id.

        Raises:
            SessionStateError: If the session is not complete.
        """
        with self._lock:
            if self._state is not SessionState.COMPLETE or not self._session.query:
                raise SessionStateError("No refined query yet.")
            query = (edited_query or "").strip() or self._session.query
            return SearchHandoff(query=query, session_id=self._session.session_id)

    def search(
        self, workspace_ids: list[str], edited_query: str | None = None
    ) -> SearchResponse:
        """
        Run the configured search with the refined query.

        The search id the backend reports in the response metadata is kept
        for telemetry, since history entries are keyed by it.

        Args:
            workspace_ids (list[str]): Workspaces to search across.
            edited_query (str | None, optional): User edit of the refined query. Defaults to None.

        Returns:
            SearchResponse: The ranked matches.

        Raises:
            SessionStateError: If no search client is configured or the session is not complete.
            ApiError: If the search fails.
        """
        if self.search_service is None:
            raise SessionStateError("Search is not configured.")
        handoff = self.handoff(edited_query)
        with self._lock:
            epoch = self._session.epoch
        result = self.search_service.search_network(
            handoff.query, self.token_provider(), workspace_ids, handoff.session_id
        )
        with self._lock:
            if self._session.epoch == epoch:
                self._session.search_id = (
                    result.metadata.session_id or handoff.session_id
                )
        return result

    # ── Telemetry ────────────────────────────────────────────

    def track(
        self,
        event_type: TelemetryEventType | str,
        event_data: dict[str, Any],
        search_id: str | None = None,
    ) -> Any:
        """
        Emit a usage event tagged with the current session, without waiting for it.

        Once the session is complete the event carries ``search_id``: the id
        of the last search if one has run, otherwise the session id. Before
        that the session id travels in ``event_data["session_id"]``.

        Args:
            event_type (TelemetryEventType | str): The event type.
            event_data (dict[str, Any]): Event payload.
            search_id (str | None, optional): Explicit search id, e.g. from a history item. Defaults to None.

        Returns:
            Any: The sink's handle for the pending event, or None if telemetry is off.
        """
        if self.telemetry is None:
            return None
        data = dict(event_data)
        with self._lock:
            if search_id is None and self._session.is_complete:
                search_id = self._session.search_id or self._session.session_id
            elif search_id is None and self._session.session_id:
                data.setdefault("session_id", self._session.session_id)
        try:
            token = self.token_provider()
            return self.telemetry.emit(event_type, data, token, search_id)
        except Exception as e:
            logger.warning("Telemetry event {} not sent: {}", event_type, e)
            return None


def build_orchestrator(
    config: ApiConfig | None = None,
    session_config: SessionConfig | None = None,
    token_provider: Callable[[], str | None] | None = None,
    http: requests.Session | None = None,
) -> SessionOrchestrator:
    """
    Create an orchestrator wired to the real backend clients.

    Args:
        config (ApiConfig | None, optional): Backend configuration. Defaults to the environment configuration.
        session_config (SessionConfig | None, optional): Session configuration. Defaults to the environment configuration.
        token_provider (Callable[[], str | None] | None, optional): Returns the bearer token. Defaults to the configured API token.
        http (requests.Session | None, optional): Shared HTTP session. Defaults to a new session.

    Returns:
        SessionOrchestrator: The wired orchestrator.
    """
    config = config or load_api_env()
    http = http or requests.Session()
    if token_provider is None:

        def token_provider() -> str | None:
            return config.api_token

    return SessionOrchestrator(
        chat=ChatClient(config, http),
        transcriber=TranscriptionClient(config, http),
        telemetry=TelemetryClient(config, http),
        search=SearchClient(config, http),
        token_provider=token_provider,
        policy=IdlePolicy(session_config),
    )
