"""Best-effort usage telemetry."""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

import requests
from loguru import logger

from hubsearch.clients.base import ApiClient
from hubsearch.clients.errors import ApiError, TelemetryLost
from hubsearch.clients.schemas import (
    TelemetryEventIn,
    TelemetryEventResponse,
    TelemetryEventType,
)
from hubsearch.utils.env_cfg import ApiConfig


class TelemetryClient(ApiClient):
    """
    Client for ``/api/telemetry/event``.

    ``log_event`` is the plain call and raises ``TelemetryLost`` on failure.
    ``emit`` runs it on a background worker and routes any failure to the
    log, so the caller never waits on or sees a telemetry error.
    """

    fallback_message = "Failed to log telemetry event"

    def __init__(
        self,
        config: ApiConfig | None = None,
        session: requests.Session | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        """
        Initialize the TelemetryClient.

        Args:
            config (ApiConfig | None, optional): Backend configuration. Defaults to the environment configuration.
            session (requests.Session | None, optional): HTTP session to send requests with. Defaults to a new session.
            executor (ThreadPoolExecutor | None, optional): Worker pool for ``emit``. Defaults to a pool sized by ``telemetry_workers``.
        """
        super().__init__(config=config, session=session)
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.config.telemetry_workers,
            thread_name_prefix="telemetry",
        )

    def log_event(
        self,
        event_type: TelemetryEventType | str,
        event_data: dict[str, Any],
        token: str | None = None,
        search_id: str | None = None,
    ) -> TelemetryEventResponse:
        """
        Record one usage event.

        Args:
            event_type (TelemetryEventType | str): One of the known event types.
            event_data (dict[str, Any]): Event payload, keyed like the search response fields.
            token (str | None, optional): Bearer token; anonymous events are sent without one. Defaults to None.
            search_id (str | None, optional): Search or session the event belongs to. Defaults to None.

        Returns:
            TelemetryEventResponse: The recorded event id.

        Raises:
            TelemetryLost: If the event could not be recorded.
        """
        try:
            payload = TelemetryEventIn(
                event_type=TelemetryEventType(event_type),
                search_id=search_id or None,
                event_data=event_data,
            )
        except ValueError as e:
            raise TelemetryLost(f"Invalid telemetry event: {e}") from e

        try:
            resp = self._send(
                "POST",
                "/api/telemetry/event",
                json=payload.model_dump(mode="json", exclude_none=True),
                headers=self._auth_headers(token),
            )
        except ApiError as e:
            raise TelemetryLost(self.fallback_message) from e

        if not resp.ok:
            logger.error("Failed to log telemetry event: {}", resp.status_code)
            raise TelemetryLost(self.fallback_message, status_code=resp.status_code)
        try:
            return self._parse(resp, TelemetryEventResponse)
        except ApiError as e:
            raise TelemetryLost(self.fallback_message) from e

    def emit(
        self,
        event_type: TelemetryEventType | str,
        event_data: dict[str, Any],
        token: str | None = None,
        search_id: str | None = None,
    ) -> Future:
        """
        Fire-and-forget variant of ``log_event``.

        Args:
            event_type (TelemetryEventType | str): One of the known event types.
            event_data (dict[str, Any]): Event payload.
            token (str | None, optional): Bearer token. Defaults to None.
            search_id (str | None, optional): Search or session the event belongs to. Defaults to None.

        Returns:
            Future: Completes with the response, or None if the event was lost. Never raises.
        """
        try:
            return self._executor.submit(
                self._log_quietly, event_type, dict(event_data), token, search_id
            )
        except RuntimeError as e:
            # Pool already shut down.
            logger.warning("Telemetry event {} dropped: {}", event_type, e)
            dropped: Future = Future()
            dropped.set_result(None)
            return dropped

    def _log_quietly(
        self,
        event_type: TelemetryEventType | str,
        event_data: dict[str, Any],
        token: str | None,
        search_id: str | None,
    ) -> TelemetryEventResponse | None:
        try:
            return self.log_event(event_type, event_data, token, search_id)
        except TelemetryLost as e:
            logger.warning("Telemetry event {} lost: {}", event_type, e)
            return None
        except Exception as e:
            logger.exception("Telemetry event {} failed unexpectedly: {}", event_type, e)
            return None

    def close(self) -> None:
        """Wait for queued events, then close the HTTP session."""
        self._executor.shutdown(wait=True)
        super().close()
