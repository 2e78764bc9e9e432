"""Search client: hands a refined query to the matching agent."""

from typing import Any

import requests
from loguru import logger

from hubsearch.clients.base import ApiClient
from hubsearch.clients.errors import AccessDenied, ValidationFailed
from hubsearch.clients.schemas import SearchResponse

ACCESS_DENIED = (
    "Access denied. You do not have permission to access one or more of these workspaces."
)
NO_WORKSPACES = "Please select at least one network to search"


class SearchClient(ApiClient):
    """
    Client for the ``/ask`` search endpoint.

    The backend may be cold-starting; before the first search a single
    ``/health`` request is made to wake it, and failures of that request
    are ignored.
    """

    fallback_message = "Failed to search network"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.server_awake = False

    def wake_up(self) -> bool:
        """
        Ping the backend once so a sleeping host starts before the real request.

        Returns:
            bool: Whether the backend answered.
        """
        if self.server_awake:
            return True
        try:
            self.session.get(self._url("/health"), timeout=self.config.wake_timeout)
            self.server_awake = True
        except requests.RequestException as e:
            logger.info("Server waking up... ({})", e)
        return self.server_awake

    def search_network(
        self,
        query: str,
        token: str | None,
        workspace_ids: list[str],
        session_id: str | None = None,
    ) -> SearchResponse:
        """
        Search the selected workspaces with a finished query.

        Args:
            query (str): The refined natural-language query.
            token (str | None): Bearer token.
            workspace_ids (list[str]): Workspaces to search across.
            session_id (str | None, optional): Chat session that produced the query. Defaults to None.

        Returns:
            SearchResponse: Ranked profiles and search metadata.

        Raises:
            AuthenticationRequired: If no token is given.
            AuthenticationFailed: If the backend answers 401.
            AccessDenied: If the backend answers 403.
            ValidationFailed: If no workspace is selected.
            RemoteRejected: If the backend rejects the search with a readable detail.
            RemoteUnavailable: If the backend is unreachable or answers with an unusable body.
        """
        token = self._require_token(token)
        if not workspace_ids:
            logger.error("ValidationFailed: no workspace selected")
            raise ValidationFailed(NO_WORKSPACES)
        self.wake_up()

        payload: dict[str, Any] = {"question": query, "workspace_ids": workspace_ids}
        if session_id:
            payload["session_id"] = session_id
        logger.info(
            "Searching {} workspace(s) (session={})", len(workspace_ids), session_id
        )

        resp = self._send("POST", "/ask", json=payload, headers=self._auth_headers(token))
        if resp.status_code == 403:
            logger.error("AccessDenied: workspaces {}", workspace_ids)
            raise AccessDenied(ACCESS_DENIED, status_code=403)
        self._raise_for_status(resp)
        result = self._parse(resp, SearchResponse)
        logger.info("Search successful, found {} profiles", len(result.profiles))
        return result

    def check_health(self) -> dict[str, Any]:
        """
        Return the backend health payload.

        Returns:
            dict[str, Any]: The decoded ``/health`` body.
        """
        resp = self._send("GET", "/health")
        self._raise_for_status(resp)
        return resp.json()

    def get_agent_info(self) -> dict[str, Any]:
        """
        Return the backend agent description.

        Returns:
            dict[str, Any]: The decoded ``/agent/info`` body.
        """
        resp = self._send("GET", "/agent/info")
        self._raise_for_status(resp)
        return resp.json()
