"""Read-only access to persisted search episodes."""

import requests
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from hubsearch.clients.base import ApiClient
from hubsearch.clients.errors import (
    AuthenticationFailed,
    NotFound,
    RemoteRejected,
    RemoteUnavailable,
)
from hubsearch.clients.schemas import HistoryDetail, HistoryItem

_HISTORY_LIST = TypeAdapter(list[HistoryItem])


class HistoryClient(ApiClient):
    """
    Client for ``/api/v1/history``.
    Every call is a fresh fetch; nothing is cached.
    """

    fallback_message = "Failed to fetch history"

    def list_history(
        self,
        token: str | None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[HistoryItem]:
        """
        List past search episodes in server order.

        Args:
            token (str | None): Bearer token.
            limit (int | None, optional): Page size, passed through when set. Defaults to None.
            offset (int | None, optional): Page offset, passed through when set. Defaults to None.

        Returns:
            list[HistoryItem]: The history entries.

        Raises:
            AuthenticationRequired: If no token is given.
            AuthenticationFailed: If the backend answers 401.
            RemoteRejected: On any other failed status.
            RemoteUnavailable: If the backend is unreachable or the body is unusable.
        """
        token = self._require_token(token)
        params: dict[str, int] = {}
        if limit:
            params["limit"] = limit
        if offset:
            params["offset"] = offset

        resp = self._send(
            "GET",
            "/api/v1/history",
            params=params or None,
            headers=self._auth_headers(token),
        )
        self._check(resp, "Failed to fetch history")
        try:
            return _HISTORY_LIST.validate_python(resp.json())
        except (ValueError, ValidationError) as e:
            logger.error("RemoteUnavailable: unexpected history payload: {}", e)
            raise RemoteUnavailable("Failed to fetch history") from e

    def get_history_detail(self, token: str | None, search_id: str) -> HistoryDetail:
        """
        Fetch the ranked profiles and rationale of one episode.

        Args:
            token (str | None): Bearer token.
            search_id (str): Identifier of the completed search.

        Returns:
            HistoryDetail: The stored result of that search.

        Raises:
            AuthenticationRequired: If no token is given.
            AuthenticationFailed: If the backend answers 401.
            NotFound: If no episode has that id.
            RemoteRejected: On any other failed status.
            RemoteUnavailable: If the backend is unreachable or the body is unusable.
        """
        token = self._require_token(token)
        resp = self._send(
            "GET",
            f"/api/v1/history/{search_id}",
            headers=self._auth_headers(token),
        )
        if resp.status_code == 404:
            logger.error("NotFound: history item {}", search_id)
            raise NotFound("History item not found", status_code=404)
        self._check(resp, "Failed to fetch history details")
        return self._parse(resp, HistoryDetail)

    @staticmethod
    def _check(resp: requests.Response, message: str) -> None:
        if resp.ok:
            return
        if resp.status_code == 401:
            logger.error("AuthenticationFailed: history answered 401")
            raise AuthenticationFailed("Authentication required. Please sign in.")
        logger.error("{} ({}): {}", message, resp.status_code, resp.text)
        raise RemoteRejected(message, status_code=resp.status_code)
