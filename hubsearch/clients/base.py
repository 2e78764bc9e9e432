"""Shared HTTP plumbing for the backend clients."""

from typing import Any, TypeVar

import requests
from loguru import logger
from pydantic import BaseModel, ValidationError

from hubsearch.clients.detail import describe_detail, parse_error_detail
from hubsearch.clients.errors import (
    AuthenticationFailed,
    AuthenticationRequired,
    RemoteRejected,
    RemoteUnavailable,
)
from hubsearch.utils.env_cfg import ApiConfig, load_api_env

ModelT = TypeVar("ModelT", bound=BaseModel)

_NO_BODY = object()


class ApiClient:
    """
    Base class for clients of the matching backend.
    Holds the configured origin and the HTTP session every call goes through.
    """

    #: Message used when a failed response carries no usable detail.
    fallback_message = "Request failed"

    def __init__(
        self,
        config: ApiConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the ApiClient.

        Args:
            config (ApiConfig | None, optional): Backend configuration. Defaults to the environment configuration.
            session (requests.Session | None, optional): HTTP session to send requests with. Defaults to a new session.
        """
        self.config = config or load_api_env()
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.config.base_url}{path}"

    @staticmethod
    def _require_token(token: str | None) -> str:
        """
        Fail fast when no bearer token is available.

        Args:
            token (str | None): The bearer token.

        Returns:
            str: The token.

        Raises:
            AuthenticationRequired: If the token is missing or empty.
        """
        if not token:
            logger.error("AuthenticationRequired: no token for backend call")
            raise AuthenticationRequired()
        return token

    @staticmethod
    def _auth_headers(token: str | None) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        """
        Send a request, mapping transport failures to RemoteUnavailable.

        Args:
            method (str): HTTP method.
            path (str): Path below the configured origin.
            **kwargs: Passed through to ``requests.Session.request``.

        Returns:
            requests.Response: The raw response.

        Raises:
            RemoteUnavailable: If the backend could not be reached.
        """
        kwargs.setdefault("timeout", self.config.request_timeout)
        url = self._url(path)
        try:
            return self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error("RemoteUnavailable: {} {} failed: {}", method, url, e)
            raise RemoteUnavailable(
                "Could not reach the server. Please try again."
            ) from e

    @staticmethod
    def _json_body(resp: requests.Response) -> Any:
        """Return the decoded body, or ``_NO_BODY`` if it is not JSON."""
        try:
            return resp.json()
        except ValueError:
            return _NO_BODY

    def _describe_error(self, resp: requests.Response) -> str | None:
        """
        Extract the server-provided detail of a failed response.

        Args:
            resp (requests.Response): The failed response.

        Returns:
            str | None: The joined detail, or None if nothing parses.
        """
        body = self._json_body(resp)
        if body is _NO_BODY:
            logger.debug("Could not parse error response: {}", resp.text[:200])
            return None
        return describe_detail(parse_error_detail(body))

    def _raise_for_status(self, resp: requests.Response) -> None:
        """
        Default failure mapping: 401 to AuthenticationFailed, everything else normalized.

        Args:
            resp (requests.Response): The response to check.

        Raises:
            AuthenticationFailed: On 401.
            RemoteRejected: On other non-success statuses with a parsed detail.
            RemoteUnavailable: On other non-success statuses without a usable body.
        """
        if resp.ok:
            return
        if resp.status_code == 401:
            logger.error("AuthenticationFailed: {} answered 401", resp.url)
            raise AuthenticationFailed()
        message = self._describe_error(resp)
        logger.error(
            "{} answered {}: {}", resp.url, resp.status_code, message or resp.text
        )
        if message is None:
            raise RemoteUnavailable(self.fallback_message, status_code=resp.status_code)
        raise RemoteRejected(message, status_code=resp.status_code)

    def _parse(self, resp: requests.Response, model: type[ModelT]) -> ModelT:
        """
        Validate a success body against its schema.

        Args:
            resp (requests.Response): A successful response.
            model (type[ModelT]): The expected schema.

        Returns:
            ModelT: The validated payload.

        Raises:
            RemoteUnavailable: If the body is not JSON or does not match the schema.
        """
        body = self._json_body(resp)
        if body is _NO_BODY:
            logger.error("RemoteUnavailable: {} returned a non-JSON body", resp.url)
            raise RemoteUnavailable(self.fallback_message, status_code=resp.status_code)
        try:
            return model.model_validate(body)
        except ValidationError as e:
            logger.error(
                "RemoteUnavailable: unexpected {} payload from {}: {}",
                model.__name__,
                resp.url,
                e,
            )
            raise RemoteUnavailable(
                self.fallback_message, status_code=resp.status_code
            ) from e

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
