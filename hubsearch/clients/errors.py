"""Failure taxonomy shared by every backend client."""


class ApiError(Exception):
    """
    Base class for client failures.
    ``str(error)`` is the message shown to the user.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """
        Initialize the ApiError.

        Args:
            message (str): Human-readable failure message.
            status_code (int | None, optional): HTTP status that caused the failure. Defaults to None.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationRequired(ApiError):
    """No bearer token was available; raised before any network call."""

    def __init__(
        self, message: str = "Authentication required. Please sign in."
    ) -> None:
        super().__init__(message)


class AuthenticationFailed(ApiError):
    """The backend answered 401."""

    def __init__(
        self, message: str = "Authentication failed. Please sign in again."
    ) -> None:
        super().__init__(message, status_code=401)


class ValidationFailed(ApiError):
    """Input rejected client-side before it was sent."""


class NotFound(ApiError):
    """A detail lookup answered 404."""


class RemoteRejected(ApiError):
    """A non-2xx response, normalized to one message."""


class AccessDenied(RemoteRejected):
    """The backend answered 403 for the requested workspaces."""


class RemoteUnavailable(ApiError):
    """The backend could not be reached or answered with an unusable body."""


class TelemetryLost(ApiError):
    """A telemetry event was not recorded."""
