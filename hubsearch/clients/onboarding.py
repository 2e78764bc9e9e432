"""Onboarding upload: contact exports for a new workspace."""

from pathlib import Path

from loguru import logger

from hubsearch.clients.base import ApiClient
from hubsearch.clients.errors import (
    AuthenticationFailed,
    RemoteRejected,
    RemoteUnavailable,
    ValidationFailed,
)
from hubsearch.clients.schemas import OnboardingSubmitResponse

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def _validate_csv(path: Path, label: str) -> None:
    """
    Check that an export is a CSV file below the upload limit.

    Args:
        path (Path): The file to check.
        label (str): Name used in the error message.

    Raises:
        ValidationFailed: If the file is missing, not a CSV, or too large.
    """
    if path.suffix.lower() != ".csv":
        raise ValidationFailed(f"{label} file must be a CSV file")
    if not path.is_file():
        raise ValidationFailed(f"{label} file not found: {path.name}")
    if path.stat().st_size > MAX_UPLOAD_BYTES:
        raise ValidationFailed(f"{label} file size must be less than 10MB")


class OnboardingClient(ApiClient):
    """Client for ``/api/onboarding/submit``."""

    fallback_message = "Onboarding failed"

    def submit(
        self,
        linkedin_file: str | Path | None,
        google_file: str | Path | None,
        workspace_id: str,
        token: str | None,
        batch_id: str = "default",
    ) -> OnboardingSubmitResponse:
        """
        Upload LinkedIn connections and Google contacts exports for a workspace.

        Args:
            linkedin_file (str | Path | None): LinkedIn connections CSV.
            google_file (str | Path | None): Google contacts CSV.
            workspace_id (str): Workspace to populate.
            token (str | None): Bearer token.
            batch_id (str, optional): Upload batch label. Defaults to "default".

        Returns:
            OnboardingSubmitResponse: Where the backend stored the uploads.

        Raises:
            AuthenticationRequired: If no token is given.
            ValidationFailed: If an input is missing, not a CSV, or larger than 10MB.
            AuthenticationFailed: If the backend answers 401.
            RemoteRejected: If the backend rejects the upload.
        """
        token = self._require_token(token)
        if not linkedin_file or not google_file or not workspace_id.strip():
            raise ValidationFailed("All fields are required")

        linkedin_path = Path(linkedin_file).expanduser()
        google_path = Path(google_file).expanduser()
        _validate_csv(linkedin_path, "LinkedIn")
        _validate_csv(google_path, "Google contacts")

        files = {
            "linkedin_connections": (
                linkedin_path.name,
                linkedin_path.read_bytes(),
                "text/csv",
            ),
            "google_contacts": (google_path.name, google_path.read_bytes(), "text/csv"),
        }
        data = {"workspace_id": workspace_id.strip(), "batch_id": batch_id}
        resp = self._send(
            "POST",
            "/api/onboarding/submit",
            files=files,
            data=data,
            headers=self._auth_headers(token),
        )

        if not resp.ok:
            if resp.status_code == 401:
                raise AuthenticationFailed()
            body = self._json_body(resp)
            detail = body.get("detail") if isinstance(body, dict) else None
            message = (
                str(detail) if detail else f"HTTP error! status: {resp.status_code}"
            )
            logger.error("Onboarding failed for {}: {}", workspace_id, message)
            if resp.status_code >= 500 and not detail:
                raise RemoteUnavailable(message, status_code=resp.status_code)
            raise RemoteRejected(message, status_code=resp.status_code)

        result = self._parse(resp, OnboardingSubmitResponse)
        logger.info("Onboarding submitted for workspace {}", result.workspace_id)
        return result
