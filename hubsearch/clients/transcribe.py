"""Transcription client: audio clip in, text out."""

import requests
from loguru import logger

from hubsearch.clients.base import ApiClient
from hubsearch.clients.detail import FieldErrors, describe_detail, parse_error_detail
from hubsearch.clients.errors import (
    AuthenticationFailed,
    RemoteRejected,
    RemoteUnavailable,
)
from hubsearch.clients.schemas import TranscriptionResult

RECORDING_TOO_LONG = "Recording too long. Please keep it under 2 minutes."
UNSUPPORTED_FORMAT = "Unsupported audio format."
TRANSCRIPTION_RETRY = "Could not transcribe. Please try again."


class TranscriptionClient(ApiClient):
    """
    Client for the ``/transcribe`` endpoint.
    The clip is sent as an opaque blob; the server detects and validates the format.
    """

    fallback_message = "Transcription failed"

    def transcribe(
        self,
        audio: bytes,
        token: str | None,
        session_id: str | None = None,
        filename: str = "recording.webm",
        content_type: str = "audio/webm",
    ) -> TranscriptionResult:
        """
        Transcribe one recorded clip.

        Args:
            audio (bytes): The recorded audio.
            token (str | None): Bearer token.
            session_id (str | None, optional): Session tag for correlation. Defaults to None.
            filename (str, optional): File name sent with the blob. Defaults to "recording.webm".
            content_type (str, optional): MIME type sent with the blob. Defaults to "audio/webm".

        Returns:
            TranscriptionResult: The transcript, its duration and detected language.

        Raises:
            AuthenticationRequired: If no token is given.
            AuthenticationFailed: If the backend answers 401.
            RemoteRejected: If the clip is rejected (too long, wrong format, other detail).
            RemoteUnavailable: If the backend fails or cannot be reached.
        """
        token = self._require_token(token)
        data = {"session_id": session_id} if session_id else None
        resp = self._send(
            "POST",
            "/transcribe",
            files={"audio": (filename, audio, content_type)},
            data=data,
            headers=self._auth_headers(token),
        )
        self._raise_for_status(resp)
        result = self._parse(resp, TranscriptionResult)
        logger.debug(
            "Transcribed {} characters ({}s, {})",
            len(result.text),
            result.duration_seconds,
            result.language,
        )
        return result

    def _describe_error(self, resp: requests.Response) -> str | None:
        body = self._json_body(resp)
        detail = parse_error_detail(body)
        # Validation lists name form fields, not anything the user recorded.
        if isinstance(detail, FieldErrors):
            return None
        return describe_detail(detail, use_error_field=True)

    def _raise_for_status(self, resp: requests.Response) -> None:
        if resp.ok:
            return
        if resp.status_code == 401:
            logger.error("AuthenticationFailed: transcription answered 401")
            raise AuthenticationFailed()

        detail = self._describe_error(resp)
        message = detail or self.fallback_message
        logger.error("Transcription failed with {}: {}", resp.status_code, message)

        if resp.status_code == 400:
            lowered = message.lower()
            if "too large" in lowered or "size" in lowered:
                raise RemoteRejected(RECORDING_TOO_LONG, status_code=400)
            if "format" in lowered:
                raise RemoteRejected(UNSUPPORTED_FORMAT, status_code=400)
            if detail is None:
                raise RemoteUnavailable(self.fallback_message, status_code=400)
            raise RemoteRejected(message, status_code=400)
        if resp.status_code == 500:
            raise RemoteUnavailable(TRANSCRIPTION_RETRY, status_code=500)
        if detail is None:
            raise RemoteUnavailable(message, status_code=resp.status_code)
        raise RemoteRejected(message, status_code=resp.status_code)
