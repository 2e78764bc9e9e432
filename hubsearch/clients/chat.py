"""Chat refinement client: one clarification turn per call."""

from loguru import logger

from hubsearch.clients.base import ApiClient
from hubsearch.clients.schemas import ChatTurnResponse


class ChatClient(ApiClient):
    """
    Client for the ``/chat`` dialogue endpoint.
    Each call is one transition of the refinement conversation.
    """

    fallback_message = "Failed to send chat message"

    def send_turn(
        self, message: str, token: str | None, session_id: str | None = None
    ) -> ChatTurnResponse:
        """
        Send one user utterance and return the next conversation state.

        Args:
            message (str): The user's message.
            token (str | None): Bearer token.
            session_id (str | None, optional): Session to continue. Omitted to start a new session. Defaults to None.

        Returns:
            ChatTurnResponse: The session id to use next and either a question or the refined query.

        Raises:
            AuthenticationRequired: If no token is given.
            AuthenticationFailed: If the backend answers 401.
            RemoteRejected: If the backend rejects the turn with a readable detail.
            RemoteUnavailable: If the backend is unreachable or answers with an unusable body.
        """
        token = self._require_token(token)
        payload: dict[str, str] = {"message": message}
        if session_id:
            payload["session_id"] = session_id

        resp = self._send(
            "POST", "/chat", json=payload, headers=self._auth_headers(token)
        )
        self._raise_for_status(resp)
        turn = self._parse(resp, ChatTurnResponse)
        logger.debug(
            "Chat turn for session {} (complete={})", turn.session_id, turn.is_complete
        )
        return turn
