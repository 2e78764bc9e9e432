from unittest.mock import MagicMock

import pytest
import requests

from hubsearch.clients import (
    AuthenticationFailed,
    AuthenticationRequired,
    ChatClient,
    NotFound,
    RemoteRejected,
    RemoteUnavailable,
)
from hubsearch.utils.env_cfg import ApiConfig


@pytest.fixture
def client(api_config: ApiConfig, http: MagicMock) -> ChatClient:
    return ChatClient(api_config, http)


def test_two_turn_refinement(client: ChatClient, http: MagicMock, make_response) -> None:
    """
    A new conversation omits session_id; the follow-up sends the id the server assigned.
    """
    http.request.side_effect = [
        make_response(
            200,
            {"session_id": "s1", "is_complete": False, "next_question": "What stack?"},
        ),
        make_response(
            200,
            {
                "session_id": "s1",
                "is_complete": True,
                "query": "Python/React developer based in Bangalore",
            },
        ),
    ]

    first = client.send_turn("I need a developer", "tok")
    assert first.session_id == "s1"
    assert first.is_complete is False
    assert first.next_question == "What stack?"

    second = client.send_turn("Python and React, Bangalore", "tok", first.session_id)
    assert second.is_complete is True
    assert second.query == "Python/React developer based in Bangalore"

    (method, url), kwargs = http.request.call_args_list[0]
    assert (method, url) == ("POST", "http://api.test/chat")
    assert kwargs["json"] == {"message": "I need a developer"}
    assert kwargs["headers"] == {"Authorization": "Bearer tok"}
    assert kwargs["timeout"] == 5

    _, kwargs = http.request.call_args_list[1]
    assert kwargs["json"] == {
        "message": "Python and React, Bangalore",
        "session_id": "s1",
    }


def test_accepts_question_and_refined_query_keys(
    client: ChatClient, http: MagicMock, make_response
) -> None:
    """
    The older ``question`` / ``refined_query`` field names are understood too.
    """
    http.request.return_value = make_response(
        200, {"session_id": "s9", "is_complete": False, "question": "Where?"}
    )
    assert client.send_turn("hi", "tok").next_question == "Where?"

    http.request.return_value = make_response(
        200, {"session_id": "s9", "is_complete": True, "refined_query": "Go devs"}
    )
    assert client.send_turn("Berlin", "tok", "s9").query == "Go devs"


def test_missing_token_makes_no_call(client: ChatClient, http: MagicMock) -> None:
    """
    Without a token the call fails before touching the network.
    """
    with pytest.raises(AuthenticationRequired, match="Authentication required"):
        client.send_turn("hello", None)
    with pytest.raises(AuthenticationRequired):
        client.send_turn("hello", "")
    http.request.assert_not_called()


def test_401_is_authentication_failure(
    client: ChatClient, http: MagicMock, make_response
) -> None:
    http.request.return_value = make_response(401, {"detail": "Invalid token"})
    with pytest.raises(AuthenticationFailed, match="Please sign in again"):
        client.send_turn("hello", "tok")


def test_validation_detail_is_joined(
    client: ChatClient, http: MagicMock, make_response
) -> None:
    http.request.return_value = make_response(
        422, {"detail": [{"loc": ["body", "message"], "msg": "Field required"}]}
    )
    with pytest.raises(RemoteRejected) as exc:
        client.send_turn("hello", "tok")
    assert str(exc.value) == "body.message: Field required"
    assert exc.value.status_code == 422


def test_404_on_chat_is_not_not_found(
    client: ChatClient, http: MagicMock, make_response
) -> None:
    """
    Only history detail lookups map 404 to NotFound.
    """
    http.request.return_value = make_response(404, {"detail": "Not Found"})
    with pytest.raises(RemoteRejected) as exc:
        client.send_turn("hello", "tok", "gone")
    assert not isinstance(exc.value, NotFound)


def test_unparsable_error_falls_back(
    client: ChatClient, http: MagicMock, make_response, no_json
) -> None:
    http.request.return_value = make_response(502, no_json)
    with pytest.raises(RemoteUnavailable, match="Failed to send chat message"):
        client.send_turn("hello", "tok")


def test_network_failure_is_remote_unavailable(
    client: ChatClient, http: MagicMock
) -> None:
    http.request.side_effect = requests.ConnectionError("connection refused")
    with pytest.raises(RemoteUnavailable):
        client.send_turn("hello", "tok")


def test_complete_turn_without_query_is_rejected(
    client: ChatClient, http: MagicMock, make_response
) -> None:
    http.request.return_value = make_response(
        200, {"session_id": "s1", "is_complete": True}
    )
    with pytest.raises(RemoteUnavailable):
        client.send_turn("hello", "tok")
