from unittest.mock import MagicMock

import pytest
import requests

from hubsearch.clients import (
    AccessDenied,
    AuthenticationFailed,
    AuthenticationRequired,
    RemoteRejected,
    SearchClient,
    ValidationFailed,
)
from hubsearch.utils.env_cfg import ApiConfig

SEARCH_BODY = {
    "response": "Here are two engineers.",
    "success": True,
    "profiles": [
        {
            "person_id": "p1",
            "name": "Asha Rao",
            "headline": "Backend engineer",
            "reason": "Ten years of Python.",
            "technical_skills": ["Python", "React"],
            "workspace_id": "shubham",
        },
        {"person_id": "p2", "name": "Ravi K"},
    ],
    "metadata": {
        "session_id": "s1",
        "execution_time": 2.5,
        "tools_used": ["vector_search"],
        "data_found": 2,
        "workflow_status": "completed",
        "filters": {"original_query": "python devs", "skill_filters": ["Python"]},
        "sub_queries": 1,
    },
}


@pytest.fixture
def client(api_config: ApiConfig, http: MagicMock) -> SearchClient:
    return SearchClient(api_config, http)


def test_search_sends_question_and_workspaces(
    client: SearchClient, http: MagicMock, make_response
) -> None:
    http.request.return_value = make_response(200, SEARCH_BODY)

    result = client.search_network(
        "Python developers in fintech", "tok", ["shubham", "ajay"], "s1"
    )

    assert [p.name for p in result.profiles] == ["Asha Rao", "Ravi K"]
    assert result.metadata.session_id == "s1"
    assert result.metadata.filters["skill_filters"] == ["Python"]
    (method, url), kwargs = http.request.call_args
    assert (method, url) == ("POST", "http://api.test/ask")
    assert kwargs["json"] == {
        "question": "Python developers in fintech",
        "workspace_ids": ["shubham", "ajay"],
        "session_id": "s1",
    }


def test_wakes_server_only_once(
    client: SearchClient, http: MagicMock, make_response
) -> None:
    http.request.return_value = make_response(200, SEARCH_BODY)

    client.search_network("a", "tok", ["w"])
    client.search_network("b", "tok", ["w"])

    http.get.assert_called_once_with("http://api.test/health", timeout=1)
    assert client.server_awake is True


def test_wake_failure_is_ignored(
    client: SearchClient, http: MagicMock, make_response
) -> None:
    http.get.side_effect = requests.Timeout("cold start")
    http.request.return_value = make_response(200, SEARCH_BODY)

    result = client.search_network("a", "tok", ["w"])

    assert result.success is True
    assert client.server_awake is False


def test_missing_token_makes_no_call(client: SearchClient, http: MagicMock) -> None:
    with pytest.raises(AuthenticationRequired):
        client.search_network("a", None, ["w"])
    http.get.assert_not_called()
    http.request.assert_not_called()


def test_empty_workspaces_makes_no_call(client: SearchClient, http: MagicMock) -> None:
    with pytest.raises(ValidationFailed, match="at least one network"):
        client.search_network("Go developers", "tok", [])
    http.get.assert_not_called()
    http.request.assert_not_called()


def test_403_is_access_denied(
    client: SearchClient, http: MagicMock, make_response
) -> None:
    http.request.return_value = make_response(403, {"detail": "Forbidden"})
    with pytest.raises(AccessDenied, match="Access denied") as exc:
        client.search_network("a", "tok", ["secret"])
    assert isinstance(exc.value, RemoteRejected)


def test_401_is_authentication_failure(
    client: SearchClient, http: MagicMock, make_response
) -> None:
    http.request.return_value = make_response(401, {})
    with pytest.raises(AuthenticationFailed):
        client.search_network("a", "tok", ["w"])


def test_nested_detail_message(
    client: SearchClient, http: MagicMock, make_response
) -> None:
    http.request.return_value = make_response(
        503, {"detail": {"message": "Agent overloaded"}}
    )
    with pytest.raises(RemoteRejected, match="^Agent overloaded$"):
        client.search_network("a", "tok", ["w"])


def test_health_and_agent_info(
    client: SearchClient, http: MagicMock, make_response
) -> None:
    http.request.side_effect = [
        make_response(200, {"status": "ok"}),
        make_response(200, {"name": "connect-agent", "tools": ["search"]}),
    ]
    assert client.check_health() == {"status": "ok"}
    assert client.get_agent_info()["name"] == "connect-agent"
    paths = [c.args[1] for c in http.request.call_args_list]
    assert paths == ["http://api.test/health", "http://api.test/agent/info"]
