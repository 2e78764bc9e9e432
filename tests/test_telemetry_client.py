from unittest.mock import MagicMock

import pytest
import requests

from hubsearch.clients import TelemetryClient, TelemetryEventType, TelemetryLost
from hubsearch.utils.env_cfg import ApiConfig


@pytest.fixture
def client(api_config: ApiConfig, http: MagicMock):
    telemetry = TelemetryClient(api_config, http)
    yield telemetry
    telemetry.close()


def test_anonymous_event_has_no_auth_header(
    client: TelemetryClient, http: MagicMock, make_response
) -> None:
    http.request.return_value = make_response(200, {"success": True, "event_id": 11})

    result = client.log_event(
        TelemetryEventType.PROFILE_VIEWED, {"person_id": "123", "result_id": 456}
    )

    assert result.success is True
    assert result.event_id == 11
    (method, url), kwargs = http.request.call_args
    assert (method, url) == ("POST", "http://api.test/api/telemetry/event")
    assert kwargs["headers"] == {}
    assert kwargs["json"] == {
        "event_type": "profile_viewed",
        "event_data": {"person_id": "123", "result_id": 456},
    }


def test_event_with_token_and_search_id(
    client: TelemetryClient, http: MagicMock, make_response
) -> None:
    http.request.return_value = make_response(200, {"success": True, "event_id": 12})

    client.log_event("linkedin_click", {"person_id": "9"}, "tok", "search-1")

    kwargs = http.request.call_args.kwargs
    assert kwargs["headers"] == {"Authorization": "Bearer tok"}
    assert kwargs["json"]["search_id"] == "search-1"
    assert kwargs["json"]["event_type"] == "linkedin_click"


def test_failed_event_raises_telemetry_lost(
    client: TelemetryClient, http: MagicMock, make_response
) -> None:
    http.request.return_value = make_response(500, {"detail": "db down"})
    with pytest.raises(TelemetryLost, match="Failed to log telemetry event"):
        client.log_event("ai_draft", {})


def test_unknown_event_type_is_rejected(client: TelemetryClient, http: MagicMock) -> None:
    with pytest.raises(TelemetryLost):
        client.log_event("page_scrolled", {})
    http.request.assert_not_called()


def test_emit_swallows_server_errors(
    client: TelemetryClient, http: MagicMock, make_response
) -> None:
    """
    Fire-and-forget events never raise, even when the server fails.
    """
    http.request.return_value = make_response(500, {"detail": "db down"})
    future = client.emit("voice_usage", {"duration_seconds": 3})
    assert future.result(timeout=5) is None


def test_emit_swallows_network_errors(client: TelemetryClient, http: MagicMock) -> None:
    http.request.side_effect = requests.ConnectionError("offline")
    future = client.emit("voice_usage", {})
    assert future.result(timeout=5) is None


def test_emit_returns_response_on_success(
    client: TelemetryClient, http: MagicMock, make_response
) -> None:
    http.request.return_value = make_response(200, {"success": True, "event_id": 3})
    future = client.emit(TelemetryEventType.AI_DRAFT, {"person_id": "1"}, "tok")
    assert future.result(timeout=5).event_id == 3


def test_emit_after_close_is_dropped(
    api_config: ApiConfig, http: MagicMock
) -> None:
    telemetry = TelemetryClient(api_config, http)
    telemetry.close()
    future = telemetry.emit("voice_usage", {})
    assert future.done()
    assert future.result() is None
    http.request.assert_not_called()
