from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from streamlit.testing.v1 import AppTest


def _app() -> None:
    from hubsearch.app import main

    main()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Keep the app away from real credentials and the project log directory.

    Args:
        tmp_path (Path): Temporary directory.
        monkeypatch (pytest.MonkeyPatch): Fixture to override environment.
    """
    monkeypatch.setenv("LOG_PATH", str(tmp_path / "app.log"))
    monkeypatch.setenv("API_URL", "http://api.test")
    monkeypatch.delenv("API_TOKEN", raising=False)


@patch("requests.Session.request")
def test_streamlit_app_loads(mock_request: MagicMock) -> None:
    """
    Test that the Streamlit app loads without errors or network calls.

    Args:
        mock_request (MagicMock): The mock object for requests.Session.request.
    """
    at = AppTest.from_function(_app)
    at.run(timeout=30)

    assert not at.exception
    assert len(at.chat_input) == 1
    mock_request.assert_not_called()


@patch("requests.Session.request")
def test_message_without_token_asks_to_sign_in(mock_request: MagicMock) -> None:
    """
    Test that a message sent without a token is refused before any request.

    Args:
        mock_request (MagicMock): The mock object for requests.Session.request.
    """
    at = AppTest.from_function(_app)
    at.run(timeout=30)

    at.chat_input[0].set_value("I need a developer").run(timeout=30)

    assert not at.exception
    assert any("Authentication required" in e.value for e in at.error)
    mock_request.assert_not_called()


@patch("requests.Session.request")
def test_question_is_shown(mock_request: MagicMock) -> None:
    """
    Test that the clarifying question from the backend is rendered.

    Args:
        mock_request (MagicMock): The mock object for requests.Session.request.
    """
    mock_response = MagicMock()
    mock_response.ok = True
    mock_response.status_code = 200
    mock_response.json.return_value = {
        "session_id": "s1",
        "is_complete": False,
        "question": "Which tech stack?",
    }
    mock_request.return_value = mock_response

    at = AppTest.from_function(_app)
    at.run(timeout=30)
    at.text_input(key="api_token").set_value("tok").run(timeout=30)
    at.chat_input[0].set_value("I need a developer").run(timeout=30)

    assert not at.exception
    assert any("Which tech stack?" in m.value for m in at.markdown)
    method, url = mock_request.call_args.args[:2]
    assert (method, url) == ("POST", "http://api.test/chat")
