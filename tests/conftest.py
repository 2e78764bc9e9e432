import json
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from hubsearch.utils.env_cfg import ApiConfig

_NO_JSON = object()


def _make_response(
    status_code: int = 200,
    body: Any = None,
    text: str | None = None,
    url: str = "http://api.test/endpoint",
) -> MagicMock:
    """
    Build a stand-in for ``requests.Response``.

    Args:
        status_code (int, optional): HTTP status. Defaults to 200.
        body (Any, optional): Decoded JSON body; ``_NO_JSON`` makes ``json()`` fail. Defaults to None.
        text (str | None, optional): Raw body text. Defaults to the JSON dump of ``body``.
        url (str, optional): Request URL. Defaults to "http://api.test/endpoint".

    Returns:
        MagicMock: The fake response.
    """
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.url = url
    if body is _NO_JSON:
        resp.json.side_effect = ValueError("Expecting value")
        resp.text = text if text is not None else "<html>Bad Gateway</html>"
    else:
        resp.json.return_value = body
        resp.text = text if text is not None else json.dumps(body)
    return resp


@pytest.fixture
def no_json() -> object:
    """Marker for a response whose body is not JSON."""
    return _NO_JSON


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory for fake HTTP responses."""
    return _make_response


@pytest.fixture
def api_config() -> ApiConfig:
    """API configuration pointing at a fake origin."""
    return ApiConfig(
        base_url="http://api.test",
        request_timeout=5,
        wake_timeout=1,
        telemetry_workers=1,
    )


@pytest.fixture
def http() -> MagicMock:
    """A stand-in for the injected ``requests.Session``."""
    return MagicMock()
