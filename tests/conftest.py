"""
Shared fixtures for Turso client tests.
"""

import io
import json
from http import HTTPStatus
from typing import Any, Optional

import pytest
import requests

from turso_client import ClientConfig, TursoClient
from turso_client.api import HTTPClient

BASE_URL = "https://api.example.com"


def make_response(
    status: int = 200,
    body: Any = None,
    url: str = BASE_URL + "/",
    reason: Optional[str] = None,
) -> requests.Response:
    """Build a real, unread requests.Response."""
    if body is None:
        content = b""
    elif isinstance(body, bytes):
        content = body
    elif isinstance(body, str):
        content = body.encode("utf-8")
    else:
        content = json.dumps(body).encode("utf-8")

    response = requests.Response()
    response.status_code = status
    response.reason = reason if reason is not None else HTTPStatus(status).phrase
    response.headers["Content-Type"] = "application/json"
    response.raw = io.BytesIO(content)
    response.url = url
    return response


@pytest.fixture
def session():
    """HTTP session whose send() tests patch."""
    s = requests.Session()
    yield s
    s.close()


@pytest.fixture
def make_config(session):
    """Factory for configurations pointing at the test endpoint."""
    def _make(org: str = "", **kwargs: Any) -> ClientConfig:
        kwargs.setdefault("base_url", BASE_URL)
        kwargs.setdefault("session", session)
        return ClientConfig(token="test-token", org=org, **kwargs)
    return _make


@pytest.fixture
def make_client(make_config):
    """Factory for API clients."""
    def _make(org: str = "", **kwargs: Any) -> TursoClient:
        return TursoClient(make_config(org, **kwargs))
    return _make


@pytest.fixture
def http(make_config):
    """HTTP client without organization scope."""
    return HTTPClient(make_config())
