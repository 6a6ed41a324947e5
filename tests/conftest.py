"""Test configuration and fixtures."""

from __future__ import annotations

import io
import json
from collections.abc import Callable
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from pyrus_client.client import PyrusClient
from pyrus_client.transport import TokenStore, Transport

TEST_LOGIN = "bot@example.com"
TEST_SECURITY_KEY = "secret-key"
TEST_BASE_URL = "https://api.test/v4"

ResponseFactory = Callable[..., requests.Response]


def make_response(
    status: int = 200,
    *,
    json_body: Any = None,
    content: bytes = b"",
    headers: dict[str, str] | None = None,
) -> requests.Response:
    """Build a real `requests.Response` whose body can be streamed."""

    response = requests.Response()
    response.status_code = status
    if json_body is not None:
        content = json.dumps(json_body).encode("utf-8")
        response.headers["Content-Type"] = "application/json; charset=utf-8"
    response.headers.update(headers or {})
    response.raw = io.BytesIO(content)
    return response


@pytest.fixture
def response_factory() -> ResponseFactory:
    return make_response


@pytest.fixture
def session() -> Mock:
    """A session mock; tests queue responses via `session.request.side_effect`."""

    return Mock(spec=requests.Session)


@pytest.fixture
def token_store() -> TokenStore:
    """A token store that already holds a token, so no initial auth call happens."""

    return TokenStore("stored-token")


@pytest.fixture
def transport(session: Mock, token_store: TokenStore) -> Transport:
    return Transport(
        login=TEST_LOGIN,
        security_key=TEST_SECURITY_KEY,
        base_url=TEST_BASE_URL,
        session=session,
        token_store=token_store,
    )


@pytest.fixture
def client(session: Mock, token_store: TokenStore) -> PyrusClient:
    return PyrusClient(
        TEST_LOGIN,
        TEST_SECURITY_KEY,
        base_url=TEST_BASE_URL,
        session=session,
        token_store=token_store,
    )
