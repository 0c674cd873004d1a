"""
Shared fixtures: a routed fake of the HTTP transport behind HttpGateway.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterator
from unittest.mock import MagicMock, patch

import pytest

API_BASE = "http://api.test/api/v1"


def make_response(status: int, body: Any = None) -> MagicMock:
    r = MagicMock()
    r.status_code = status
    if body is None:
        r.content = b""
        r.json.side_effect = ValueError("empty body")
    else:
        r.content = json.dumps(body).encode()
        r.json.return_value = body
    return r


class FakeApi:
    """
    Stands in for `requests.request`. Routes are keyed by (METHOD, path); a
    route value is a response or a callable taking the request kwargs.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def route(self, method: str, path: str, response: Any) -> None:
        self.routes[(method, path)] = response

    def calls_to(self, method: str, path: str) -> list[dict[str, Any]]:
        return [kw for m, p, kw in self.calls if m == method and p == path]

    def __call__(self, method: str, url: str, **kwargs: Any) -> MagicMock:
        path = url[len(API_BASE):] if url.startswith(API_BASE) else url
        self.calls.append((method, path, kwargs))
        handler: Callable[[dict[str, Any]], MagicMock] | MagicMock = self.routes[(method, path)]
        return handler(kwargs) if callable(handler) and not isinstance(handler, MagicMock) else handler


@pytest.fixture
def fake_api() -> Iterator[FakeApi]:
    api = FakeApi()
    with patch("estate_client.infrastructure.gateway.requests.request", side_effect=api):
        yield api


@pytest.fixture
def respond() -> Callable[..., MagicMock]:
    return make_response
