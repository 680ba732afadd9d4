"""Test fixtures for bao-console."""

from __future__ import annotations

import json
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from bao_console.client import Upstream
from bao_console.deps import get_upstream
from bao_console.main import app
from bao_console.session import TOKEN_HEADER, Session, TokenStore

TOKEN = "s.test-token"
UPSTREAM_URL = "http://bao.test"

Handler = Callable[[httpx.Request], httpx.Response]


class StubUpstream:
    """Recording stand-in for the secrets server.

    Responses are registered per (method, path); anything unregistered is
    answered with a 404 in the upstream's error envelope.
    """

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Handler] = {}

    def on(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json: Any = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if json is None:
                return httpx.Response(status_code)
            return httpx.Response(status_code, json=json)

        self._routes[(method, path)] = respond

    def on_call(self, method: str, path: str, handler: Handler) -> None:
        self._routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        handler = self._routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"errors": []})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def body(self, index: int = -1) -> dict:
        """Decoded JSON body of a recorded call."""
        return json.loads(self.calls[index].content)


@pytest.fixture
def upstream() -> StubUpstream:
    return StubUpstream()


@pytest.fixture
def client(upstream: StubUpstream) -> Generator[TestClient, None, None]:
    """Gateway test client wired to the stub upstream."""
    app.dependency_overrides[get_upstream] = lambda: Upstream(
        base_url=UPSTREAM_URL, transport=upstream.transport
    )
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {TOKEN_HEADER: TOKEN}


@pytest.fixture
def session_file(tmp_path: Path) -> Path:
    return tmp_path / ".bao-console" / "session"


@pytest.fixture
def session(session_file: Path) -> Session:
    """A rehydrated session with nothing stored yet."""
    return Session(TokenStore(session_file)).rehydrate()
