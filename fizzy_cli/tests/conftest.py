"""Shared fixtures: an isolated config location and a fake Fizzy API."""

import json

import httpx
import pytest

from fizzy_cli.client import FizzyClient
from fizzy_cli.config import ConfigStore


class FakeAPI:
    """Routes requests to canned responses and records every request it sees."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], httpx.Response | Exception] = {}

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json_body=None,
        text: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        if json_body is not None:
            response = httpx.Response(status, json=json_body, headers=headers)
        else:
            response = httpx.Response(status, text=text or "", headers=headers)
        self.routes[(method, path)] = response

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self.routes[(method, path)] = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.raw_path.decode()))
        if route is None:
            return httpx.Response(404, text="Not found")
        if isinstance(route, Exception):
            raise route
        return route

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.raw_path.decode()) for r in self.requests]

    def body(self, index: int = -1):
        return json.loads(self.requests[index].content)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the real environment and config file."""
    monkeypatch.delenv("FIZZY_API_TOKEN", raising=False)
    monkeypatch.delenv("FIZZY_ACCOUNT_SLUG", raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("FIZZY_CONFIG_DIR", str(tmp_path / "config"))


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path / "config" / "config.json")


@pytest.fixture
def api():
    return FakeAPI()


@pytest.fixture
def make_client(api, store):
    """Build clients wired to the fake API."""
    clients = []

    def _make(token="test-token", account_slug="test-account"):
        client = FizzyClient(token, account_slug, store=store, transport=httpx.MockTransport(api.handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    return make_client()
