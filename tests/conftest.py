"""Pytest configuration and shared fixtures"""

import logging
import os
import sys
import threading
from datetime import date

import httpx
import pytest

from oura_mcp.auth import CredentialProvider, StaticToken
from oura_mcp.client import OuraClient
from oura_mcp.config import Config
from oura_mcp.dispatcher import RequestDispatcher

TEST_BASE_URL = "https://api.test.oura/v2"
TEST_TOKEN_URL = "https://api.test.oura/oauth/token"
TODAY = date(2024, 6, 10)


class FakeUpstream:
    """Stands in for the Oura API: records requests, answers from a route table.

    Routes map a URL path to either an httpx.Response or a (sync or async)
    callable taking the request.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes = {}
        self.default = httpx.Response(200, json={"data": []})

    def handler(self, request: httpx.Request):
        self.requests.append(request)
        route = self.routes.get(request.url.path, self.default)
        if callable(route):
            return route(request)
        # fresh copy so a route can answer more than once
        return httpx.Response(
            route.status_code, headers=route.headers, content=route.content
        )

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def clean_env(monkeypatch):
    """Remove OURA_* environment variables so Config sees only what a test passes."""
    for key in list(os.environ):
        if key.startswith("OURA_"):
            monkeypatch.delenv(key)


@pytest.fixture
def make_config(clean_env):
    """Factory for Config instances isolated from the environment and .env files."""

    def _make(**overrides) -> Config:
        values = {"base_url": TEST_BASE_URL, "token_url": TEST_TOKEN_URL}
        values.update(overrides)
        return Config(_env_file=None, **values)

    return _make


@pytest.fixture
def config(make_config):
    """Config in personal access token mode"""
    return make_config(personal_access_token="test-token")


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def oura_client(config, upstream):
    """OuraClient over the fake upstream with a static token"""
    http_client = upstream.http_client()
    provider = CredentialProvider(StaticToken(value="test-token"), config, http_client)
    return OuraClient(config, credential_provider=provider, http_client=http_client)


@pytest.fixture
def dispatcher(oura_client):
    """RequestDispatcher whose clock is pinned to TODAY"""
    return RequestDispatcher(oura_client, clock=lambda: TODAY)


@pytest.fixture
def process_state():
    """Restore stdout, exception hooks and root logging touched by main()."""
    saved_stdout = sys.stdout
    saved_excepthook = sys.excepthook
    saved_thread_excepthook = threading.excepthook
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    try:
        yield
    finally:
        sys.stdout = saved_stdout
        sys.excepthook = saved_excepthook
        threading.excepthook = saved_thread_excepthook
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
