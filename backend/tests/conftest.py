"""
Pytest fixtures for Koppela admin console tests.

Provides a fake monotonic clock, a scripted admin API built on
httpx.MockTransport that records every call, the Flask app and test client.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from koppela_admin import create_app
from koppela_admin.extensions import admin_api, console_sessions
from koppela_admin.services.api_client import AdminApiClient
from koppela_admin.services.notification_service import NotificationService


API_BASE_URL = "http://admin-api.test"


class FakeClock:
    """Monotonic clock that only moves when a test advances it."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass
class RecordedCall:
    method: str
    path: str
    params: dict
    json: Any = None
    request: Optional[httpx.Request] = None


Reply = Union[dict, Callable[[httpx.Request], httpx.Response], httpx.Response, Exception]


@dataclass
class FakeAdminApi:
    """
    Scripted admin API.

    `on(method, path, reply)` registers a reply: a JSON body (sent with
    `status`), a callable taking the request, or an exception raised as a
    transport failure. Unscripted requests answer 404.
    """
    routes: dict = field(default_factory=dict)
    calls: list = field(default_factory=list)

    def on(self, method: str, path: str, reply: Reply, *, status: int = 200) -> None:
        self.routes[(method.upper(), path)] = (reply, status)

    def ok(self, method: str, path: str, data: Any = None, **extra) -> None:
        body = {"success": True, **extra}
        if data is not None:
            body["data"] = data
        self.on(method, path, body)

    def fail(self, method: str, path: str, message: str, *, status: int = 400) -> None:
        self.on(method, path, {"success": False, "message": message}, status=status)

    def calls_to(self, method: str, path: str) -> list:
        return [c for c in self.calls if c.method == method.upper() and c.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = None
        if request.content and request.headers.get("content-type", "").startswith("application/json"):
            body = json.loads(request.content)
        self.calls.append(
            RecordedCall(
                method=request.method,
                path=request.url.path,
                params=dict(request.url.params),
                json=body,
                request=request,
            )
        )

        scripted = self.routes.get((request.method, request.url.path))
        if scripted is None:
            return httpx.Response(404, json={"success": False, "message": "Not found"})
        reply, status = scripted
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, httpx.Response):
            return reply
        if callable(reply):
            return reply(request)
        return httpx.Response(status, json=reply)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> AdminApiClient:
        return AdminApiClient(API_BASE_URL, transport=self.transport)


class ConsoleTestConfig:
    TESTING = True
    SECRET_KEY = "test-secret-key"
    ADMIN_API_BASE_URL = API_BASE_URL
    ADMIN_API_TIMEOUT = 5.0
    LOG_LEVEL = "DEBUG"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_api():
    return FakeAdminApi()


@pytest.fixture
def api(fake_api):
    """AdminApiClient wired to the scripted admin API."""
    client = fake_api.client()
    yield client
    client.close()


@pytest.fixture
def notifications(clock):
    return NotificationService(clock=clock)


@pytest.fixture
def app(fake_api, clock):
    """Create application for testing."""
    app = create_app(ConsoleTestConfig)
    admin_api.use_transport(fake_api.transport)
    console_sessions.use_clock(clock)
    console_sessions.clear()

    yield app

    admin_api.use_transport(None)
    console_sessions.clear()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def business_headers():
    return {"X-Business-Id": "1"}
