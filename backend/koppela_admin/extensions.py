# Overview: Flask extension instances for the admin API client and console sessions.

from __future__ import annotations

from typing import Optional

import httpx
from flask import current_app, g, has_request_context, request

from .services.api_client import AdminApiClient
from .services.session_service import ConsoleSessionRegistry


FORWARDED_HEADERS = ("Authorization", "Cookie")


class AdminApi:
    """
    Builds AdminApiClient instances bound to the configured base URL.

    Inside a request the caller's Authorization and Cookie headers are
    forwarded, so the external API authorizes the operator, not the console.
    One client is created per request and closed at teardown.
    """

    def __init__(self, app=None):
        self.transport: Optional[httpx.BaseTransport] = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        app.extensions["admin_api"] = self
        app.teardown_appcontext(self._teardown)

    def use_transport(self, transport: Optional[httpx.BaseTransport]) -> None:
        """Route every new client through `transport` (tests install httpx.MockTransport)."""
        self.transport = transport

    def create_client(self, app, headers: Optional[dict] = None) -> AdminApiClient:
        return AdminApiClient(
            app.config["ADMIN_API_BASE_URL"],
            timeout=app.config["ADMIN_API_TIMEOUT"],
            headers=headers,
            transport=self.transport,
        )

    @property
    def client(self) -> AdminApiClient:
        client = g.get("_admin_api_client")
        if client is None:
            headers = {}
            if has_request_context():
                headers = {k: request.headers[k] for k in FORWARDED_HEADERS if k in request.headers}
            client = self.create_client(current_app, headers)
            g._admin_api_client = client
        return client

    @staticmethod
    def _teardown(exc) -> None:
        client = g.pop("_admin_api_client", None)
        if client is not None:
            client.close()


admin_api = AdminApi()
console_sessions = ConsoleSessionRegistry()
