# Overview: HTTP client for the external admin API; every console operation goes through it.

"""
Admin API client.

WHY: Persistence, validation enforcement and authorization live behind the
`/api/admin/*` and `/api/subscription/*` endpoints. The console only shapes
requests and interprets the `{success, data?, message?}` envelope.

ERRORS:
- Application failures ({"success": false, "message": ...}, non-2xx status)
  come back as ApiResponse values with success=False.
- Transport failures (connection refused, timeout) raise ApiTransportError.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx


logger = logging.getLogger(__name__)


class AdminApiError(Exception):
    """Base class for admin API client failures."""


class ApiTransportError(AdminApiError):
    """Raised when the request never produced an HTTP response."""


@dataclass(frozen=True)
class ApiCall:
    """One request to the admin API, built by a form before it is sent."""
    method: str
    path: str
    json: Optional[dict] = None
    params: Optional[dict] = None
    data: Optional[dict] = None
    files: Optional[dict] = None


@dataclass(frozen=True)
class ApiResponse:
    success: bool
    status_code: int
    data: Any = None
    message: Optional[str] = None
    body: dict = field(default_factory=dict)


def _drop_none(values: Optional[dict]) -> Optional[dict]:
    if values is None:
        return None
    return {k: v for k, v in values.items() if v is not None}


class AdminApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        headers: Optional[dict] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers=headers or {},
            transport=transport,
        )

    def __enter__(self) -> "AdminApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def send(self, call: ApiCall) -> ApiResponse:
        try:
            response = self._client.request(
                call.method,
                call.path,
                json=call.json,
                params=_drop_none(call.params),
                data=call.data,
                files=call.files,
            )
        except httpx.HTTPError as exc:
            logger.exception("Admin API %s %s failed", call.method, call.path)
            raise ApiTransportError(f"{call.method} {call.path} failed: {exc}") from exc

        return self._parse(response)

    def get(self, path: str, *, params: Optional[dict] = None) -> ApiResponse:
        return self.send(ApiCall("GET", path, params=params))

    def post(self, path: str, *, json: Optional[dict] = None, params: Optional[dict] = None) -> ApiResponse:
        return self.send(ApiCall("POST", path, json=json, params=params))

    def put(self, path: str, *, json: Optional[dict] = None, params: Optional[dict] = None) -> ApiResponse:
        return self.send(ApiCall("PUT", path, json=json, params=params))

    def delete(self, path: str, *, params: Optional[dict] = None) -> ApiResponse:
        return self.send(ApiCall("DELETE", path, params=params))

    @staticmethod
    def _parse(response: httpx.Response) -> ApiResponse:
        try:
            body = response.json()
        except ValueError:
            logger.warning(
                "Admin API returned non-JSON body (status %s) for %s",
                response.status_code,
                response.request.url,
            )
            return ApiResponse(success=False, status_code=response.status_code)

        if not isinstance(body, dict):
            return ApiResponse(success=False, status_code=response.status_code)

        success = response.is_success and body.get("success") is True
        message = body.get("message") or body.get("error")
        return ApiResponse(
            success=success,
            status_code=response.status_code,
            data=body.get("data"),
            message=message if isinstance(message, str) else None,
            body=body,
        )
