# Overview: Health and version endpoints of the console itself.

"""
System health and version endpoints.

The console holds no data of its own; health reports the in-process session
registry and the configured upstream admin API.
"""

import sys
import time

from flask import Blueprint, current_app

from ..extensions import admin_api, console_sessions
from ..services.api_client import ApiTransportError
from ..time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__)

API_VERSION = "1.0.0"


def check_admin_api_health() -> dict:
    """
    Check that the admin API answers at all.

    Any HTTP response counts as reachable; only transport failures are unhealthy.
    """
    start_time = time.time()
    try:
        response = admin_api.client.get("/api/subscription/plans")
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"status_code": response.status_code},
        }
    except ApiTransportError:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Admin API health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Admin API unreachable",
        }


@system_bp.get("/health")
def health():
    """
    Returns:
    - 200: admin API reachable
    - 503: admin API unreachable
    """
    start_time = time.time()
    api_health = check_admin_api_health()
    healthy = api_health["status"] == "healthy"

    response = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": to_utc_z(utcnow()),
        "total_latency_ms": round((time.time() - start_time) * 1000, 2),
        "checks": {
            "admin_api": api_health,
            "console_sessions": {"status": "healthy", "details": {"active": len(console_sessions)}},
        },
    }
    return response, 200 if healthy else 503


@system_bp.get("/version")
def version():
    """
    Non-sensitive deployment information; never exposes secrets or the upstream URL.
    """
    env = "production" if not current_app.debug else "development"
    return {
        "api_version": API_VERSION,
        "environment": env,
        "python_version": sys.version.split()[0],
        "server_time": to_utc_z(utcnow()),
    }
