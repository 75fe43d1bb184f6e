# backend/koppela_admin/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # External admin API (business logic, persistence, authorization)
    ADMIN_API_BASE_URL = os.environ.get(
        "ADMIN_API_BASE_URL",
        "http://127.0.0.1:3000",
    )
    # Seconds; a hung upstream request is abandoned after this ceiling
    ADMIN_API_TIMEOUT = float(os.environ.get("ADMIN_API_TIMEOUT", "30"))

    DEFAULT_LANGUAGE = os.environ.get("DEFAULT_LANGUAGE", "en")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Business logo uploads (enforced before the upload is sent)
    LOGO_MAX_BYTES = 5 * 1024 * 1024

    # Browser origins allowed to call the console with credentials
    CORS_ALLOWED_ORIGINS = tuple(
        origin.strip()
        for origin in os.environ.get(
            "CORS_ALLOWED_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000",
        ).split(",")
        if origin.strip()
    )

    # In-memory console sessions: idle timeout in seconds, and a ceiling on live sessions
    CONSOLE_SESSION_IDLE_TIMEOUT = float(os.environ.get("CONSOLE_SESSION_IDLE_TIMEOUT", "7200"))
    CONSOLE_SESSION_MAX = int(os.environ.get("CONSOLE_SESSION_MAX", "5000"))
