# Overview: Per-browser console state (notifications, navigation progress, language).

"""
Console sessions.

WHY: The notification center and the loading bar are shared by every
component of one operator's console but must not leak between operators.
Each browser session gets one ConsoleSession, created on first use and kept
in memory until it idles out; nothing is written to disk.

The Flask session cookie only carries the opaque console id.
"""
from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from ..i18n import Language
from .navigation_service import NavigationProgress
from .notification_service import NotificationService


logger = logging.getLogger(__name__)


DEFAULT_IDLE_TIMEOUT = 2 * 60 * 60  # seconds
DEFAULT_MAX_SESSIONS = 5000


@dataclass
class ConsoleSession:
    id: str
    notifications: NotificationService
    navigation: NavigationProgress
    language: Language = Language.EN
    last_used_at: float = 0.0

    def set_language(self, language: Language) -> None:
        self.language = Language(language)


class ConsoleSessionRegistry:
    """
    Flask-style extension holding every live ConsoleSession.

    Sessions idle for longer than CONSOLE_SESSION_IDLE_TIMEOUT seconds are
    dropped; at CONSOLE_SESSION_MAX live sessions the least recently used
    one makes room for a new one.

    Usage:
        console_sessions = ConsoleSessionRegistry()
        console_sessions.init_app(app)
    """

    def __init__(
        self,
        app=None,
        *,
        clock: Callable[[], float] = time.monotonic,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ):
        self._clock = clock
        self.idle_timeout = idle_timeout
        self.max_sessions = max_sessions
        self._sessions: dict[str, ConsoleSession] = {}
        self._lock = threading.Lock()
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        self.idle_timeout = float(app.config.get("CONSOLE_SESSION_IDLE_TIMEOUT", self.idle_timeout))
        self.max_sessions = int(app.config.get("CONSOLE_SESSION_MAX", self.max_sessions))
        app.extensions["console_sessions"] = self

    def use_clock(self, clock: Callable[[], float]) -> None:
        """Clock for sessions created from now on (tests drive time explicitly)."""
        self._clock = clock

    def get(self, session_id: Optional[str]) -> Optional[ConsoleSession]:
        """Live session for the id, marked as used; None when unknown or idle too long."""
        if not session_id:
            return None
        now = self._clock()
        with self._lock:
            console = self._sessions.get(session_id)
            if console is None:
                return None
            if now - console.last_used_at > self.idle_timeout:
                del self._sessions[session_id]
                logger.debug("Console session %s expired after idling", session_id)
                return None
            console.last_used_at = now
            return console

    def create(self, language: Language = Language.EN) -> ConsoleSession:
        now = self._clock()
        console = ConsoleSession(
            id=uuid.uuid4().hex,
            notifications=NotificationService(clock=self._clock),
            navigation=NavigationProgress(clock=self._clock),
            language=Language(language),
            last_used_at=now,
        )
        with self._lock:
            self._cleanup_expired(now)
            while self._sessions and len(self._sessions) >= self.max_sessions:
                oldest = min(self._sessions.values(), key=lambda s: s.last_used_at)
                del self._sessions[oldest.id]
                logger.info("Console session limit reached; evicted %s", oldest.id)
            self._sessions[console.id] = console
        logger.debug("Created console session %s", console.id)
        return console

    def _cleanup_expired(self, now: float) -> int:
        expired = [sid for sid, s in self._sessions.items() if now - s.last_used_at > self.idle_timeout]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()
