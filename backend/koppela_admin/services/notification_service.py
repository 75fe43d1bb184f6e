# Overview: Session-scoped toast and notification-center store shared by every console component.

"""
Notification service.

Two independent in-memory collections:
- toasts: transient messages, auto-dismissed after their duration unless persistent
- notifications: notification-center records, most recent first, read/unread

WHY: Components receive the service through their constructor instead of
importing a module-level singleton, so each console session (and each test)
owns an isolated instance.

Nothing is persisted. Expiry is measured on an injected monotonic clock and
applied whenever the collections are observed or tick() is called.
"""
from __future__ import annotations

import time
import uuid
from dataclasses import replace
from typing import Any, Callable, Optional

from ..models.notifications import (
    DEFAULT_TOAST_DURATION_MS,
    NotificationType,
    PersistentNotification,
    ToastNotification,
    ToastType,
)
from ..time_utils import utcnow


Listener = Callable[["NotificationService"], None]


def _generate_id() -> str:
    return uuid.uuid4().hex


class NotificationService:
    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        id_factory: Callable[[], str] = _generate_id,
    ):
        self._clock = clock
        self._id_factory = id_factory
        self._toasts: list[ToastNotification] = []
        self._notifications: list[PersistentNotification] = []
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Toasts
    # ------------------------------------------------------------------

    @property
    def toasts(self) -> list[ToastNotification]:
        self.tick()
        return list(self._toasts)

    def tick(self) -> int:
        """Drop toasts whose duration has elapsed. Returns how many were removed."""
        removed = self._expire_toasts()
        if removed:
            self._emit()
        return removed

    def _expire_toasts(self) -> int:
        now = self._clock()
        kept = [t for t in self._toasts if t.expires_at is None or t.expires_at > now]
        removed = len(self._toasts) - len(kept)
        if removed:
            self._toasts = kept
        return removed

    def show_toast(
        self,
        type: ToastType,
        title: str,
        message: str,
        *,
        duration: Optional[int] = None,
        persistent: bool = False,
    ) -> None:
        toast_type = ToastType(type)
        duration_ms = duration or DEFAULT_TOAST_DURATION_MS[toast_type]
        expires_at = None if persistent else self._clock() + duration_ms / 1000.0

        self._expire_toasts()
        self._toasts.append(
            ToastNotification(
                id=self._id_factory(),
                type=toast_type,
                title=title,
                message=message,
                duration=duration_ms,
                persistent=persistent,
                created_at=utcnow(),
                expires_at=expires_at,
            )
        )
        self._emit()

    def remove_toast(self, toast_id: str) -> None:
        remaining = [t for t in self._toasts if t.id != toast_id]
        if len(remaining) != len(self._toasts):
            self._toasts = remaining
            self._emit()

    def clear_all_toasts(self) -> None:
        self._toasts = []
        self._emit()

    def show_success(self, title: str, message: str) -> None:
        self.show_toast(ToastType.SUCCESS, title, message)

    def show_error(self, title: str, message: str) -> None:
        self.show_toast(ToastType.ERROR, title, message)

    def show_warning(self, title: str, message: str) -> None:
        self.show_toast(ToastType.WARNING, title, message)

    def show_info(self, title: str, message: str) -> None:
        self.show_toast(ToastType.INFO, title, message)

    # ------------------------------------------------------------------
    # Notification center
    # ------------------------------------------------------------------

    @property
    def notifications(self) -> list[PersistentNotification]:
        return list(self._notifications)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._notifications if not n.is_read)

    def add_notification(
        self,
        type: NotificationType,
        title: str,
        message: str,
        *,
        action_url: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        notification = PersistentNotification(
            id=self._id_factory(),
            type=NotificationType(type),
            title=title,
            message=message,
            created_at=utcnow(),
            is_read=False,
            action_url=action_url,
            metadata=dict(metadata or {}),
        )
        self._notifications.insert(0, notification)
        self._emit()

    def mark_as_read(self, notification_id: str) -> None:
        changed = False
        updated = []
        for n in self._notifications:
            if n.id == notification_id and not n.is_read:
                n = replace(n, is_read=True)
                changed = True
            updated.append(n)
        if changed:
            self._notifications = updated
            self._emit()

    def mark_all_as_read(self) -> None:
        if all(n.is_read for n in self._notifications):
            return
        self._notifications = [n if n.is_read else replace(n, is_read=True) for n in self._notifications]
        self._emit()

    def remove_notification(self, notification_id: str) -> None:
        remaining = [n for n in self._notifications if n.id != notification_id]
        if len(remaining) != len(self._notifications):
            self._notifications = remaining
            self._emit()

    def clear_all_notifications(self) -> None:
        self._notifications = []
        self._emit()

    def snapshot(self) -> dict:
        return {
            "toasts": [t.to_dict() for t in self.toasts],
            "notifications": [n.to_dict() for n in self._notifications],
            "unread_count": self.unread_count,
        }
