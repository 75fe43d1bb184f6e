from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..time_utils import to_utc_z


class ToastType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class NotificationType(str, Enum):
    SYSTEM = "system"
    ORDER = "order"
    PAYMENT = "payment"
    STOCK = "stock"
    USER = "user"


# Milliseconds a toast stays on screen unless the caller overrides it
DEFAULT_TOAST_DURATION_MS = {
    ToastType.SUCCESS: 5000,
    ToastType.ERROR: 7000,
    ToastType.WARNING: 6000,
    ToastType.INFO: 5000,
}


@dataclass(frozen=True)
class ToastNotification:
    """
    Transient on-screen message.

    `expires_at` is measured on the notification service's monotonic clock
    and is None for persistent toasts.
    """
    id: str
    type: ToastType
    title: str
    message: str
    duration: int
    persistent: bool
    created_at: datetime
    expires_at: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "duration": self.duration,
            "persistent": self.persistent,
            "created_at": to_utc_z(self.created_at),
        }


@dataclass(frozen=True)
class PersistentNotification:
    """Notification-center entry; only `is_read` ever changes, by replacement."""
    id: str
    type: NotificationType
    title: str
    message: str
    created_at: datetime
    is_read: bool = False
    action_url: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "created_at": to_utc_z(self.created_at),
            "is_read": self.is_read,
            "action_url": self.action_url,
            "metadata": dict(self.metadata),
        }
