# Overview: Notification center and toast endpoints for the current console session.

from flask import Blueprint, g, jsonify

from ..decorators import with_console


notifications_bp = Blueprint("notifications", __name__, url_prefix="/console")


def _state():
    snapshot = g.console.notifications.snapshot()
    return jsonify(snapshot)


@notifications_bp.get("/notifications")
@with_console
def list_notifications():
    """
    Toasts still on screen, the notification center (most recent first) and the unread badge.

    Returns:
        200: {"toasts": [...], "notifications": [...], "unread_count": int}
    """
    g.console.notifications.tick()
    return _state()


@notifications_bp.post("/notifications/<notification_id>/read")
@with_console
def mark_read(notification_id: str):
    g.console.notifications.mark_as_read(notification_id)
    return _state()


@notifications_bp.post("/notifications/read-all")
@with_console
def mark_all_read():
    g.console.notifications.mark_all_as_read()
    return _state()


@notifications_bp.delete("/notifications/<notification_id>")
@with_console
def remove_notification(notification_id: str):
    g.console.notifications.remove_notification(notification_id)
    return _state()


@notifications_bp.delete("/notifications")
@with_console
def clear_notifications():
    g.console.notifications.clear_all_notifications()
    return _state()


@notifications_bp.delete("/toasts/<toast_id>")
@with_console
def dismiss_toast(toast_id: str):
    g.console.notifications.remove_toast(toast_id)
    return _state()


@notifications_bp.delete("/toasts")
@with_console
def clear_toasts():
    g.console.notifications.clear_all_toasts()
    return _state()
