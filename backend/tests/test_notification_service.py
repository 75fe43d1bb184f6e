"""
Notification service tests.

Verifies:
- Toast expiry per type default and explicit duration
- Persistent toasts never expire
- Notification center ordering, unread count and read transitions
- Listener subscription and isolation between service instances
"""

import pytest

from koppela_admin.models.notifications import NotificationType, ToastType
from koppela_admin.services.notification_service import NotificationService


# =============================================================================
# TOASTS
# =============================================================================


class TestToastExpiry:
    """Toasts disappear once their duration has elapsed on the clock."""

    def test_success_toast_lives_five_seconds(self, notifications, clock):
        notifications.show_success("Saved", "Store created")

        clock.advance(4.5)
        assert len(notifications.toasts) == 1

        clock.advance(0.5)
        assert notifications.toasts == []

    @pytest.mark.parametrize(
        "toast_type,seconds",
        [
            (ToastType.SUCCESS, 5),
            (ToastType.ERROR, 7),
            (ToastType.WARNING, 6),
            (ToastType.INFO, 5),
        ],
    )
    def test_default_duration_per_type(self, notifications, clock, toast_type, seconds):
        notifications.show_toast(toast_type, "Title", "Message")
        assert notifications.toasts[0].duration == seconds * 1000

        clock.advance(seconds - 0.5)
        assert len(notifications.toasts) == 1
        clock.advance(0.5)
        assert notifications.toasts == []

    def test_explicit_duration_overrides_default(self, notifications, clock):
        notifications.show_toast(ToastType.ERROR, "Title", "Message", duration=1000)
        clock.advance(1.0)
        assert notifications.toasts == []

    def test_persistent_toast_stays_until_removed(self, notifications, clock):
        notifications.show_toast(ToastType.ERROR, "Offline", "No connection", persistent=True)
        clock.advance(3600)
        toasts = notifications.toasts
        assert len(toasts) == 1

        notifications.remove_toast(toasts[0].id)
        assert notifications.toasts == []

    def test_toasts_keep_insertion_order(self, notifications):
        notifications.show_info("First", "a")
        notifications.show_error("Second", "b")
        assert [t.title for t in notifications.toasts] == ["First", "Second"]

    def test_tick_reports_expired_count(self, notifications, clock):
        notifications.show_success("A", "a")
        notifications.show_error("B", "b")
        clock.advance(5)
        assert notifications.tick() == 1
        assert [t.title for t in notifications.toasts] == ["B"]

    def test_clear_all_toasts(self, notifications):
        notifications.show_success("A", "a")
        notifications.show_warning("B", "b")
        notifications.clear_all_toasts()
        assert notifications.toasts == []

    def test_removing_unknown_toast_is_a_no_op(self, notifications):
        notifications.show_success("A", "a")
        notifications.remove_toast("missing")
        assert len(notifications.toasts) == 1


# =============================================================================
# NOTIFICATION CENTER
# =============================================================================


class TestNotificationCenter:
    """Persistent notifications: most recent first, read/unread bookkeeping."""

    def test_newest_first_and_unread(self, notifications):
        notifications.add_notification(NotificationType.ORDER, "Order", "New order #1")
        notifications.add_notification(NotificationType.STOCK, "Stock", "Sugar is low")

        titles = [n.title for n in notifications.notifications]
        assert titles == ["Stock", "Order"]
        assert notifications.unread_count == 2
        assert all(not n.is_read for n in notifications.notifications)

    def test_mark_as_read_only_touches_one(self, notifications):
        notifications.add_notification(NotificationType.ORDER, "Order", "New order #1")
        notifications.add_notification(NotificationType.PAYMENT, "Payment", "Paid")
        target = notifications.notifications[1]

        notifications.mark_as_read(target.id)

        assert notifications.unread_count == 1
        read = {n.id: n.is_read for n in notifications.notifications}
        assert read[target.id] is True

    def test_mark_all_as_read(self, notifications):
        for i in range(3):
            notifications.add_notification(NotificationType.SYSTEM, f"N{i}", "x")
        notifications.mark_all_as_read()
        assert notifications.unread_count == 0

    def test_remove_and_clear(self, notifications):
        notifications.add_notification(NotificationType.USER, "A", "a")
        notifications.add_notification(NotificationType.USER, "B", "b")
        notifications.remove_notification(notifications.notifications[0].id)
        assert [n.title for n in notifications.notifications] == ["A"]

        notifications.clear_all_notifications()
        assert notifications.notifications == []
        assert notifications.unread_count == 0

    def test_metadata_and_action_url_are_kept(self, notifications):
        notifications.add_notification(
            NotificationType.STOCK,
            "Low stock",
            "Rice below reorder point",
            action_url="/admin/inventory",
            metadata={"product_id": 7},
        )
        payload = notifications.notifications[0].to_dict()
        assert payload["action_url"] == "/admin/inventory"
        assert payload["metadata"] == {"product_id": 7}
        assert payload["created_at"].endswith("Z")


# =============================================================================
# SUBSCRIPTION AND ISOLATION
# =============================================================================


class TestListeners:
    """Subscribers are told about every change until they unsubscribe."""

    def test_listener_sees_changes_until_unsubscribed(self, notifications):
        seen = []
        unsubscribe = notifications.subscribe(lambda service: seen.append(len(service.toasts)))

        notifications.show_info("A", "a")
        notifications.show_info("B", "b")
        unsubscribe()
        notifications.show_info("C", "c")

        assert seen == [1, 2]

    def test_listener_hears_expiry_noticed_on_read(self, notifications, clock):
        notifications.show_success("Saved", "ok")
        seen = []
        notifications.subscribe(lambda service: seen.append(len(service.toasts)))

        clock.advance(5)
        assert notifications.toasts == []
        assert seen == [0]

    def test_instances_do_not_share_state(self, clock):
        first = NotificationService(clock=clock)
        second = NotificationService(clock=clock)
        first.show_error("Only here", "x")
        assert second.toasts == []

    def test_snapshot_shape(self, notifications):
        notifications.show_success("Saved", "ok")
        notifications.add_notification(NotificationType.ORDER, "Order", "x")
        snapshot = notifications.snapshot()
        assert set(snapshot) == {"toasts", "notifications", "unread_count"}
        assert snapshot["toasts"][0]["type"] == "success"
        assert snapshot["unread_count"] == 1
