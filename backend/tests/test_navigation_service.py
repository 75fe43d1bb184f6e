"""
Navigation progress tests.

Verifies:
- Simulated progress steps after start
- Completion on route change, stop, and the automatic ceiling
- Hiding after completion and restart behaviour
- Link clicks start the bar before their handler runs
"""

import pytest

from koppela_admin.services.navigation_service import NavigationLink, NavigationProgress


@pytest.fixture
def progress(clock):
    return NavigationProgress(clock=clock)


class TestProgressSteps:
    """start() shows 15% and climbs to 90% while the page loads."""

    def test_idle_bar(self, progress):
        snapshot = progress.snapshot()
        assert snapshot.is_loading is False
        assert snapshot.progress == 0

    @pytest.mark.parametrize(
        "elapsed,expected",
        [
            (0.0, 15),
            (0.049, 15),
            (0.051, 35),
            (0.151, 55),
            (0.301, 75),
            (0.501, 90),
            (2.0, 90),
        ],
    )
    def test_progress_after(self, progress, clock, elapsed, expected):
        progress.start("/admin/stores")
        clock.advance(elapsed)
        assert progress.progress == expected
        assert progress.is_loading is True


class TestCompletion:
    """The bar reaches 100%, then hides 300 ms later."""

    def test_route_change_completes_after_delay(self, progress, clock):
        progress.start("/admin/users", from_path="/admin")
        clock.advance(0.2)
        progress.route_changed("/admin/users")

        clock.advance(0.05)
        assert progress.progress == 55
        clock.advance(0.06)
        assert progress.progress == 100

        clock.advance(0.31)
        assert progress.is_loading is False
        assert progress.progress == 0

    def test_route_change_to_same_path_is_ignored(self, progress, clock):
        progress.start("/admin/users", from_path="/admin/users")
        progress.route_changed("/admin/users")
        clock.advance(0.2)
        assert progress.progress == 55

    def test_stop_completes_immediately(self, progress, clock):
        progress.start("/admin")
        clock.advance(0.06)
        progress.stop()
        assert progress.progress == 100
        clock.advance(0.31)
        assert progress.is_loading is False

    def test_auto_completes_after_two_and_a_half_seconds(self, progress, clock):
        progress.start("/admin/reports")
        clock.advance(2.5)
        assert progress.progress == 100
        clock.advance(0.31)
        assert progress.is_loading is False

    def test_route_change_while_idle_does_nothing(self, progress, clock):
        progress.route_changed("/admin")
        assert progress.snapshot().is_loading is False

    def test_restart_discards_pending_completion(self, progress, clock):
        progress.start("/a")
        progress.stop()
        progress.start("/b")
        assert progress.progress == 15
        assert progress.snapshot().href == "/b"


class TestNavigationLink:
    """Clicking a link starts the bar, then calls the handler."""

    def test_click_starts_progress_then_calls_handler(self, progress):
        observed = []

        def handler(href, event=None):
            observed.append((href, event, progress.is_loading))

        link = NavigationLink("/admin/stores", progress, on_click=handler)
        link.click("evt")

        assert observed == [("/admin/stores", "evt", True)]

    def test_click_without_handler(self, progress):
        NavigationLink("/admin", progress).click()
        assert progress.snapshot().href == "/admin"
