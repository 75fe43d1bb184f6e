"""
Console session registry tests.

Verifies:
- Sessions idle for longer than the timeout are dropped
- Using a session keeps it alive
- The registry never holds more than its cap; the least recently used goes first
"""

from koppela_admin.i18n import Language
from koppela_admin.services.session_service import DEFAULT_IDLE_TIMEOUT, ConsoleSessionRegistry


class TestIdleExpiry:
    def test_unknown_or_empty_id(self, clock):
        registry = ConsoleSessionRegistry(clock=clock)
        assert registry.get(None) is None
        assert registry.get("missing") is None

    def test_session_expires_after_idle_timeout(self, clock):
        registry = ConsoleSessionRegistry(clock=clock)
        console = registry.create(Language.SW)

        clock.advance(DEFAULT_IDLE_TIMEOUT)
        assert registry.get(console.id) is console

        clock.advance(DEFAULT_IDLE_TIMEOUT + 1)
        assert registry.get(console.id) is None
        assert len(registry) == 0

    def test_use_keeps_session_alive(self, clock):
        registry = ConsoleSessionRegistry(clock=clock, idle_timeout=60)
        console = registry.create()
        for _ in range(5):
            clock.advance(50)
            assert registry.get(console.id) is console

    def test_create_sweeps_idle_sessions(self, clock):
        registry = ConsoleSessionRegistry(clock=clock, idle_timeout=60)
        for _ in range(3):
            registry.create()
        clock.advance(61)

        registry.create()
        assert len(registry) == 1


class TestCapacity:
    def test_cap_evicts_least_recently_used(self, clock):
        registry = ConsoleSessionRegistry(clock=clock, max_sessions=3)
        sessions = []
        for _ in range(3):
            sessions.append(registry.create())
            clock.advance(1)
        registry.get(sessions[0].id)

        newest = registry.create()

        assert len(registry) == 3
        assert registry.get(sessions[1].id) is None
        assert registry.get(sessions[0].id) is sessions[0]
        assert registry.get(newest.id) is newest

    def test_many_creations_stay_within_cap(self, clock):
        registry = ConsoleSessionRegistry(clock=clock, max_sessions=3)
        for _ in range(5):
            registry.create()
            clock.advance(1)
        assert len(registry) == 3

    def test_limits_come_from_app_config(self, app):
        app.config["CONSOLE_SESSION_IDLE_TIMEOUT"] = 30
        app.config["CONSOLE_SESSION_MAX"] = 7
        registry = ConsoleSessionRegistry()
        registry.init_app(app)
        assert registry.idle_timeout == 30.0
        assert registry.max_sessions == 7
