"""Tests for the console session, tick loop and configuration."""

from __future__ import annotations

import logging

from marker_logger.agent.config import MarkerLoggerConfig
from marker_logger.agent.runner import TickLoop
from marker_logger.agent.session import build_console
from tests.conftest import MARKERS, TRIGGERS


class TestMarkerConsole:
    """Display-facing facade."""

    def test_streams_from_last_discovery(self, session):
        assert [s.name for s in session.streams] == ["Markers", "Triggers", "EEG"]

    def test_connect_disconnect(self, session, client):
        assert session.connect(MARKERS) is True
        assert session.is_connected("Markers")
        assert session.disconnect(MARKERS) is False
        assert client.live["Markers"].closed

    def test_poll_feeds_store(self, session, client):
        session.connect(MARKERS)
        client.live["Markers"].push("start")
        session.poll()
        assert [e.content for e in session.filtered_view] == ["start"]

    def test_set_filter(self, session, client):
        session.connect(MARKERS)
        session.connect(TRIGGERS)
        client.live["Markers"].push("foo1")
        client.live["Triggers"].push(1, 2)
        session.poll()

        session.set_filter(stream="Trig")
        assert [e.content for e in session.filtered_view] == ["1, 2"]
        session.set_filter()
        assert len(session.filtered_view) == 2

    def test_clear_log_leaves_connections(self, session, client):
        session.connect(MARKERS)
        client.live["Markers"].push("a")
        session.poll()

        session.clear_log()

        assert session.store.history == []
        assert session.filtered_view == []
        assert session.is_connected("Markers")
        assert not client.live["Markers"].closed

    def test_display_tick_reports_changes_once(self, session, client):
        session.connect(MARKERS)
        session.display_tick()
        client.live["Markers"].push("a")
        session.poll()
        assert session.display_tick() is True
        assert session.display_tick() is False

    def test_close_disconnects_everything(self, session, client):
        session.connect(MARKERS)
        session.connect(TRIGGERS)
        session.close()
        assert len(session.connections) == 0
        assert all(c.closed for c in client.opened)


class TestAutoScroll:
    """Window following and freezing."""

    def _fill(self, session, client, count, prefix="m"):
        connection = client.live["Markers"]
        for i in range(count):
            connection.push(f"{prefix}{i}")
        session.poll()

    def test_follows_tail_when_enabled(self, session, client):
        session.connect(MARKERS)
        self._fill(session, client, 10)
        assert session.auto_scrolling
        assert session.scroll_target() == 9
        assert [e.content for e in session.visible_entries(3)] == ["m7", "m8", "m9"]

    def test_disabled_produces_no_scroll_and_freezes_window(self, session, client):
        session.connect(MARKERS)
        self._fill(session, client, 5)
        session.set_auto_scroll(False)
        self._fill(session, client, 5, prefix="n")

        assert session.scroll_target() is None
        assert [e.content for e in session.visible_entries(2)] == ["m3", "m4"]

    def test_reenable_jumps_to_tail(self, session, client):
        session.connect(MARKERS)
        self._fill(session, client, 5)
        assert session.toggle_auto_scroll() is False
        self._fill(session, client, 5, prefix="n")
        assert session.toggle_auto_scroll() is True
        assert [e.content for e in session.visible_entries(1)] == ["n4"]

    def test_empty_view_has_no_target(self, session):
        assert session.scroll_target() is None
        assert session.visible_entries(5) == []

    def test_frozen_window_survives_eviction_at_capacity(self, client):
        small = build_console(client, MarkerLoggerConfig(history_capacity=5))
        small.refresh_streams()
        small.connect(MARKERS)
        self._fill(small, client, 5)
        small.set_auto_scroll(False)
        assert [e.content for e in small.visible_entries(2)] == ["m3", "m4"]

        self._fill(small, client, 3, prefix="n")

        assert [e.content for e in small.store.view] == ["m3", "m4", "n0", "n1", "n2"]
        assert [e.content for e in small.visible_entries(2)] == ["m3", "m4"]

    def test_evicted_anchor_falls_back_to_front(self, client):
        small = build_console(client, MarkerLoggerConfig(history_capacity=5))
        small.refresh_streams()
        small.connect(MARKERS)
        self._fill(small, client, 5)
        small.set_auto_scroll(False)
        self._fill(small, client, 5, prefix="n")
        assert [e.content for e in small.visible_entries(2)] == ["n0", "n1"]

    def test_frozen_window_survives_filter_change(self, session, client):
        session.connect(MARKERS)
        connection = client.live["Markers"]
        for content in ("foo1", "bar", "foo2"):
            connection.push(content)
        session.poll()
        session.set_auto_scroll(False)
        connection.push("foo3")
        session.poll()

        session.set_filter(content="foo")
        assert [e.content for e in session.visible_entries(2)] == ["foo1", "foo2"]

        session.set_filter(content="bar")
        assert [e.content for e in session.visible_entries(2)] == ["bar"]
        session.set_filter(content="foo")
        assert [e.content for e in session.visible_entries(2)] == ["foo1", "foo2"]

    def test_clear_log_resets_frozen_window(self, session, client):
        session.connect(MARKERS)
        self._fill(session, client, 3)
        session.set_auto_scroll(False)
        session.clear_log()
        self._fill(session, client, 3, prefix="n")
        assert [e.content for e in session.visible_entries(2)] == ["n0", "n1"]


class TestTickLoop:
    """Fixed-rate scheduling."""

    def setup_method(self):
        self.sleeps = []

    def test_runs_requested_ticks(self, session, client):
        session.connect(MARKERS)
        client.live["Markers"].push("tick")
        seen = []
        loop = TickLoop(
            session,
            interval=0.5,
            on_display=lambda s, changed: seen.append(changed),
            sleep=self.sleeps.append,
        )

        loop.run(max_ticks=3)

        assert loop.ticks == 3
        assert seen == [True, False, False]
        assert len(self.sleeps) == 2
        assert all(0 < s <= 0.5 for s in self.sleeps)
        assert not loop.running

    def test_errors_do_not_stop_the_loop(self, session, caplog):
        def explode(s, changed):
            raise RuntimeError("render failed")

        loop = TickLoop(session, interval=0.01, on_display=explode, sleep=self.sleeps.append)
        with caplog.at_level(logging.ERROR):
            loop.run(max_ticks=2)
        assert loop.ticks == 2
        assert "Error during tick: render failed" in caplog.text

    def test_stop_from_callback(self, session):
        loop = None

        def stop_now(s, changed):
            loop.stop()

        loop = TickLoop(session, interval=0.01, on_display=stop_now, sleep=self.sleeps.append)
        loop.run()
        assert loop.ticks == 1
        assert self.sleeps == []


class TestMarkerLoggerConfig:
    """Environment-driven configuration."""

    def test_defaults(self):
        config = MarkerLoggerConfig()
        assert config.backlog_cap == 100
        assert config.history_capacity == 1000
        assert config.discovery_timeout == 5.0
        assert config.liveness_timeout == 0.1
        assert config.validate() == []

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MARKER_BACKLOG_CAP", "20")
        monkeypatch.setenv("MARKER_HISTORY_CAPACITY", "50")
        monkeypatch.setenv("MARKER_CONTINUOUS_DISCOVERY", "yes")
        config = MarkerLoggerConfig.from_env()
        assert config.backlog_cap == 20
        assert config.history_capacity == 50
        assert config.continuous_discovery is True
        assert config.tick_interval == 0.05

    def test_validate_reports_every_problem(self):
        config = MarkerLoggerConfig(backlog_cap=0, history_capacity=-1, liveness_timeout=0)
        errors = config.validate()
        assert len(errors) == 3
        assert any("backlog_cap" in e for e in errors)
