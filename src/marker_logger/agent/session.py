"""Marker console session: the surface a display layer drives."""

from __future__ import annotations

import logging
from typing import Optional

from marker_logger.agent.config import MarkerLoggerConfig
from marker_logger.ingestion.client import StreamClient
from marker_logger.ingestion.connections import ConnectionManager
from marker_logger.ingestion.models import FilterPredicate, LogEntry, StreamDescriptor
from marker_logger.ingestion.poller import SamplePoller, TickReport
from marker_logger.ingestion.registry import StreamRegistry
from marker_logger.storage.log_store import LogStore

logger = logging.getLogger(__name__)


class MarkerConsole:
    """Ties registry, connections, poller and log store together.

    All collaborators are injected; nothing here reaches for a global.
    Every method runs on the scheduler's single logical thread.
    """

    def __init__(
        self,
        registry: StreamRegistry,
        connections: ConnectionManager,
        poller: SamplePoller,
        store: LogStore,
        auto_scroll: bool = True,
    ) -> None:
        self.registry = registry
        self.connections = connections
        self.poller = poller
        self.store = store
        self._auto_scrolling = auto_scroll
        # Last visible entry of the frozen window while auto-scroll is off
        self._anchor: Optional[LogEntry] = None

    # Streams

    @property
    def streams(self) -> list[StreamDescriptor]:
        return self.registry.streams

    def refresh_streams(self, timeout: float | None = None) -> list[StreamDescriptor]:
        return self.registry.discover(timeout)

    def connect(self, descriptor: StreamDescriptor) -> bool:
        return self.connections.connect(descriptor)

    def disconnect(self, descriptor: StreamDescriptor) -> bool:
        return self.connections.disconnect(descriptor)

    def toggle(self, descriptor: StreamDescriptor) -> bool:
        return self.connections.toggle(descriptor)

    def is_connected(self, name: str) -> bool:
        return self.connections.is_connected(name)

    # Log

    @property
    def filtered_view(self) -> list[LogEntry]:
        return self.store.view

    def set_filter(self, content: str = "", stream: str = "") -> None:
        self.store.set_filter(FilterPredicate(content=content, stream=stream))

    def clear_log(self) -> None:
        self.store.clear()
        self._anchor = None

    # Auto-scroll

    @property
    def auto_scrolling(self) -> bool:
        return self._auto_scrolling

    def set_auto_scroll(self, enabled: bool) -> None:
        if enabled == self._auto_scrolling:
            return
        self._auto_scrolling = enabled
        view = self.store.view
        self._anchor = view[-1] if not enabled and view else None
        logger.debug("Auto-scroll %s", "on" if enabled else "off")

    def toggle_auto_scroll(self) -> bool:
        self.set_auto_scroll(not self._auto_scrolling)
        return self._auto_scrolling

    def scroll_target(self) -> Optional[int]:
        """Index the display should scroll to this tick, if any."""
        if not self._auto_scrolling:
            return None
        view_len = len(self.store.view)
        return view_len - 1 if view_len else None

    def visible_entries(self, rows: int) -> list[LogEntry]:
        """The window of the filtered view a display with ``rows`` lines shows."""
        view = self.store.view
        if self._auto_scrolling:
            return view[-rows:] if rows > 0 else []

        end = self._anchor_position(view)
        if end is None:
            # Anchor evicted or filtered out: fall back to the front
            return view[:rows]
        return view[max(0, end - rows):end]

    def _anchor_position(self, view: list[LogEntry]) -> Optional[int]:
        if self._anchor is None:
            return None
        for i, entry in enumerate(view):
            if entry is self._anchor:
                return i + 1
        return None

    # Scheduling

    def poll(self) -> TickReport:
        return self.poller.tick()

    def display_tick(self) -> bool:
        """True when the view changed since the previous display tick."""
        return self.store.consume_dirty()

    def close(self) -> None:
        self.connections.close_all()


def build_console(client: StreamClient, config: MarkerLoggerConfig) -> MarkerConsole:
    """Wire a console from a streaming client and a MarkerLoggerConfig."""
    store = LogStore(capacity=config.history_capacity)
    connections = ConnectionManager(client, buffer_capacity=config.inlet_buffer)
    poller = SamplePoller(
        client,
        connections,
        sink=store.append,
        backlog_cap=config.backlog_cap,
        liveness_timeout=config.liveness_timeout,
    )
    registry = StreamRegistry(client, default_timeout=config.discovery_timeout)
    return MarkerConsole(registry, connections, poller, store)
