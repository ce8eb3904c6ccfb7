"""Sample poller: pulls, trims and decodes samples from every connection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from marker_logger.ingestion.client import (
    StreamClient,
    StreamConnection,
    StreamLost,
    StreamTimeout,
)
from marker_logger.ingestion.connections import ConnectionManager
from marker_logger.ingestion.models import LogEntry

logger = logging.getLogger(__name__)

DEFAULT_BACKLOG_CAP = 100
DEFAULT_LIVENESS_TIMEOUT = 0.1


@dataclass
class TickReport:
    """What one poller pass did."""

    emitted: int = 0
    discarded: int = 0
    faulted: list[str] = field(default_factory=list)


def format_sample(values: list) -> str:
    """Join channel values into one display string."""
    return ", ".join(str(value) for value in values)


class SamplePoller:
    """Runs once per tick over every connected stream.

    Per connection:
    1. Refresh metadata with a short timeout (liveness check)
    2. Pull one sample so the transport's backlog counter updates
    3. Drop the oldest samples while the backlog exceeds ``backlog_cap``
    4. Pull and decode up to ``backlog_cap`` samples

    Freshness wins over completeness: a producer faster than the tick rate
    loses its oldest samples instead of building unbounded lag. Faults on
    one connection skip that connection for this tick only.
    """

    def __init__(
        self,
        client: StreamClient,
        connections: ConnectionManager,
        sink: Callable[[LogEntry], None],
        backlog_cap: int = DEFAULT_BACKLOG_CAP,
        liveness_timeout: float = DEFAULT_LIVENESS_TIMEOUT,
    ) -> None:
        self._client = client
        self._connections = connections
        self._sink = sink
        self.backlog_cap = backlog_cap
        self.liveness_timeout = liveness_timeout

    def tick(self) -> TickReport:
        report = TickReport()
        clock_offset = self._client.clock_offset()

        for name, connection in self._connections.connections():
            try:
                self._poll_connection(name, connection, clock_offset, report)
            except StreamLost as e:
                logger.info("Stream lost: %s (%s)", name, e)
                report.faulted.append(name)
            except StreamTimeout as e:
                logger.info("Timeout: %s (%s)", name, e)
                report.faulted.append(name)
            except Exception as e:
                logger.warning("Exception while polling %s: %s", name, e)
                report.faulted.append(name)

        if report.emitted or report.discarded:
            logger.debug(
                "Tick: %d emitted, %d discarded, %d faulted",
                report.emitted,
                report.discarded,
                len(report.faulted),
            )
        return report

    def _poll_connection(
        self,
        name: str,
        connection: StreamConnection,
        clock_offset: float,
        report: TickReport,
    ) -> None:
        connection.metadata(self.liveness_timeout)

        # The backlog counter only refreshes on pull, so probe with one sample
        self._emit(name, *connection.pull_sample(0.0), clock_offset, report)

        available = min(connection.available_sample_count(), self.backlog_cap)
        dropped = self._discard_backlog(connection)
        if dropped:
            logger.debug("Discarded %d stale samples from %s", dropped, name)
            report.discarded += dropped

        for _ in range(available):
            self._emit(name, *connection.pull_sample(0.0), clock_offset, report)

    def _discard_backlog(self, connection: StreamConnection) -> int:
        dropped = 0
        while connection.available_sample_count() > self.backlog_cap:
            connection.pull_sample(0.0)
            dropped += 1
        return dropped

    def _emit(
        self,
        name: str,
        values: list,
        timestamp: float,
        clock_offset: float,
        report: TickReport,
    ) -> None:
        # Non-positive timestamp: nothing new from the transport
        if timestamp <= 0:
            return
        entry = LogEntry(
            timestamp=datetime.fromtimestamp(timestamp + clock_offset),
            content=format_sample(values),
            stream_name=name,
        )
        self._sink(entry)
        report.emitted += 1
