"""Stream registry: time-bounded discovery of advertised streams."""

from __future__ import annotations

import logging

from marker_logger.ingestion.client import StreamClient
from marker_logger.ingestion.models import StreamDescriptor

logger = logging.getLogger(__name__)


class StreamRegistry:
    """Wraps stream discovery and remembers the last result set.

    An empty result is not an error; it means nothing is advertised yet
    and the caller decides whether to look again.
    """

    def __init__(self, client: StreamClient, default_timeout: float = 5.0) -> None:
        self._client = client
        self._default_timeout = default_timeout
        self._streams: list[StreamDescriptor] = []

    @property
    def streams(self) -> list[StreamDescriptor]:
        """Descriptors from the most recent discovery."""
        return list(self._streams)

    def discover(self, timeout: float | None = None) -> list[StreamDescriptor]:
        """Scan for advertised streams, waiting at most ``timeout`` seconds."""
        if timeout is None:
            timeout = self._default_timeout
        self._streams = list(self._client.discover(timeout))

        if not self._streams:
            logger.info("No streams resolved within %.1fs", timeout)
            return []

        lines = [f"Resolved streams: {len(self._streams)}"]
        lines.extend(f" - {stream.name}" for stream in self._streams)
        logger.info("\n".join(lines))
        return self.streams

    def find(self, name: str) -> StreamDescriptor | None:
        for stream in self._streams:
            if stream.name == name:
                return stream
        return None
