"""Connection manager: one live connection per stream name."""

from __future__ import annotations

import logging

from marker_logger.ingestion.client import StreamClient, StreamConnection
from marker_logger.ingestion.models import StreamDescriptor

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_CAPACITY = 100


class ConnectionManager:
    """Owns the set of active stream connections, keyed by stream name.

    ``toggle`` is the only mutator of the connection set. Readers get
    snapshots so closing a connection mid-iteration cannot disturb them.
    """

    def __init__(
        self,
        client: StreamClient,
        buffer_capacity: int = DEFAULT_BUFFER_CAPACITY,
    ) -> None:
        self._client = client
        self._buffer_capacity = buffer_capacity
        self._connections: dict[str, StreamConnection] = {}

    def toggle(self, descriptor: StreamDescriptor) -> bool:
        """Open a connection if none exists for the stream, else close it.

        A failed open is logged and leaves the stream disconnected; faults on
        an open connection surface later, while polling.

        Returns:
            True if the stream is connected after the call.
        """
        name = descriptor.name
        connection = self._connections.pop(name, None)
        if connection is not None:
            connection.close()
            logger.info("Disconnected from %s", name)
            return False

        try:
            connection = self._client.open(descriptor, self._buffer_capacity)
        except Exception as e:
            logger.warning("Exception while connecting to %s: %s", name, e)
            return False

        self._connections[name] = connection
        logger.info("Connected to %s (buffer=%d)", name, self._buffer_capacity)
        return True

    def connect(self, descriptor: StreamDescriptor) -> bool:
        if not self.is_connected(descriptor.name):
            return self.toggle(descriptor)
        return True

    def disconnect(self, descriptor: StreamDescriptor) -> bool:
        if self.is_connected(descriptor.name):
            return self.toggle(descriptor)
        return False

    def is_connected(self, name: str) -> bool:
        return name in self._connections

    def connections(self) -> list[tuple[str, StreamConnection]]:
        """Snapshot of (stream name, connection) pairs in connect order."""
        return list(self._connections.items())

    @property
    def names(self) -> list[str]:
        return list(self._connections)

    def __len__(self) -> int:
        return len(self._connections)

    def close_all(self) -> None:
        for name in list(self._connections):
            connection = self._connections.pop(name)
            try:
                connection.close()
            except Exception as e:
                logger.warning("Exception while disconnecting from %s: %s", name, e)
                continue
            logger.info("Disconnected from %s", name)
