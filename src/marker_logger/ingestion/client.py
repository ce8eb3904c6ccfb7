"""Port for the external streaming-data client.

The ingestion core only talks to these protocols. The pylsl-backed
implementation lives in ``lsl_client``; tests use an in-memory fake.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from marker_logger.ingestion.models import StreamDescriptor


class StreamError(RuntimeError):
    """Generic transport fault on a stream."""


class StreamLost(StreamError):
    """The stream's source has gone away."""


class StreamTimeout(StreamError):
    """A bounded transport call ran out of time."""


@runtime_checkable
class StreamConnection(Protocol):
    """Runtime handle bound to one stream."""

    def metadata(self, timeout: float) -> StreamDescriptor:
        """Refresh the stream's metadata.

        Raises:
            StreamLost: the source is gone.
            StreamTimeout: no answer within ``timeout``.
        """
        ...

    def available_sample_count(self) -> int:
        """Samples buffered by the transport and not yet pulled."""
        ...

    def pull_sample(self, timeout: float = 0.0) -> tuple[list, float]:
        """Pull the oldest buffered sample.

        Returns:
            (channel_values, source_timestamp). A timestamp <= 0 means no
            sample was available.
        """
        ...

    def close(self) -> None:
        """Release the transport-side subscription."""
        ...


@runtime_checkable
class StreamClient(Protocol):
    """Discovery and connection factory for a streaming network."""

    def discover(self, timeout: float) -> Sequence[StreamDescriptor]:
        ...

    def open(self, descriptor: StreamDescriptor, buffer_capacity: int) -> StreamConnection:
        ...

    def clock_offset(self) -> float:
        """Seconds to add to a source timestamp to get Unix time."""
        ...
