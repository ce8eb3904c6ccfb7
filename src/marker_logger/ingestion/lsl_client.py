"""Lab Streaming Layer implementation of the streaming-client port."""

from __future__ import annotations

import logging
import time
from typing import Optional

import pylsl
from pylsl.util import LostError
from pylsl.util import TimeoutError as LSLTimeoutError

from marker_logger.ingestion.client import StreamError, StreamLost, StreamTimeout
from marker_logger.ingestion.models import ChannelFormat, StreamDescriptor

logger = logging.getLogger(__name__)

# pylsl channel-format codes (cf_* constants)
_CHANNEL_FORMATS = {
    pylsl.cf_float32: ChannelFormat.FLOAT32,
    pylsl.cf_double64: ChannelFormat.DOUBLE64,
    pylsl.cf_string: ChannelFormat.STRING,
    pylsl.cf_int32: ChannelFormat.INT32,
    pylsl.cf_int16: ChannelFormat.INT16,
    pylsl.cf_int8: ChannelFormat.INT8,
    pylsl.cf_int64: ChannelFormat.INT64,
}


def descriptor_from_info(info: pylsl.StreamInfo) -> StreamDescriptor:
    return StreamDescriptor(
        name=info.name(),
        channel_count=info.channel_count(),
        channel_format=_CHANNEL_FORMATS.get(info.channel_format(), ChannelFormat.UNDEFINED),
        nominal_rate=info.nominal_srate(),
    )


class LslConnection:
    """A pylsl inlet wrapped behind the StreamConnection protocol."""

    def __init__(self, info: pylsl.StreamInfo, buffer_capacity: int) -> None:
        self.name = info.name()
        self._inlet: Optional[pylsl.StreamInlet] = pylsl.StreamInlet(
            info, max_buflen=buffer_capacity
        )

    @property
    def inlet(self) -> pylsl.StreamInlet:
        if self._inlet is None:
            raise StreamError(f"connection to {self.name} is closed")
        return self._inlet

    def metadata(self, timeout: float) -> StreamDescriptor:
        try:
            info = self.inlet.info(timeout)
        except LostError as e:
            raise StreamLost(str(e) or self.name) from e
        except LSLTimeoutError as e:
            raise StreamTimeout(str(e) or self.name) from e
        return descriptor_from_info(info)

    def available_sample_count(self) -> int:
        return self.inlet.samples_available()

    def pull_sample(self, timeout: float = 0.0) -> tuple[list, float]:
        try:
            sample, timestamp = self.inlet.pull_sample(timeout=timeout)
        except LostError as e:
            raise StreamLost(str(e) or self.name) from e
        if sample is None or timestamp is None:
            return [], 0.0
        return sample, timestamp

    def close(self) -> None:
        if self._inlet is None:
            return
        self._inlet.close_stream()
        # Dropping the last reference destroys the native inlet.
        self._inlet = None


class LslClient:
    """Discovers and opens LSL streams on the local network.

    Supports two discovery modes:
    - One-shot: ``resolve_streams`` bounded by the caller's timeout
    - Continuous: a background ``ContinuousResolver`` whose current
      result set is returned immediately
    """

    def __init__(self, continuous: bool = False, forget_after: float = 5.0) -> None:
        self._resolver: Optional[pylsl.ContinuousResolver] = None
        if continuous:
            self._resolver = pylsl.ContinuousResolver(forget_after=forget_after)
        self._infos: dict[str, pylsl.StreamInfo] = {}

    def discover(self, timeout: float) -> list[StreamDescriptor]:
        if self._resolver is not None:
            infos = self._resolver.results()
        else:
            infos = pylsl.resolve_streams(timeout)

        self._infos = {info.name(): info for info in infos}
        return [descriptor_from_info(info) for info in infos]

    def open(self, descriptor: StreamDescriptor, buffer_capacity: int) -> LslConnection:
        info = self._infos.get(descriptor.name)
        if info is None:
            raise StreamError(f"stream {descriptor.name} has not been discovered")
        return LslConnection(info, buffer_capacity)

    def clock_offset(self) -> float:
        return time.time() - pylsl.local_clock()
