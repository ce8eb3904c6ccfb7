"""Shared test fixtures and an in-memory streaming client."""

from __future__ import annotations

from collections import deque
from datetime import datetime

import pytest

from marker_logger.agent.config import MarkerLoggerConfig
from marker_logger.agent.session import build_console
from marker_logger.ingestion.models import ChannelFormat, LogEntry, StreamDescriptor

BASE_TS = 1_700_000_000.0

MARKERS = StreamDescriptor("Markers", 1, ChannelFormat.STRING, 0.0)
TRIGGERS = StreamDescriptor("Triggers", 2, ChannelFormat.INT32, 0.0)
EEG = StreamDescriptor("EEG", 8, ChannelFormat.FLOAT32, 250.0)


def make_entry(content: str, stream: str = "Markers", offset: float = 0.0) -> LogEntry:
    return LogEntry(datetime.fromtimestamp(BASE_TS + offset), content, stream)


class FakeConnection:
    """Scripted stand-in for a transport inlet."""

    def __init__(self, descriptor: StreamDescriptor, buffer_capacity: int) -> None:
        self.descriptor = descriptor
        self.buffer_capacity = buffer_capacity
        self.backlog: deque[tuple[list, float]] = deque()
        # One item consumed per metadata() call; None means success
        self.faults: deque = deque()
        self.closed = False
        self.metadata_timeouts: list[float] = []
        self.pulls = 0

    def push(self, *values, ts: float | None = None) -> None:
        if ts is None:
            ts = BASE_TS + len(self.backlog) + self.pulls
        self.backlog.append((list(values), ts))

    def push_many(self, count: int, prefix: str = "m") -> None:
        for i in range(count):
            self.push(f"{prefix}{i}", ts=BASE_TS + i)

    def metadata(self, timeout: float) -> StreamDescriptor:
        self.metadata_timeouts.append(timeout)
        if self.faults:
            fault = self.faults.popleft()
            if fault is not None:
                raise fault
        return self.descriptor

    def available_sample_count(self) -> int:
        return len(self.backlog)

    def pull_sample(self, timeout: float = 0.0) -> tuple[list, float]:
        self.pulls += 1
        if not self.backlog:
            return [], 0.0
        return self.backlog.popleft()

    def close(self) -> None:
        self.closed = True


class FakeStreamClient:
    """In-memory streaming client: discovery returns ``streams``."""

    def __init__(self, streams: list[StreamDescriptor] | None = None) -> None:
        self.streams = list(streams or [])
        self.discover_timeouts: list[float] = []
        self.opened: list[FakeConnection] = []
        self.live: dict[str, FakeConnection] = {}

    def discover(self, timeout: float) -> list[StreamDescriptor]:
        self.discover_timeouts.append(timeout)
        return list(self.streams)

    def open(self, descriptor: StreamDescriptor, buffer_capacity: int) -> FakeConnection:
        connection = FakeConnection(descriptor, buffer_capacity)
        self.opened.append(connection)
        self.live[descriptor.name] = connection
        return connection

    def clock_offset(self) -> float:
        return 0.0


@pytest.fixture
def client():
    return FakeStreamClient([MARKERS, TRIGGERS, EEG])


@pytest.fixture
def config():
    return MarkerLoggerConfig()


@pytest.fixture
def session(client, config):
    console = build_console(client, config)
    console.refresh_streams()
    return console
