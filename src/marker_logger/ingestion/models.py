"""Data models for the ingestion layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ChannelFormat(str, Enum):
    """Value type carried by every channel of a stream."""

    FLOAT32 = "float32"
    DOUBLE64 = "double64"
    STRING = "string"
    INT32 = "int32"
    INT16 = "int16"
    INT8 = "int8"
    INT64 = "int64"
    UNDEFINED = "undefined"


@dataclass(frozen=True)
class StreamDescriptor:
    """Identity and shape of a discoverable stream."""

    name: str
    channel_count: int
    channel_format: ChannelFormat
    nominal_rate: float = 0.0  # 0.0 = irregular rate

    @property
    def is_irregular(self) -> bool:
        return self.nominal_rate == 0.0

    @property
    def rate_label(self) -> str:
        return f"{self.nominal_rate:0.3f}"


@dataclass(frozen=True, eq=False)
class LogEntry:
    """One decoded marker sample.

    Entries compare by identity: two markers with the same content from
    the same stream at the same millisecond are still distinct entries.
    """

    timestamp: datetime
    content: str
    stream_name: str

    @property
    def time_label(self) -> str:
        return self.timestamp.strftime("%H:%M:%S.%f")[:-3]


@dataclass(frozen=True)
class FilterPredicate:
    """Case-sensitive substring matchers over content and stream name.

    A blank matcher (empty or whitespace-only) matches everything.
    """

    content: str = ""
    stream: str = ""

    def matches(self, entry: LogEntry) -> bool:
        return _contains(entry.content, self.content) and _contains(
            entry.stream_name, self.stream
        )

    @property
    def is_match_all(self) -> bool:
        return not self.content.strip() and not self.stream.strip()


MATCH_ALL = FilterPredicate()


def _contains(value: str, matcher: str) -> bool:
    if not matcher.strip():
        return True
    return matcher in value
