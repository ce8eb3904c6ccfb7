"""Logger configuration from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class MarkerLoggerConfig:
    """Tuning knobs for discovery, polling and the log store."""

    # Seconds a one-shot discovery scan may take
    discovery_timeout: float = 5.0
    # Seconds the per-tick metadata refresh may block on one connection
    liveness_timeout: float = 0.1
    # Most samples decoded per connection per tick; older backlog is dropped
    backlog_cap: int = 100
    # Entries kept in the log history
    history_capacity: int = 1000
    # Transport-side buffer requested when opening a connection
    inlet_buffer: int = 100
    # Seconds between scheduler ticks
    tick_interval: float = 0.05
    # Keep a background resolver running instead of scanning on demand
    continuous_discovery: bool = False

    @classmethod
    def from_env(cls) -> MarkerLoggerConfig:
        """Load configuration from environment variables."""
        return cls(
            discovery_timeout=float(os.environ.get("MARKER_DISCOVERY_TIMEOUT", "5.0")),
            liveness_timeout=float(os.environ.get("MARKER_LIVENESS_TIMEOUT", "0.1")),
            backlog_cap=int(os.environ.get("MARKER_BACKLOG_CAP", "100")),
            history_capacity=int(os.environ.get("MARKER_HISTORY_CAPACITY", "1000")),
            inlet_buffer=int(os.environ.get("MARKER_INLET_BUFFER", "100")),
            tick_interval=float(os.environ.get("MARKER_TICK_INTERVAL", "0.05")),
            continuous_discovery=_env_bool("MARKER_CONTINUOUS_DISCOVERY", False),
        )

    def validate(self) -> list[str]:
        """Return list of validation errors, empty if config is valid."""
        errors = []
        if self.discovery_timeout <= 0:
            errors.append(f"discovery_timeout must be positive: {self.discovery_timeout}")
        if self.liveness_timeout <= 0:
            errors.append(f"liveness_timeout must be positive: {self.liveness_timeout}")
        if self.tick_interval <= 0:
            errors.append(f"tick_interval must be positive: {self.tick_interval}")
        if self.backlog_cap < 1:
            errors.append(f"backlog_cap must be at least 1: {self.backlog_cap}")
        if self.history_capacity < 1:
            errors.append(f"history_capacity must be at least 1: {self.history_capacity}")
        if self.inlet_buffer < 1:
            errors.append(f"inlet_buffer must be at least 1: {self.inlet_buffer}")
        return errors
