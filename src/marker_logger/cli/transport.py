"""Streaming client construction for CLI commands."""

from __future__ import annotations


def make_client(continuous: bool = False):
    """Build the pylsl-backed client; pylsl is only imported when needed."""
    from marker_logger.ingestion.lsl_client import LslClient

    return LslClient(continuous=continuous)
