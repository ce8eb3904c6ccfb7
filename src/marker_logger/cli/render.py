"""Rich renderables for streams and the marker log."""

from __future__ import annotations

from typing import Iterable

from rich.table import Table

from marker_logger.agent.session import MarkerConsole
from marker_logger.ingestion.models import StreamDescriptor


def streams_table(streams: Iterable[StreamDescriptor], connected: Iterable[str] = ()) -> Table:
    connected = set(connected)
    table = Table(title="Streams")
    table.add_column("Stream", style="cyan")
    table.add_column("Channels", justify="right")
    table.add_column("Format")
    table.add_column("Rate (Hz)", justify="right")
    table.add_column("Status")

    for stream in streams:
        status = "[green]Connected[/green]" if stream.name in connected else "[dim]-[/dim]"
        table.add_row(
            stream.name,
            str(stream.channel_count),
            stream.channel_format.value,
            stream.rate_label,
            status,
        )
    return table


def log_table(console: MarkerConsole, rows: int) -> Table:
    predicate = console.store.predicate
    caption_parts = [f"{len(console.filtered_view)}/{len(console.store)} shown"]
    if predicate.content.strip():
        caption_parts.append(f"content~{predicate.content!r}")
    if predicate.stream.strip():
        caption_parts.append(f"stream~{predicate.stream!r}")
    caption_parts.append("auto-scroll on" if console.auto_scrolling else "auto-scroll off")

    table = Table(title="Markers", caption=" | ".join(caption_parts))
    table.add_column("Time", style="dim", no_wrap=True)
    table.add_column("Marker")
    table.add_column("Stream", style="cyan")

    for entry in console.visible_entries(rows):
        table.add_row(entry.time_label, entry.content, entry.stream_name)
    return table
