"""Streams command: list streams advertised on the network."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from marker_logger.agent.config import MarkerLoggerConfig
from marker_logger.cli import transport
from marker_logger.cli.render import streams_table
from marker_logger.ingestion.registry import StreamRegistry

console = Console()


def streams(
    timeout: Optional[float] = typer.Option(
        None, help="Seconds to wait for streams. Env: MARKER_DISCOVERY_TIMEOUT"
    ),
    continuous: bool = typer.Option(False, help="Use a continuous background resolver"),
) -> None:
    """List streams advertised on the local network."""
    config = MarkerLoggerConfig.from_env()
    if timeout is not None:
        config.discovery_timeout = timeout
    errors = config.validate()
    if errors:
        for err in errors:
            console.print(f"[red]Config error: {err}[/red]")
        raise typer.Exit(1)

    client = transport.make_client(continuous or config.continuous_discovery)
    registry = StreamRegistry(client, default_timeout=config.discovery_timeout)
    found = registry.discover()

    if not found:
        console.print(f"[dim]No streams found within {config.discovery_timeout:.1f}s.[/dim]")
        return
    console.print(streams_table(found))
