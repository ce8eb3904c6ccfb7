"""Watch command: connect to streams and show incoming markers live."""

from __future__ import annotations

import signal
from typing import Optional

import typer
from rich.console import Console
from rich.live import Live

from marker_logger.agent.config import MarkerLoggerConfig
from marker_logger.agent.runner import TickLoop
from marker_logger.agent.session import MarkerConsole, build_console
from marker_logger.cli import transport
from marker_logger.cli.render import log_table, streams_table

console = Console()


def watch(
    stream: Optional[list[str]] = typer.Option(
        None, "--stream", "-s", help="Stream name to connect to (repeatable). Default: all"
    ),
    content_filter: str = typer.Option("", help="Only show markers containing this text"),
    stream_filter: str = typer.Option("", help="Only show streams whose name contains this text"),
    no_auto_scroll: bool = typer.Option(False, help="Keep the window where it is"),
    rows: int = typer.Option(30, min=1, help="Log rows to display"),
    discovery_timeout: Optional[float] = typer.Option(
        None, help="Seconds to wait for streams. Env: MARKER_DISCOVERY_TIMEOUT"
    ),
    history_capacity: Optional[int] = typer.Option(
        None, help="Entries kept in the log. Env: MARKER_HISTORY_CAPACITY"
    ),
    backlog_cap: Optional[int] = typer.Option(
        None, help="Max samples decoded per stream per tick. Env: MARKER_BACKLOG_CAP"
    ),
    max_ticks: Optional[int] = typer.Option(None, hidden=True),
) -> None:
    """Connect to streams and display their markers as they arrive."""
    config = MarkerLoggerConfig.from_env()
    if discovery_timeout is not None:
        config.discovery_timeout = discovery_timeout
    if history_capacity is not None:
        config.history_capacity = history_capacity
    if backlog_cap is not None:
        config.backlog_cap = backlog_cap
    errors = config.validate()
    if errors:
        for err in errors:
            console.print(f"[red]Config error: {err}[/red]")
        raise typer.Exit(1)

    client = transport.make_client(config.continuous_discovery)
    session = build_console(client, config)

    found = session.refresh_streams()
    selected = [s for s in found if not stream or s.name in stream]
    if not selected:
        wanted = ", ".join(stream) if stream else "any stream"
        console.print(f"[red]No matching streams found ({wanted}).[/red]")
        raise typer.Exit(1)

    for descriptor in selected:
        session.connect(descriptor)
    console.print(streams_table(session.streams, session.connections.names))

    session.set_filter(content_filter, stream_filter)
    session.set_auto_scroll(not no_auto_scroll)

    try:
        _run_live(session, config.tick_interval, rows, max_ticks)
    finally:
        received = len(session.store)
        session.close()
    console.print(f"[dim]Disconnected. {received} entries in log.[/dim]")


def _run_live(
    session: MarkerConsole, interval: float, rows: int, max_ticks: Optional[int]
) -> None:
    with Live(log_table(session, rows), console=console, auto_refresh=False) as live:

        def on_display(s: MarkerConsole, changed: bool) -> None:
            if changed:
                live.update(log_table(s, rows), refresh=True)

        loop = TickLoop(session, interval=interval, on_display=on_display)

        def shutdown(sig, frame):
            loop.stop()

        previous = signal.signal(signal.SIGINT, shutdown)
        try:
            loop.run(max_ticks=max_ticks)
        finally:
            signal.signal(signal.SIGINT, previous)
