"""Typer CLI application."""

import logging
import sys

import typer

from marker_logger.cli.commands.streams import streams
from marker_logger.cli.commands.watch import watch

app = typer.Typer(
    name="marker-logger",
    help="Live marker log for Lab Streaming Layer streams",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v for INFO, -vv for DEBUG"),
) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


app.command()(streams)
app.command()(watch)
