"""Mark Clipper CLI entry point."""

from __future__ import annotations

import logging

import typer
from rich.console import Console

from mark_clipper.cli import render, validate
from mark_clipper.core.config import load_config
from mark_clipper.core.errors import ConfigError

console = Console()

app = typer.Typer(
    name="mark-clipper",
    help="Sanitize, render, and diagnose captured web clips.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config: str = typer.Option(
        None, "--config", "-c", help="JSON engine config (default: ./.mark-clipper.json)"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log each display tier's outcome"
    ),
) -> None:
    """Mark Clipper content engine."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    try:
        engine_config = load_config(config)
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)
    ctx.obj = {"config": engine_config, "verbose": verbose}


render.register(app)
validate.register(app)


if __name__ == "__main__":
    app()
