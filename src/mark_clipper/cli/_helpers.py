"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
from collections.abc import Sequence

import typer
from pydantic import BaseModel
from rich.console import Console

from mark_clipper.core.content_engine.config import ContentEngineConfig
from mark_clipper.core.errors import ContentEngineError
from mark_clipper.core.loader import load_clips
from mark_clipper.core.models import Clip


def _load_or_exit(file: str, con: Console) -> list[Clip]:
    """Load clips from *file*; print the error and exit 1 on failure."""
    try:
        clips = load_clips(file)
    except ContentEngineError as exc:
        con.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)
    if not clips:
        con.print(f"[yellow]No clips found in {file}[/yellow]")
        raise SystemExit(1)
    return clips


def _engine_config(ctx: typer.Context) -> ContentEngineConfig:
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    return obj.get("config") or ContentEngineConfig()


def _emit_json(models: Sequence[BaseModel]) -> None:
    """Echo one model as a JSON object, several as a JSON array."""
    if len(models) == 1:
        typer.echo(models[0].model_dump_json(indent=2))
        return
    typer.echo(json.dumps([m.model_dump(mode="json") for m in models], indent=2))


def _verbose(ctx: typer.Context) -> bool:
    return bool(ctx.obj.get("verbose")) if isinstance(ctx.obj, dict) else False
