"""Validate, assess, and metrics commands: diagnostic reports for clip content."""

from __future__ import annotations

import typer
from rich.console import Console

from mark_clipper.cli._helpers import _emit_json, _engine_config, _load_or_exit
from mark_clipper.core.models import ValidationOptions
from mark_clipper.core.optimization import (
    analyze_batch_render_load,
    analyze_content_metrics,
    determine_render_strategy,
)
from mark_clipper.core.strategy import ContentStrategy
from mark_clipper.core.validator import batch_validate_clips, get_validation_stats
from mark_clipper.formatters.csv import format_validation_csv
from mark_clipper.formatters.rich_output import (
    render_batch_load,
    render_metrics,
    render_quality,
    render_validation,
    render_validation_stats,
)

console = Console()


def register(app: typer.Typer) -> None:
    """Register the diagnostic commands onto the Typer app."""

    @app.command()
    def validate(
        file: str = typer.Argument(..., help="JSON file with one clip or a list of clips"),
        strict: bool = typer.Option(
            False, "--strict", help="Also flag inline styles as a security issue"
        ),
        json_output: bool = typer.Option(
            False, "--json", help="Output ValidationResult JSON"
        ),
        csv_output: bool = typer.Option(
            False, "--csv", help="Output one CSV row per clip plus a summary"
        ),
        fail_on_invalid: bool = typer.Option(
            False, "--fail-on-invalid", help="Exit code 1 if any clip fails validation"
        ),
    ) -> None:
        """Run security, performance, format, and content checks."""
        clips = _load_or_exit(file, console)
        results = batch_validate_clips(clips, ValidationOptions(strict_mode=strict))
        stats = get_validation_stats(results) if len(results) > 1 else None

        if json_output:
            _emit_json(results)
        elif csv_output:
            typer.echo(format_validation_csv(clips, results, stats), nl=False)
        else:
            for clip, result in zip(clips, results):
                render_validation(clip, result, console)
            if stats is not None:
                render_validation_stats(stats, console)

        if fail_on_invalid and not all(r.is_valid for r in results):
            raise SystemExit(1)

    @app.command()
    def assess(
        ctx: typer.Context,
        file: str = typer.Argument(..., help="JSON file with one clip or a list of clips"),
        json_output: bool = typer.Option(
            False, "--json", help="Output QualityAssessment JSON"
        ),
    ) -> None:
        """Score each clip's content completeness (0-100)."""
        clips = _load_or_exit(file, console)
        strategy = ContentStrategy(_engine_config(ctx))
        assessments = [strategy.assess_content_quality(c) for c in clips]

        if json_output:
            _emit_json(assessments)
            return
        for clip, assessment in zip(clips, assessments):
            render_quality(clip, assessment, console)

    @app.command()
    def metrics(
        file: str = typer.Argument(..., help="JSON file with one clip or a list of clips"),
        json_output: bool = typer.Option(
            False, "--json", help="Output ContentMetrics JSON"
        ),
    ) -> None:
        """Estimate render cost and suggest a render strategy per clip."""
        clips = _load_or_exit(file, console)
        results = [analyze_content_metrics(c) for c in clips]

        if json_output:
            _emit_json(results)
            return
        for clip, clip_metrics in zip(clips, results):
            render_metrics(clip, clip_metrics, determine_render_strategy(clip), console)
        if len(clips) > 1:
            render_batch_load(analyze_batch_render_load(clips), console)
