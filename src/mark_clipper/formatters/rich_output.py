"""Rich console rendering for validation, quality, and render-cost reports."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from mark_clipper.core.models import (
    BatchRenderLoad,
    Clip,
    ContentMetrics,
    QualityAssessment,
    RenderStrategy,
    Severity,
    ValidationResult,
    ValidationStats,
)

SEVERITY_STYLES: dict[Severity, str] = {
    Severity.critical: "bold red",
    Severity.high: "red",
    Severity.medium: "yellow",
    Severity.low: "dim",
}


def score_color(score: float) -> Text:
    """Score text colored green/yellow/red by threshold."""
    if score >= 80:
        style = "green"
    elif score >= 60:
        style = "yellow"
    else:
        style = "red"
    return Text(f"{score:.0f}", style=style)


def _clip_label(clip: Clip) -> str:
    label = clip.title or "(untitled)"
    return f"#{clip.id} {label}" if clip.id is not None else label


def render_validation(clip: Clip, result: ValidationResult, console: Console) -> None:
    """Print one clip's validation score and issue table."""
    verdict = "[green]PASS[/green]" if result.is_valid else "[red]FAIL[/red]"
    header = Text.assemble(
        (_clip_label(clip), "bold"), "  score ", score_color(result.score),
        f"  grade {result.summary.quality_grade}",
    )
    console.print(header)
    console.print(f"  {verdict}  security risk: {result.summary.security_risk.value}")

    if result.issues:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Type")
        table.add_column("Severity")
        table.add_column("Message")
        table.add_column("Suggestion", style="dim")
        for issue in result.issues:
            table.add_row(
                issue.type.value,
                Text(issue.severity.value, style=SEVERITY_STYLES[issue.severity]),
                issue.message,
                issue.suggestion or "",
            )
        console.print(table)

    for rec in result.recommendations:
        console.print(f"  • {rec}")


def render_validation_stats(stats: ValidationStats, console: Console) -> None:
    table = Table(title="Validation summary", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Clips", str(stats.total))
    table.add_row("Valid", f"{stats.valid} ({stats.valid_rate:.0f}%)")
    table.add_row("Average score", score_color(stats.average_score))
    table.add_row("With security risk", str(stats.security_risks))
    table.add_row(
        "Grades",
        "  ".join(f"{g}:{n}" for g, n in stats.grade_distribution.items()),
    )
    console.print(table)


def render_quality(clip: Clip, assessment: QualityAssessment, console: Console) -> None:
    console.print(Text.assemble(
        (_clip_label(clip), "bold"), "  quality ", score_color(assessment.score),
        f" ({assessment.quality.value})",
    ))
    for issue in assessment.issues:
        console.print(f"  [yellow]![/yellow] {issue}")
    for rec in assessment.recommendations:
        console.print(f"  • {rec}")


def render_metrics(
    clip: Clip, metrics: ContentMetrics, strategy: RenderStrategy, console: Console
) -> None:
    """Print one clip's render-cost estimate and suggested render strategy."""
    console.print(Text.assemble(
        (_clip_label(clip), "bold"),
        f"  {metrics.complexity.value}  ~{metrics.estimated_render_time}ms",
    ))
    console.print(
        f"  html {metrics.html_length} chars, text {metrics.text_length} chars",
        highlight=False,
    )
    if strategy.should_lazy_load:
        height = strategy.initial_height or "auto"
        console.print(f"  lazy load, initial height {height}px", highlight=False)
    if strategy.use_virtualization:
        console.print("  virtual scrolling")
    for rec in metrics.recommendations:
        console.print(f"  • {rec}")


def render_batch_load(load: BatchRenderLoad, console: Console) -> None:
    table = Table(title="Render load", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Total complexity", str(load.total_complexity))
    table.add_row("Average text length", str(load.average_length))
    for suggestion in load.optimization_suggestions:
        table.add_row("Suggestion", suggestion)
    console.print(table)
