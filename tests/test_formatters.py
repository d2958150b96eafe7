"""Tests for CSV and Rich report formatters."""

from __future__ import annotations

import csv
import io
from io import StringIO

from rich.console import Console

from mark_clipper.core.models import Clip, QualityAssessment, QualityBand
from mark_clipper.core.optimization import (
    analyze_batch_render_load,
    analyze_content_metrics,
    determine_render_strategy,
)
from mark_clipper.core.validator import batch_validate_clips, get_validation_stats
from mark_clipper.formatters.csv import format_validation_csv
from mark_clipper.formatters.rich_output import (
    render_batch_load,
    render_metrics,
    render_quality,
    render_validation,
    render_validation_stats,
    score_color,
)


def _clips() -> list[Clip]:
    return [
        Clip(id=1, title="Good", html_raw="<p>Hello world</p>", text_plain="Hello world text"),
        Clip(id=2, title="Bad", html_raw="<script>x()</script>", text_plain="Bad content here"),
    ]


def _capture(fn, *args) -> str:
    """Capture Rich console output from a function that takes Console."""
    buf = StringIO()
    con = Console(file=buf, width=120)
    fn(*args, con)
    return buf.getvalue()


class TestValidationCsv:
    def test_rows(self) -> None:
        clips = _clips()
        results = batch_validate_clips(clips)
        rows = list(csv.reader(io.StringIO(format_validation_csv(clips, results))))
        assert rows[0] == [
            "clip_id", "title", "score", "grade", "is_valid",
            "security_risk", "issue_count", "critical_issues",
        ]
        assert rows[1] == ["1", "Good", "100", "A", "True", "none", "0", "0"]
        assert rows[2][0] == "2"
        assert rows[2][4] == "False"
        assert rows[2][7] == "1"
        assert len(rows) == 3

    def test_summary(self) -> None:
        clips = _clips()
        results = batch_validate_clips(clips)
        output = format_validation_csv(clips, results, get_validation_stats(results))
        rows = list(csv.reader(io.StringIO(output)))
        assert rows[-2][0] == "SUMMARY"
        assert rows[-1][1:4] == ["2", "1", "1"]

    def test_missing_id(self) -> None:
        clip = Clip(title="No id", text_plain="enough text here")
        results = batch_validate_clips([clip])
        rows = list(csv.reader(io.StringIO(format_validation_csv([clip], results))))
        assert rows[1][0] == ""


class TestRichOutput:
    def test_score_color(self) -> None:
        assert score_color(85).style == "green"
        assert score_color(65).style == "yellow"
        assert score_color(10).style == "red"
        assert score_color(72.6).plain == "73"

    def test_render_validation(self) -> None:
        clip = _clips()[1]
        result = batch_validate_clips([clip])[0]
        output = _capture(render_validation, clip, result)
        assert "#2 Bad" in output
        assert "FAIL" in output
        assert "script" in output
        assert "critical" in output

    def test_render_validation_clean(self) -> None:
        clip = _clips()[0]
        output = _capture(render_validation, clip, batch_validate_clips([clip])[0])
        assert "PASS" in output
        assert "grade A" in output

    def test_markup_in_title_not_interpreted(self) -> None:
        clip = Clip(id=3, title="[red]x[/red]", text_plain="enough text here")
        output = _capture(render_validation, clip, batch_validate_clips([clip])[0])
        assert "[red]x[/red]" in output

    def test_render_stats(self) -> None:
        results = batch_validate_clips(_clips())
        output = _capture(render_validation_stats, get_validation_stats(results))
        assert "Validation summary" in output
        assert "1 (50%)" in output

    def test_render_quality(self) -> None:
        assessment = QualityAssessment(
            score=20, issues=["Missing title"],
            recommendations=["Add a descriptive title"], quality=QualityBand.poor,
        )
        output = _capture(render_quality, Clip(id=4), assessment)
        assert "#4 (untitled)" in output
        assert "(poor)" in output
        assert "Missing title" in output


class TestRenderCost:
    def test_render_metrics_simple(self) -> None:
        clip = Clip(id=5, title="Short", text_plain="A short note.")
        output = _capture(
            render_metrics, clip, analyze_content_metrics(clip), determine_render_strategy(clip)
        )
        assert "#5 Short" in output
        assert "simple" in output
        assert "text 13 chars" in output
        assert "lazy load" not in output

    def test_render_metrics_long_clip(self) -> None:
        clip = Clip(id=6, title="Long", text_plain="x" * 12_000)
        output = _capture(
            render_metrics, clip, analyze_content_metrics(clip), determine_render_strategy(clip)
        )
        assert "extreme" in output
        assert "lazy load, initial height 300px" in output
        assert "virtual scrolling" in output
        assert "Consider paging the content" in output

    def test_render_batch_load(self) -> None:
        clips = [Clip(text_plain="y" * 3_000), Clip(text_plain="z" * 3_000)]
        output = _capture(render_batch_load, analyze_batch_render_load(clips))
        assert "Render load" in output
        assert "3000" in output
        assert "Collapse long clips by default" in output
