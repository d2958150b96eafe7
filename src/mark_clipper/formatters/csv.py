"""CSV formatter for clip validation reports."""

from __future__ import annotations

import csv
import io

from mark_clipper.core.models import Clip, ValidationResult, ValidationStats


def format_validation_csv(
    clips: list[Clip],
    results: list[ValidationResult],
    stats: ValidationStats | None = None,
) -> str:
    """Format per-clip validation results as CSV, with an optional summary."""
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(["clip_id", "title", "score", "grade", "is_valid",
                     "security_risk", "issue_count", "critical_issues"])
    for clip, result in zip(clips, results):
        writer.writerow([
            clip.id if clip.id is not None else "",
            clip.title,
            result.score,
            result.summary.quality_grade,
            result.is_valid,
            result.summary.security_risk.value,
            len(result.issues),
            sum(1 for i in result.issues if i.severity.value == "critical"),
        ])

    if stats is not None:
        writer.writerow([])
        writer.writerow(["SUMMARY", "total", "valid", "invalid", "valid_rate",
                         "average_score", "security_risks"])
        writer.writerow([
            "",
            stats.total,
            stats.valid,
            stats.invalid,
            round(stats.valid_rate, 1),
            round(stats.average_score, 1),
            stats.security_risks,
        ])

    return output.getvalue()
