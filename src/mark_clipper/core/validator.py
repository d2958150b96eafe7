"""Diagnostic validation of clip content.

Advisory only: nothing here blocks creating, editing, or displaying a clip.
"""

from __future__ import annotations

import re

from mark_clipper.core.models import (
    Clip,
    IssueType,
    SecurityRisk,
    Severity,
    ValidationIssue,
    ValidationOptions,
    ValidationResult,
    ValidationStats,
    ValidationSummary,
)

# ── Rules ────────────────────────────────────────────────────────────────────

DANGEROUS_TAGS: tuple[str, ...] = (
    "script", "iframe", "object", "embed", "link", "meta", "base", "form", "input", "textarea",
)
DANGEROUS_ATTRIBUTES: tuple[str, ...] = (
    "onload", "onerror", "onclick", "onmouseover", "onmouseout", "onfocus", "onblur",
    "onsubmit", "onchange", "onkeydown", "onkeyup", "style", "srcdoc",
)
DANGEROUS_PROTOCOLS: tuple[str, ...] = (
    "javascript:", "data:", "vbscript:", "file:", "about:", "chrome:", "chrome-extension:",
)
VOID_TAGS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta",
    "source", "track", "wbr",
})

MAX_LENGTH: int = 50_000
WARNING_LENGTH: int = 10_000
MAX_NESTING_DEPTH: int = 10
MAX_ELEMENTS: int = 1_000
MIN_TEXT_LENGTH: int = 10

# ── Score penalties ──────────────────────────────────────────────────────────

SECURITY_PENALTY: int = 10
PERFORMANCE_PENALTIES: dict[Severity, int] = {Severity.high: 15, Severity.medium: 5}
FORMAT_PENALTY: int = 5
CONTENT_PENALTY: int = 3
PASSING_SCORE: int = 60

GRADE_TIERS: list[tuple[int, str]] = [(90, "A"), (80, "B"), (70, "C"), (60, "D")]
"""(min_score, grade), evaluated top-down, first match wins."""

_TAG_RE = re.compile(r"<[^>]+>")
_OPEN_TAG_RE = re.compile(r"<([a-zA-Z][a-zA-Z0-9]*)\b[^>]*>")
_CLOSE_TAG_RE = re.compile(r"</[a-zA-Z][a-zA-Z0-9]*\s*>")
_DEPTH_TAG_RE = re.compile(r"<(/?)([a-zA-Z][a-zA-Z0-9]*)\b[^>]*?(/?)>")
_WHITESPACE_RUN_RE = re.compile(r"\s{3,}")


def _issue(
    type_: IssueType, severity: Severity, message: str, suggestion: str | None = None
) -> ValidationIssue:
    return ValidationIssue(type=type_, severity=severity, message=message, suggestion=suggestion)


# ── Checks ───────────────────────────────────────────────────────────────────


def check_security(clip: Clip, strict_mode: bool = False) -> list[ValidationIssue]:
    """Dangerous tags, event-handler attributes, and URL schemes in ``html_raw``."""
    if not clip.html_raw:
        return []
    html = clip.html_raw.lower()
    issues: list[ValidationIssue] = []

    for tag in DANGEROUS_TAGS:
        if f"<{tag}" in html or f"</{tag}" in html:
            issues.append(_issue(
                IssueType.security,
                Severity.critical if tag == "script" else Severity.high,
                f"Potentially dangerous tag: {tag}",
                f"Remove or replace the {tag} tag",
            ))

    for attr in DANGEROUS_ATTRIBUTES:
        if re.search(rf"[\s/]{attr}\s*=", html):
            issues.append(_issue(
                IssueType.security,
                Severity.high if attr.startswith("on") else Severity.medium,
                f"Potentially dangerous attribute: {attr}",
                f"Remove the {attr} attribute",
            ))

    for protocol in DANGEROUS_PROTOCOLS:
        if protocol in html:
            issues.append(_issue(
                IssueType.security,
                Severity.high,
                f"Dangerous URL protocol: {protocol}",
                "Use a safe URL scheme",
            ))

    if strict_mode and re.search(r"[\s/]style\s*=", html):
        issues.append(_issue(
            IssueType.security,
            Severity.medium,
            "Inline styles may carry a security risk",
            "Use CSS classes instead of inline styles",
        ))

    return issues


def nesting_depth(html: str) -> int:
    """Deepest element nesting, counting void and self-closing tags as leaves."""
    depth = max_depth = 0
    for closing, name, self_closing in _DEPTH_TAG_RE.findall(html):
        if closing:
            depth = max(depth - 1, 0)
        elif not self_closing and name.lower() not in VOID_TAGS:
            depth += 1
            max_depth = max(max_depth, depth)
    return max_depth


def check_performance(clip: Clip) -> list[ValidationIssue]:
    """Length, nesting depth, and element count against fixed thresholds."""
    if not clip.html_raw:
        return []
    html = clip.html_raw
    issues: list[ValidationIssue] = []

    length = len(html)
    if length > MAX_LENGTH:
        issues.append(_issue(
            IssueType.performance, Severity.high,
            f"Content is very large: {length} characters",
            "Split the content or load it lazily",
        ))
    elif length > WARNING_LENGTH:
        issues.append(_issue(
            IssueType.performance, Severity.medium,
            f"Content is large: {length} characters, rendering may be slow",
            "Monitor rendering performance",
        ))

    depth = nesting_depth(html)
    if depth > MAX_NESTING_DEPTH:
        issues.append(_issue(
            IssueType.performance, Severity.medium,
            f"Nesting is too deep: {depth} levels",
            "Simplify the HTML structure",
        ))

    element_count = len(_TAG_RE.findall(html))
    if element_count > MAX_ELEMENTS:
        issues.append(_issue(
            IssueType.performance, Severity.medium,
            f"Too many elements: {element_count}",
            "Reduce the number of elements",
        ))

    return issues


def check_format(clip: Clip) -> list[ValidationIssue]:
    """Tag-balance heuristic, empty tags, and stray whitespace."""
    if not clip.html_raw:
        return []
    html = clip.html_raw
    issues: list[ValidationIssue] = []

    opened = [
        m for m in _OPEN_TAG_RE.finditer(html)
        if m.group(1).lower() not in VOID_TAGS and not m.group(0).endswith("/>")
    ]
    closed = _CLOSE_TAG_RE.findall(html)
    if len(opened) != len(closed):
        issues.append(_issue(
            IssueType.format, Severity.medium,
            "Possibly unclosed tags",
            "Check that every tag is paired",
        ))

    if "<>" in html or "</>" in html:
        issues.append(_issue(
            IssueType.format, Severity.low,
            "Empty tags found",
            "Remove empty tags",
        ))

    if _WHITESPACE_RUN_RE.search(html):
        issues.append(_issue(
            IssueType.format, Severity.low,
            "Redundant whitespace",
            "Trim extra spaces and line breaks",
        ))

    return issues


def check_content(clip: Clip) -> list[ValidationIssue]:
    """Missing content, missing title, and too-short text."""
    issues: list[ValidationIssue] = []

    if not clip.html_raw and not clip.text_plain:
        issues.append(_issue(
            IssueType.content, Severity.high,
            "No content data",
            "Add HTML or plain-text content",
        ))

    if not clip.title.strip():
        issues.append(_issue(
            IssueType.content, Severity.low,
            "Missing title",
            "Add a descriptive title",
        ))

    if len(clip.text_plain) < MIN_TEXT_LENGTH:
        issues.append(_issue(
            IssueType.content, Severity.medium,
            "Content is too short",
            "Add more meaningful content",
        ))

    return issues


# ── Aggregation ──────────────────────────────────────────────────────────────


def _collect_summary(clip: Clip) -> ValidationSummary:
    html = clip.html_raw or ""
    text = clip.text_plain
    return ValidationSummary(
        has_html=bool(html.strip()),
        has_plain_text=bool(text.strip()),
        has_title=bool(clip.title.strip()),
        content_length=max(len(text), len(html)),
        estimated_render_time=max(len(html) / 1000, 1),
    )


def security_risk(issues: list[ValidationIssue]) -> SecurityRisk:
    severities = {i.severity for i in issues if i.type == IssueType.security}
    if severities & {Severity.critical, Severity.high}:
        return SecurityRisk.high
    if Severity.medium in severities:
        return SecurityRisk.medium
    if severities:
        return SecurityRisk.low
    return SecurityRisk.none


def quality_grade(score: int) -> str:
    for min_score, grade in GRADE_TIERS:
        if score >= min_score:
            return grade
    return "F"


def _recommendations(issues: list[ValidationIssue], summary: ValidationSummary) -> list[str]:
    kinds = {i.type for i in issues}
    recs: list[str] = []
    if IssueType.security in kinds:
        recs.append("Run the HTML through the sanitizer to remove dangerous content")
    if IssueType.performance in kinds:
        recs.append("Simplify the content structure to speed up rendering")
    if IssueType.format in kinds:
        recs.append("Fix HTML format errors so the clip renders correctly")
    if not summary.has_plain_text:
        recs.append("Add a plain-text version as a fallback")
    if summary.content_length > WARNING_LENGTH:
        recs.append("Consider paging or lazy loading for large content")
    return recs


def validate_clip_content(
    clip: Clip, options: ValidationOptions | None = None
) -> ValidationResult:
    """Run the enabled checks and aggregate them into a 0-100 score.

    Score starts at 100 and loses a severity-weighted penalty per issue.
    ``is_valid`` needs ``score >= 60`` and no critical issue.
    """
    opts = options or ValidationOptions()
    issues: list[ValidationIssue] = []
    score = 100

    if opts.check_security:
        found = check_security(clip, opts.strict_mode)
        issues.extend(found)
        score -= SECURITY_PENALTY * len(found)

    if opts.check_performance:
        found = check_performance(clip)
        issues.extend(found)
        score -= sum(PERFORMANCE_PENALTIES.get(i.severity, 0) for i in found)

    if opts.check_format:
        found = check_format(clip)
        issues.extend(found)
        score -= FORMAT_PENALTY * len(found)

    if opts.check_content:
        found = check_content(clip)
        issues.extend(found)
        score -= CONTENT_PENALTY * len(found)

    score = max(score, 0)
    summary = _collect_summary(clip)
    summary.security_risk = security_risk(issues)
    summary.quality_grade = quality_grade(score)

    return ValidationResult(
        is_valid=score >= PASSING_SCORE
        and not any(i.severity == Severity.critical for i in issues),
        score=score,
        issues=issues,
        recommendations=_recommendations(issues, summary),
        summary=summary,
    )


def quick_security_check(html: str) -> bool:
    """True if *html* has no dangerous tag opener and no dangerous protocol."""
    lowered = html.lower()
    if any(f"<{tag}" in lowered for tag in DANGEROUS_TAGS):
        return False
    return not any(protocol in lowered for protocol in DANGEROUS_PROTOCOLS)


def batch_validate_clips(
    clips: list[Clip], options: ValidationOptions | None = None
) -> list[ValidationResult]:
    return [validate_clip_content(clip, options) for clip in clips]


def get_validation_stats(results: list[ValidationResult]) -> ValidationStats:
    """Totals, valid rate, average score, and grade distribution."""
    total = len(results)
    if total == 0:
        return ValidationStats()

    valid = sum(1 for r in results if r.is_valid)
    grades = {g: 0 for g in "ABCDF"}
    for r in results:
        grades[r.summary.quality_grade] = grades.get(r.summary.quality_grade, 0) + 1

    return ValidationStats(
        total=total,
        valid=valid,
        invalid=total - valid,
        valid_rate=valid / total * 100,
        average_score=sum(r.score for r in results) / total,
        security_risks=sum(1 for r in results if r.summary.security_risk != SecurityRisk.none),
        grade_distribution=grades,
    )
