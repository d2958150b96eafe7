"""Render-cost heuristics for long clips: complexity tiers, paging, previews."""

from __future__ import annotations

import re

from mark_clipper.core.models import (
    BatchRenderLoad,
    Clip,
    Complexity,
    ContentMetrics,
    ExpandableContent,
    OptimizationOptions,
    RenderStrategy,
)

COMPLEXITY_TIERS: list[tuple[int, Complexity, int]] = [
    (500, Complexity.simple, 1),
    (2_000, Complexity.moderate, 3),
    (10_000, Complexity.complex, 8),
]
"""(max_text_length, complexity, base_render_ms); first tier the text fits wins."""

EXTREME_RENDER_MS: int = 20
HTML_WEIGHT_FACTOR: float = 1.5
TAG_DENSITY_LIMIT: float = 0.1
TAG_DENSITY_FACTOR: float = 1.3

COMPLEXITY_WEIGHTS: dict[Complexity, int] = {
    Complexity.simple: 1,
    Complexity.moderate: 2,
    Complexity.complex: 4,
    Complexity.extreme: 8,
}

_TAG_RE = re.compile(r"<[^>]+>")
_SENTENCE_RE = re.compile(r"[.!?]+\s+")


def analyze_content_metrics(clip: Clip) -> ContentMetrics:
    """Estimate how expensive a clip is to render."""
    html_length = len(clip.html_raw or "")
    text_length = len(clip.text_plain)
    recommendations: list[str] = []

    for max_len, complexity, render_ms in COMPLEXITY_TIERS:
        if text_length < max_len:
            estimated = float(render_ms)
            break
    else:
        complexity = Complexity.extreme
        estimated = float(EXTREME_RENDER_MS)

    if complexity == Complexity.complex:
        recommendations.append("Consider lazy loading")
    elif complexity == Complexity.extreme:
        recommendations.append("Use virtual scrolling")
        recommendations.append("Consider paging the content")

    if html_length > text_length * 2:
        estimated *= HTML_WEIGHT_FACTOR
        recommendations.append("HTML is markup-heavy; enable GPU compositing")

    if clip.html_raw:
        tag_count = len(_TAG_RE.findall(clip.html_raw))
        density = tag_count / text_length if text_length else float(tag_count)
        if density > TAG_DENSITY_LIMIT:
            estimated *= TAG_DENSITY_FACTOR
            recommendations.append("Tag density is high; simplify the DOM")

    return ContentMetrics(
        html_length=html_length,
        text_length=text_length,
        estimated_render_time=round(estimated),
        complexity=complexity,
        recommendations=recommendations,
    )


def get_optimization_recommendations(metrics: ContentMetrics) -> OptimizationOptions:
    if metrics.complexity == Complexity.moderate:
        return OptimizationOptions(gpu_acceleration=True)
    if metrics.complexity == Complexity.complex:
        return OptimizationOptions(
            enable_lazy_loading=True, max_initial_height=500, gpu_acceleration=True
        )
    if metrics.complexity == Complexity.extreme:
        return OptimizationOptions(
            enable_lazy_loading=True,
            max_initial_height=300,
            enable_virtualization=True,
            gpu_acceleration=True,
        )
    return OptimizationOptions()


def determine_render_strategy(clip: Clip) -> RenderStrategy:
    metrics = analyze_content_metrics(clip)
    options = get_optimization_recommendations(metrics)

    css = ["word-break: break-word", "overflow-wrap: break-word"]
    if options.gpu_acceleration:
        css += ["transform: translateZ(0)", "will-change: transform"]
    if metrics.complexity in (Complexity.complex, Complexity.extreme):
        css.append("contain: layout style paint")

    return RenderStrategy(
        should_lazy_load=options.enable_lazy_loading,
        initial_height=options.max_initial_height,
        use_virtualization=options.enable_virtualization,
        css_optimizations=css,
    )


def create_content_pages(content: str, max_page_length: int = 5_000) -> list[str]:
    """Split long text into pages on sentence boundaries."""
    if len(content) <= max_page_length:
        return [content]

    pages: list[str] = []
    current = ""
    for sentence in _SENTENCE_RE.split(content):
        if current and len(current) + len(sentence) > max_page_length:
            pages.append(current.strip())
            current = sentence
        else:
            current = f"{current}. {sentence}" if current else sentence
    if current.strip():
        pages.append(current.strip())
    return pages


def create_expandable_content(html: str, threshold: int = 1_000) -> ExpandableContent:
    """Cut a "show more" preview of *html* at a paragraph boundary."""
    if len(html) <= threshold:
        return ExpandableContent(preview=html, full_content=html, needs_expansion=False)

    paragraphs = html.split("</p>")
    preview = ""
    for i, paragraph in enumerate(paragraphs):
        candidate = preview + paragraph + ("</p>" if i < len(paragraphs) - 1 else "")
        if len(candidate) > threshold and preview:
            break
        preview = candidate

    if "<p" in preview and not preview.endswith("</p>"):
        preview += "</p>"

    return ExpandableContent(preview=preview, full_content=html, needs_expansion=True)


def analyze_batch_render_load(clips: list[Clip]) -> BatchRenderLoad:
    if not clips:
        return BatchRenderLoad()

    metrics = [analyze_content_metrics(c) for c in clips]
    total_complexity = sum(COMPLEXITY_WEIGHTS[m.complexity] for m in metrics)
    average_length = sum(m.text_length for m in metrics) / len(clips)

    suggestions: list[str] = []
    if total_complexity > 50:
        suggestions.append("Enable virtual scrolling for large clip lists")
    if average_length > 2_000:
        suggestions.append("Collapse long clips by default")
    if sum(1 for m in metrics if m.complexity == Complexity.extreme) > 2:
        suggestions.append("Several very long clips found; page them")

    return BatchRenderLoad(
        total_complexity=total_complexity,
        average_length=round(average_length),
        optimization_suggestions=suggestions,
    )
