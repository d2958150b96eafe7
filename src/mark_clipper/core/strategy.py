"""Content strategy: pick the right representation of a clip for each caller.

Display content walks an ordered chain of stages and returns the first
non-empty result:

    processed (via cache) -> translated -> plain text -> title -> placeholder

A stage that raises or yields blank text is skipped.  Raw ``html_raw`` is
never handed to a render context without going through one of the two HTML
stages, both of which emit allow-listed markup only.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from mark_clipper.core.content_engine.cache import TranslationCache
from mark_clipper.core.content_engine.config import ContentEngineConfig
from mark_clipper.core.content_engine.extractor import TextExtractor
from mark_clipper.core.content_engine.processor import HtmlProcessor
from mark_clipper.core.content_engine.translator import LegacyTranslator
from mark_clipper.core.errors import ContentEngineError
from mark_clipper.core.models import (
    Clip,
    ContentOptions,
    ContentResult,
    ContentSource,
    DataModelReport,
    QualityAssessment,
    QualityBand,
)

logger = logging.getLogger(__name__)

PLACEHOLDER = "Content unavailable"

# ── Quality scoring constants ────────────────────────────────────────────────

QUALITY_HTML_POINTS: int = 50
QUALITY_TRANSLATION_POINTS: int = 30
QUALITY_TEXT_POINTS: int = 15
QUALITY_TITLE_POINTS: int = 5
MIN_TEXT_LENGTH: int = 10
MAX_TEXT_LENGTH: int = 10_000

QUALITY_BANDS: list[tuple[int, QualityBand]] = [
    (80, QualityBand.excellent),
    (60, QualityBand.good),
    (40, QualityBand.fair),
]
"""(min_score, band), evaluated top-down, first match wins."""


@dataclass(frozen=True)
class DisplayStage:
    """One link in the display fallback chain."""

    name: str
    attempt: Callable[[Clip, ContentOptions], ContentResult | None]


def _has_text(value: str | None) -> bool:
    return bool(value and value.strip())


class ContentStrategy:
    """Display, edit, and search projections of a clip, plus quality scoring."""

    def __init__(
        self,
        config: ContentEngineConfig | None = None,
        cache: TranslationCache | None = None,
        processor: HtmlProcessor | None = None,
        translator: LegacyTranslator | None = None,
        extractor: TextExtractor | None = None,
    ) -> None:
        self.config = config or ContentEngineConfig()
        self.cache = cache if cache is not None else TranslationCache(
            max_size=self.config.cache_max_size,
            max_age=self.config.cache_max_age_seconds,
        )
        self.processor = processor or HtmlProcessor(self.config, cache=self.cache)
        self.translator = translator or LegacyTranslator(cache=self.cache)
        self.extractor = extractor or TextExtractor(use_dom=self.config.use_dom)
        self.display_chain: list[DisplayStage] = [
            DisplayStage("processed", self._attempt_processed),
            DisplayStage("translated", self._attempt_translated),
            DisplayStage("plain_text", self._attempt_plain_text),
            DisplayStage("title", self._attempt_title),
            DisplayStage("placeholder", self._attempt_placeholder),
        ]

    # ── Display stages ───────────────────────────────────────────────────────

    def _max_length(self, opts: ContentOptions) -> int:
        """Per-call size limit when set, else the engine-wide one."""
        if opts.max_length is not None:
            return opts.max_length
        return self.config.max_length

    def _attempt_processed(self, clip: Clip, opts: ContentOptions) -> ContentResult | None:
        if not _has_text(clip.html_raw):
            return None
        result = self.processor.process(
            clip.html_raw, opts.model_copy(update={"max_length": self._max_length(opts)})
        )
        if not result.success:
            raise ContentEngineError(result.error or "HTML processing failed")
        return ContentResult(content=result.html, source=result.source, stats=result.stats)

    def _attempt_translated(self, clip: Clip, opts: ContentOptions) -> ContentResult | None:
        if not _has_text(clip.html_raw):
            return None
        content = self.translator.translate(
            clip.html_raw, max_length=self._max_length(opts)
        )
        return ContentResult(content=content, source=ContentSource.translated)

    def _attempt_plain_text(self, clip: Clip, opts: ContentOptions) -> ContentResult | None:
        if not opts.fallback_to_plain_text:
            return None
        return ContentResult(content=clip.text_plain, source=ContentSource.plain_text)

    def _attempt_title(self, clip: Clip, opts: ContentOptions) -> ContentResult | None:
        return ContentResult(content=clip.title, source=ContentSource.title)

    def _attempt_placeholder(self, clip: Clip, opts: ContentOptions) -> ContentResult | None:
        return ContentResult(content=PLACEHOLDER, source=ContentSource.placeholder)

    # ── Public operations ────────────────────────────────────────────────────

    def get_detailed_display_content(
        self, clip: Clip, options: ContentOptions | None = None
    ) -> ContentResult:
        """Resolve display content and report which tier produced it."""
        opts = options or ContentOptions()
        last_error: str | None = None

        for stage in self.display_chain:
            try:
                result = stage.attempt(clip, opts)
            except Exception as exc:
                last_error = f"{stage.name}: {exc}"
                if opts.log_errors:
                    logger.warning("Clip %s: %s tier failed: %s", clip.id, stage.name, exc)
                continue

            if result is None or not result.content.strip():
                if opts.log_errors:
                    logger.debug("Clip %s: %s tier produced nothing", clip.id, stage.name)
                continue

            if opts.log_errors:
                logger.info("Clip %s: display content from %s", clip.id, result.source.value)
            if last_error is not None:
                result.has_error = True
                result.error_message = last_error
            return result

        # The placeholder stage always succeeds unless the chain was altered
        return ContentResult(
            content=PLACEHOLDER,
            source=ContentSource.placeholder,
            has_error=True,
            error_message=last_error or "No display tier produced content",
        )

    def get_display_content(self, clip: Clip, options: ContentOptions | None = None) -> str:
        """Render-safe display string for *clip*; never empty."""
        return self.get_detailed_display_content(clip, options).content

    def get_edit_content(self, clip: Clip, options: ContentOptions | None = None) -> str:
        """Content for the rich-text editor.

        The editor reconciles formatting itself, so raw HTML is handed over
        untouched when formatting is preserved.
        """
        opts = options or ContentOptions()
        if clip.html_raw and opts.preserve_formatting:
            return clip.html_raw
        return clip.text_plain or ""

    def get_searchable_content(self, clip: Clip) -> str:
        """Plain-text projection for search indexes; never contains markup."""
        if _has_text(clip.html_raw):
            try:
                text = self.extractor.extract(clip.html_raw)
            except Exception as exc:
                logger.warning("Clip %s: search text extraction failed: %s", clip.id, exc)
            else:
                if text.strip():
                    return text
        return clip.text_plain or clip.title or ""

    def get_content_preview(self, clip: Clip, max_length: int = 150) -> str:
        """Plain-text preview, truncated with ``...`` past *max_length*."""
        content = self.get_searchable_content(clip) or PLACEHOLDER
        if len(content) <= max_length:
            return content
        return content[:max_length].strip() + "..."

    def has_valid_content(self, clip: Clip) -> bool:
        return _has_text(clip.html_raw) or _has_text(clip.text_plain) or _has_text(clip.title)

    def assess_content_quality(self, clip: Clip) -> QualityAssessment:
        """Score a clip's completeness (0-100). Read-only."""
        has_html = _has_text(clip.html_raw)
        has_plain_text = _has_text(clip.text_plain)
        has_title = _has_text(clip.title)

        score = 0
        issues: list[str] = []
        recommendations: list[str] = []

        if has_html:
            score += QUALITY_HTML_POINTS
            try:
                translated = self.translator.translate(
                    clip.html_raw, max_length=self.config.max_length
                )
            except Exception:
                issues.append("HTML translation failed")
                recommendations.append("The HTML may be malformed")
            else:
                if translated.strip():
                    score += QUALITY_TRANSLATION_POINTS
                else:
                    issues.append("HTML translation produced no content")
                    recommendations.append("Check that the HTML is well formed")

        if has_plain_text:
            score += QUALITY_TEXT_POINTS
        else:
            issues.append("Missing plain-text content")
            recommendations.append("Add text content as a fallback")

        if has_title:
            score += QUALITY_TITLE_POINTS
        else:
            issues.append("Missing title")
            recommendations.append("Add a descriptive title")

        text_length = len(clip.text_plain)
        if text_length < MIN_TEXT_LENGTH:
            issues.append("Content is too short")
        elif text_length > MAX_TEXT_LENGTH:
            issues.append("Content is very long and may slow rendering")
            recommendations.append("Consider splitting long content")

        score = min(score, 100)
        quality = next(
            (band for min_score, band in QUALITY_BANDS if score >= min_score),
            QualityBand.poor,
        )
        return QualityAssessment(
            score=score,
            has_html=has_html,
            has_plain_text=has_plain_text,
            has_title=has_title,
            issues=issues,
            recommendations=recommendations,
            quality=quality,
        )

    # ── Batches ──────────────────────────────────────────────────────────────

    def batch_get_display_content(
        self, clips: Iterable[Clip], options: ContentOptions | None = None
    ) -> list[str]:
        return [self.get_display_content(clip, options) for clip in clips]

    async def batch_get_display_content_async(
        self, clips: Iterable[Clip], options: ContentOptions | None = None
    ) -> list[str]:
        """Like ``batch_get_display_content``, yielding to the loop between clips."""
        results: list[str] = []
        for clip in clips:
            results.append(self.get_display_content(clip, options))
            await asyncio.sleep(0)
        return results


def validate_data_model_simplicity(record: Mapping[str, object]) -> DataModelReport:
    """Flag derived-content fields that should not be stored on a clip row."""
    redundant: list[str] = []
    recommendations: list[str] = []

    if "content" in record:
        redundant.append("content")
        recommendations.append("Drop the content field; use html_raw and text_plain")
    derived = [f for f in ("html_processed", "html_formatted") if f in record]
    if derived:
        redundant.extend(derived)
        recommendations.append("Drop processed HTML fields; translate on demand")

    return DataModelReport(
        is_simple=not redundant,
        redundant_fields=redundant,
        recommendations=recommendations,
    )
