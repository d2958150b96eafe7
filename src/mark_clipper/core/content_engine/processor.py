"""Full HTML pipeline: cleanup -> sanitize -> normalize -> plain text."""

from __future__ import annotations

import logging
import re
import time

from mark_clipper.core.content_engine.cache import TranslationCache, make_key
from mark_clipper.core.content_engine.config import ContentEngineConfig
from mark_clipper.core.content_engine.extractor import TextExtractor
from mark_clipper.core.content_engine.normalizer import normalize_html
from mark_clipper.core.content_engine.sanitizer import HtmlSanitizer
from mark_clipper.core.models import (
    ContentOptions,
    ContentSource,
    ProcessingResult,
    ProcessingStats,
)

logger = logging.getLogger(__name__)

# Elements that are meaningful while empty
_KEEP_EMPTY = {"br", "hr", "img", "td", "th"}

_WHITESPACE_RE = re.compile(r"\s+")
_PRE_BLOCK_RE = re.compile(r"(<pre\b[^>]*>[\s\S]*?</pre\s*>)", re.IGNORECASE)
_EMPTY_ELEMENT_RE = re.compile(r"<([a-zA-Z][a-zA-Z0-9]*)\b[^>]*>\s*</\1\s*>")
_BR_RUN_RE = re.compile(r"(?:<br\s*/?>\s*){3,}", re.IGNORECASE)


def final_cleanup(html: str) -> str:
    """Collapse whitespace, drop empty elements, cap ``<br>`` runs at two.

    Whitespace inside ``<pre>`` blocks is left as is.
    """
    # Odd indices of the split are the <pre> blocks
    parts = _PRE_BLOCK_RE.split(html)
    cleaned = "".join(
        part if i % 2 else _WHITESPACE_RE.sub(" ", part) for i, part in enumerate(parts)
    )

    def _drop_empty(match: re.Match[str]) -> str:
        return match.group(0) if match.group(1).lower() in _KEEP_EMPTY else ""

    cleaned = _EMPTY_ELEMENT_RE.sub(_drop_empty, cleaned)
    cleaned = _BR_RUN_RE.sub("<br><br>", cleaned)
    return cleaned.strip()


class HtmlProcessor:
    """Sanitize and normalize clip HTML, memoizing successful results."""

    def __init__(
        self,
        config: ContentEngineConfig | None = None,
        cache: TranslationCache | None = None,
        sanitizer: HtmlSanitizer | None = None,
        extractor: TextExtractor | None = None,
    ) -> None:
        self.config = config or ContentEngineConfig()
        self.cache = cache if cache is not None else TranslationCache(
            max_size=self.config.cache_max_size,
            max_age=self.config.cache_max_age_seconds,
        )
        self.sanitizer = sanitizer or HtmlSanitizer(self.config)
        self.extractor = extractor or TextExtractor(use_dom=self.config.use_dom)

    def process(
        self,
        html: object,
        options: ContentOptions | None = None,
        normalize_headings: bool = True,
    ) -> ProcessingResult:
        """Run the pipeline on *html*.

        Never raises: invalid input and unexpected failures come back as a
        result with ``success=False`` and an ``error`` message.
        """
        start = time.perf_counter()
        strict = options.strict_mode if options else False
        use_cache = options.use_cache if options else True
        max_length = self.max_length_for(options)

        if not isinstance(html, str) or not html.strip():
            return _error_result(
                "Invalid input: HTML must be a non-empty string", start
            )
        if len(html) > max_length:
            return _error_result(
                f"Content too large: {len(html)} > {max_length}", start, len(html)
            )

        key = make_key(html, f"strict={strict};headings={normalize_headings}")
        if use_cache:
            cached = self._read_cache(key)
            if cached is not None:
                return cached

        try:
            result = self._run(html, strict, normalize_headings, start)
        except Exception as exc:
            logger.error("HTML processing failed: %s", exc)
            return _error_result(f"Processing failed: {exc}", start, len(html))

        if use_cache and result.success and result.html.strip():
            try:
                self.cache.set(key, result.model_dump_json())
            except Exception as exc:
                logger.warning("Cache write failed: %s", exc)
        return result

    def max_length_for(self, options: ContentOptions | None) -> int:
        """Per-call limit when set, else the engine-wide one."""
        if options is not None and options.max_length is not None:
            return options.max_length
        return self.config.max_length

    def _read_cache(self, key: str) -> ProcessingResult | None:
        try:
            raw = self.cache.get(key)
            if raw is None:
                return None
            result = ProcessingResult.model_validate_json(raw)
        except Exception as exc:
            logger.warning("Cache read failed, recomputing: %s", exc)
            return None
        result.source = ContentSource.cached
        return result

    def _run(
        self, html: str, strict: bool, normalize_headings: bool, start: float
    ) -> ProcessingResult:
        removed_tags: list[str] = []
        errors: list[str] = []

        processed = self.sanitizer.sanitize(
            html, strict=strict, removed_tags=removed_tags, errors=errors
        )
        if normalize_headings:
            processed = normalize_html(processed)
        plain_text = self.extractor.extract(processed)
        processed = final_cleanup(processed)

        if errors:
            logger.debug("Recovered from sanitizer errors: %s", errors)

        return ProcessingResult(
            html=processed,
            plain_text=plain_text,
            source=ContentSource.processed,
            success=True,
            stats=ProcessingStats(
                original_length=len(html),
                processed_length=len(processed),
                plain_text_length=len(plain_text),
                time_taken_ms=(time.perf_counter() - start) * 1000,
                removed_tags=removed_tags,
            ),
        )


def _error_result(error: str, start: float, original_length: int = 0) -> ProcessingResult:
    return ProcessingResult(
        success=False,
        error=error,
        stats=ProcessingStats(
            original_length=original_length,
            time_taken_ms=(time.perf_counter() - start) * 1000,
        ),
    )


def clean_html(html: str, processor: HtmlProcessor | None = None) -> str:
    """Sanitized, normalized HTML, or ``""`` if processing fails."""
    result = (processor or HtmlProcessor()).process(html)
    return result.html if result.success else ""


def extract_text(html: str, processor: HtmlProcessor | None = None) -> str:
    result = (processor or HtmlProcessor()).process(html)
    return result.plain_text if result.success else ""


def strict_clean(html: str, processor: HtmlProcessor | None = None) -> ProcessingResult:
    """Process with the strict tag allow-list."""
    return (processor or HtmlProcessor()).process(
        html, ContentOptions(strict_mode=True)
    )
