"""Clip content engine: sanitize, normalize, extract, and cache clip HTML."""

from mark_clipper.core.content_engine.cache import TranslationCache, make_key
from mark_clipper.core.content_engine.config import ContentEngineConfig
from mark_clipper.core.content_engine.extractor import TextExtractor, html_to_plain_text
from mark_clipper.core.content_engine.normalizer import CANONICAL_HEADING, normalize_html
from mark_clipper.core.content_engine.processor import (
    HtmlProcessor,
    clean_html,
    extract_text,
    strict_clean,
)
from mark_clipper.core.content_engine.sanitizer import HtmlSanitizer, sanitize_html
from mark_clipper.core.content_engine.translator import LegacyTranslator, translate_html

__all__ = [
    "CANONICAL_HEADING",
    "ContentEngineConfig",
    "HtmlProcessor",
    "HtmlSanitizer",
    "LegacyTranslator",
    "TextExtractor",
    "TranslationCache",
    "clean_html",
    "extract_text",
    "html_to_plain_text",
    "make_key",
    "normalize_html",
    "sanitize_html",
    "strict_clean",
    "translate_html",
]
