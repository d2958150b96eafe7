"""Legacy regex translator into the editor's tag vocabulary.

Used as the second display tier, for content shaped by older capture code.
Every tag it emits comes from ``_TAG_MAP`` and the only attribute it keeps is
a safe ``href`` on links, so its output is render-safe on its own.
"""

from __future__ import annotations

import re

from mark_clipper.core.content_engine.cache import TranslationCache
from mark_clipper.core.content_engine.config import ContentEngineConfig
from mark_clipper.core.content_engine.normalizer import CANONICAL_HEADING
from mark_clipper.core.content_engine.sanitizer import TAG_RE, basic_cleanup, is_dangerous_url
from mark_clipper.core.errors import ContentInputError

MAX_INPUT_LENGTH = 100_000
CACHE_VARIANT = "legacy"

_TAG_MAP: dict[str, str] = {
    **{f"h{n}": CANONICAL_HEADING for n in range(1, 7)},
    "b": "strong",
    "strong": "strong",
    "i": "em",
    "em": "em",
    "u": "u",
    "a": "a",
    "ol": "ol",
    "ul": "ul",
    "li": "li",
    "blockquote": "blockquote",
    "p": "p",
    "div": "div",
    "section": "section",
    "article": "article",
    "span": "span",
}

_HREF_RE = re.compile(r"""\bhref\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""", re.IGNORECASE)
_BR_RE = re.compile(r"<\s*/?\s*br\s*/?\s*>", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")

_DEFAULTS = ContentEngineConfig()
_DROPPED_RE = re.compile(
    r"<({})\b[^>]*>[\s\S]*?</\1\s*>".format(
        "|".join(re.escape(t) for t in _DEFAULTS.dropped_with_content)
    ),
    re.IGNORECASE,
)


def _validate(html: object, max_length: int) -> str:
    if not isinstance(html, str):
        raise ContentInputError("Input must be a string")
    if len(html) > max_length:
        raise ContentInputError(
            f"HTML content too large: {len(html)} > {max_length}"
        )
    return html


def _translate_tag(match: re.Match[str]) -> str:
    closing, name, attrs = match.groups()
    tag = name.lower()
    if tag == "br":
        return "<br>"
    target = _TAG_MAP.get(tag)
    if target is None:
        return ""
    if closing:
        return f"</{target}>"
    if target == "a":
        return f'<a href="{_safe_href(attrs)}">'
    return f"<{target}>"


def _safe_href(attrs: str) -> str:
    m = _HREF_RE.search(attrs)
    if not m:
        return "#"
    href = next(g for g in m.groups() if g is not None)
    if is_dangerous_url(href, _DEFAULTS.dangerous_schemes):
        return "#"
    return href.replace('"', "&quot;")


def translate_html(html: str, max_length: int = MAX_INPUT_LENGTH) -> str:
    """Translate *html* into editor-compatible markup.

    Raises ``ContentInputError`` for non-string input or input longer than
    *max_length*, and returns ``""`` for blank input.  Text outside
    recognized tags is kept with stray angle brackets escaped.
    """
    _validate(html, max_length)
    if not html.strip():
        return ""

    cleaned = basic_cleanup(html)
    cleaned = _DROPPED_RE.sub("", cleaned)
    cleaned = _BR_RE.sub("<br>", cleaned)

    parts: list[str] = []
    pos = 0
    for match in TAG_RE.finditer(cleaned):
        parts.append(cleaned[pos:match.start()].replace("<", "&lt;").replace(">", "&gt;"))
        parts.append(_translate_tag(match))
        pos = match.end()
    parts.append(cleaned[pos:].replace("<", "&lt;").replace(">", "&gt;"))

    return _WHITESPACE_RE.sub(" ", "".join(parts)).strip()


class LegacyTranslator:
    """``translate_html`` behind a ``TranslationCache``."""

    def __init__(self, cache: TranslationCache | None = None) -> None:
        self.cache = cache if cache is not None else TranslationCache()

    def translate(self, html: str, max_length: int = MAX_INPUT_LENGTH) -> str:
        _validate(html, max_length)
        if not html.strip():
            return ""
        return self.cache.memoize(
            html, lambda h: translate_html(h, max_length), variant=CACHE_VARIANT
        )
