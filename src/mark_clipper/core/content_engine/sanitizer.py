"""Allow-list HTML sanitizer for captured clip content.

Two interchangeable passes implement the same policy:

* ``DomSanitizer`` walks a BeautifulSoup tree.
* ``RegexSanitizer`` scans tags one at a time and needs no parser.

``HtmlSanitizer`` picks one at construction and falls back to the regex pass
if the DOM pass raises.  Disallowed elements are unwrapped so their text
survives; only elements that never hold user text (scripts, styles, embeds)
are dropped together with their content.
"""

from __future__ import annotations

import html as html_lib
import logging
import re
from typing import Protocol

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, ProcessingInstruction, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from mark_clipper.core.content_engine.config import ContentEngineConfig

logger = logging.getLogger(__name__)

# Void elements render as ``<br>`` rather than ``<br/>``; text keeps minimal escaping.
HTML_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)

_COMMENT_RE = re.compile(r"<!--[\s\S]*?(?:-->|$)")
_SCRIPT_RE = re.compile(r"<script\b[^>]*>[\s\S]*?(?:</script\s*>|$)", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style\b[^>]*>[\s\S]*?(?:</style\s*>|$)", re.IGNORECASE)
_DOCTYPE_RE = re.compile(r"<!doctype[^>]*>", re.IGNORECASE)
_XML_DECL_RE = re.compile(r"<\?xml[\s\S]*?\?>", re.IGNORECASE)

TAG_RE = re.compile(r"<(/?)([a-zA-Z][a-zA-Z0-9]*)\b([^>]*)>")
_ATTR_RE = re.compile(
    r"""([^\s"'<>/=]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?"""
)
_URL_NOISE_RE = re.compile(r"[\x00-\x20\x7f]+")

URL_ATTRIBUTES = frozenset({"href", "src"})


def basic_cleanup(html: str, removed_tags: list[str] | None = None) -> str:
    """Drop comments, scripts, styles, DOCTYPE and XML declarations."""
    removed = removed_tags if removed_tags is not None else []

    cleaned = _COMMENT_RE.sub("", html)

    def _drop(name: str):
        def _repl(_: re.Match[str]) -> str:
            removed.append(name)
            return ""

        return _repl

    cleaned = _SCRIPT_RE.sub(_drop("script"), cleaned)
    cleaned = _STYLE_RE.sub(_drop("style"), cleaned)
    cleaned = _DOCTYPE_RE.sub("", cleaned)
    cleaned = _XML_DECL_RE.sub("", cleaned)
    return cleaned.strip()


def is_dangerous_url(value: str, schemes: list[str] | frozenset[str]) -> bool:
    """Return True if *value* uses one of the blocked URL schemes.

    Entities, case, whitespace and control characters are ignored, so
    ``" JaVa&#x53;cript:alert(1)"`` is caught.
    """
    compact = _URL_NOISE_RE.sub("", html_lib.unescape(value)).lower()
    if ":" not in compact:
        return False
    scheme = compact.split(":", 1)[0]
    return scheme in schemes


class SanitizerStrategy(Protocol):
    """One implementation of the allow-list policy."""

    name: str

    def sanitize(
        self, html: str, allowed_tags: frozenset[str], removed_tags: list[str]
    ) -> str: ...


class DomSanitizer:
    """Allow-list filtering over a BeautifulSoup tree."""

    name = "dom"

    def __init__(self, config: ContentEngineConfig) -> None:
        self.config = config

    def sanitize(
        self, html: str, allowed_tags: frozenset[str], removed_tags: list[str]
    ) -> str:
        soup = BeautifulSoup(html, "html.parser")

        # 1. Non-content nodes: comments, doctypes, processing instructions
        for node in soup.find_all(
            string=lambda s: isinstance(
                s, (Comment, Doctype, Declaration, ProcessingInstruction)
            )
        ):
            node.extract()

        # 2. Elements dropped together with their content
        for tag in soup.find_all(self.config.dropped_with_content):
            if isinstance(tag, Tag) and tag.attrs is not None:
                removed_tags.append(tag.name)
                tag.decompose()

        # 3. Unwrap disallowed elements, clean attributes on the rest
        for tag in soup.find_all(True):
            # Skip already-decomposed tags
            if not isinstance(tag, Tag) or tag.attrs is None:
                continue
            if tag.name not in allowed_tags:
                removed_tags.append(tag.name)
                tag.unwrap()
                continue
            self._clean_attributes(tag)

        return soup.decode(formatter=HTML_FORMATTER)

    def _clean_attributes(self, tag: Tag) -> None:
        allowed = self.config.attributes_for(tag.name)
        for attr in list(tag.attrs):
            name = attr.lower()
            if name.startswith("on") or name not in allowed:
                del tag.attrs[attr]
                continue
            if name in URL_ATTRIBUTES:
                value = tag.attrs[attr]
                if isinstance(value, list):
                    value = " ".join(value)
                if is_dangerous_url(str(value), self.config.dangerous_schemes):
                    del tag.attrs[attr]


class RegexSanitizer:
    """Best-effort allow-list filtering without a parser.

    Text between recognized tags has stray ``<``/``>`` escaped, so a fragment
    the scanner could not read as a tag is never emitted as markup.
    """

    name = "regex"

    def __init__(self, config: ContentEngineConfig) -> None:
        self.config = config
        dropped = "|".join(re.escape(t) for t in config.dropped_with_content)
        self._dropped_re = re.compile(
            rf"<({dropped})\b[^>]*>[\s\S]*?</\1\s*>", re.IGNORECASE
        )

    def sanitize(
        self, html: str, allowed_tags: frozenset[str], removed_tags: list[str]
    ) -> str:
        def _drop(match: re.Match[str]) -> str:
            removed_tags.append(match.group(1).lower())
            return ""

        html = _COMMENT_RE.sub("", html)
        html = _DOCTYPE_RE.sub("", html)
        html = self._dropped_re.sub(_drop, html)

        parts: list[str] = []
        pos = 0
        for match in TAG_RE.finditer(html):
            parts.append(_escape_text(html[pos:match.start()]))
            parts.append(self._filter_tag(match, allowed_tags, removed_tags))
            pos = match.end()
        parts.append(_escape_text(html[pos:]))
        return "".join(parts)

    def _filter_tag(
        self,
        match: re.Match[str],
        allowed_tags: frozenset[str],
        removed_tags: list[str],
    ) -> str:
        closing, name, raw_attrs = match.groups()
        tag = name.lower()
        if tag not in allowed_tags:
            removed_tags.append(tag)
            return ""
        if closing:
            return f"</{tag}>"
        return f"<{tag}{self._filter_attributes(tag, raw_attrs)}>"

    def _filter_attributes(self, tag: str, raw_attrs: str) -> str:
        allowed = self.config.attributes_for(tag)
        kept: list[str] = []
        for m in _ATTR_RE.finditer(raw_attrs):
            name = m.group(1).lower()
            if name.startswith("on") or name not in allowed:
                continue
            value = next((g for g in m.groups()[1:] if g is not None), None)
            if value is None:
                kept.append(f" {name}")
                continue
            if name in URL_ATTRIBUTES and is_dangerous_url(
                value, self.config.dangerous_schemes
            ):
                continue
            kept.append(f' {name}="{value.replace(chr(34), "&quot;")}"')
        return "".join(kept)


def _escape_text(text: str) -> str:
    return text.replace("<", "&lt;").replace(">", "&gt;")


class HtmlSanitizer:
    """Runs the cleanup pre-pass and one allow-list strategy.

    The strategy is chosen once, from ``use_dom`` (or ``config.use_dom``).
    A DOM strategy that raises is logged and replaced by the regex pass for
    that call; errors never reach the caller.
    """

    def __init__(
        self,
        config: ContentEngineConfig | None = None,
        use_dom: bool | None = None,
        strategy: SanitizerStrategy | None = None,
    ) -> None:
        self.config = config or ContentEngineConfig()
        self.fallback: SanitizerStrategy = RegexSanitizer(self.config)
        if strategy is not None:
            self.strategy = strategy
        elif self.config.use_dom if use_dom is None else use_dom:
            self.strategy = DomSanitizer(self.config)
        else:
            self.strategy = self.fallback

    def sanitize(
        self,
        html: str,
        strict: bool = False,
        removed_tags: list[str] | None = None,
        errors: list[str] | None = None,
    ) -> str:
        removed = removed_tags if removed_tags is not None else []
        allowed = self.config.tags_for(strict)

        cleaned = basic_cleanup(html, removed)
        if not cleaned:
            return ""

        try:
            return self.strategy.sanitize(cleaned, allowed, removed)
        except Exception as exc:
            logger.warning(
                "%s sanitization failed, using fallback: %s", self.strategy.name, exc,
            )
            if errors is not None:
                errors.append(f"{self.strategy.name} sanitization failed: {exc}")

        if self.strategy is not self.fallback:
            try:
                return self.fallback.sanitize(cleaned, allowed, removed)
            except Exception as exc:
                logger.error("regex sanitization failed: %s", exc)
                if errors is not None:
                    errors.append(f"regex sanitization failed: {exc}")

        # Last resort: no markup at all
        return _escape_text(TAG_RE.sub("", cleaned))


def sanitize_html(
    html: str, config: ContentEngineConfig | None = None, strict: bool = False
) -> str:
    """Sanitize *html* with a default-configured ``HtmlSanitizer``."""
    if not html:
        return ""
    return HtmlSanitizer(config).sanitize(html, strict=strict)
