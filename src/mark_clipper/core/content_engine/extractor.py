"""Plain-text extraction from clip HTML, for search and text fallbacks."""

from __future__ import annotations

import html as html_lib
import logging
import re
from typing import Protocol

from bs4 import BeautifulSoup, Comment, Tag

logger = logging.getLogger(__name__)

BLOCK_TAGS: tuple[str, ...] = (
    "p", "div", "li", "blockquote", "h1", "h2", "h3", "h4", "h5", "h6",
)

_DROP_RE = re.compile(
    r"<(script|style)\b[^>]*>[\s\S]*?(?:</\1\s*>|$)|<!--[\s\S]*?(?:-->|$)",
    re.IGNORECASE,
)
_BLOCK_RE = re.compile(
    r"</?(?:div|p|br|h[1-6]|li|blockquote)\b[^>]*>", re.IGNORECASE
)
_ANY_TAG_RE = re.compile(r"<[^>]*>")


def collapse_lines(text: str) -> str:
    """Squeeze whitespace inside lines and drop blank lines."""
    lines = (" ".join(line.split()) for line in text.replace("\xa0", " ").split("\n"))
    return "\n".join(line for line in lines if line)


class TextExtractionStrategy(Protocol):
    name: str

    def extract(self, html: str) -> str: ...


class DomTextExtractor:
    """Extract text from a BeautifulSoup tree, one line per block element."""

    name = "dom"

    def extract(self, html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        for node in soup.find_all(string=lambda s: isinstance(s, Comment)):
            node.extract()
        for tag in soup.find_all(["script", "style"]):
            tag.decompose()
        for tag in soup.find_all("br"):
            tag.replace_with("\n")
        for tag in soup.find_all(BLOCK_TAGS):
            if isinstance(tag, Tag) and tag.parent is not None:
                tag.insert_before("\n")
                tag.insert_after("\n")
        return collapse_lines(soup.get_text())


class RegexTextExtractor:
    """Pure string-scanning extraction; works without any parser."""

    name = "regex"

    def extract(self, html: str) -> str:
        text = _DROP_RE.sub("", html)
        text = _BLOCK_RE.sub("\n", text)
        text = _ANY_TAG_RE.sub("", text)
        text = html_lib.unescape(text)
        return collapse_lines(text)


class TextExtractor:
    """Chooses a strategy once; DOM failures fall back to regex scanning."""

    def __init__(
        self,
        use_dom: bool = True,
        strategy: TextExtractionStrategy | None = None,
    ) -> None:
        self.fallback: TextExtractionStrategy = RegexTextExtractor()
        if strategy is not None:
            self.strategy = strategy
        else:
            self.strategy = DomTextExtractor() if use_dom else self.fallback

    def extract(self, html: str | None) -> str:
        if not html or not html.strip():
            return ""
        try:
            return self.strategy.extract(html)
        except Exception as exc:
            if self.strategy is self.fallback:
                logger.error("Text extraction failed: %s", exc)
                return ""
            logger.warning("%s text extraction failed, using regex: %s", self.strategy.name, exc)
            return self.fallback.extract(html)


def html_to_plain_text(html: str | None, use_dom: bool = True) -> str:
    """Plain-text rendition of *html*; never contains markup."""
    return TextExtractor(use_dom=use_dom).extract(html)
