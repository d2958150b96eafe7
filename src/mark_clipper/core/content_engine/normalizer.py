"""Heading and inline-format normalization for the rich-text editor.

The editor knows one heading level plus normal text, so every ``h1``-``h6``
is rewritten to ``CANONICAL_HEADING``.  Synonym tags collapse to one
canonical tag each (``b`` -> ``strong``, ``i`` -> ``em``).  Rewrites work tag
by tag, so unbalanced markup is handled and a second pass is a no-op.
"""

from __future__ import annotations

import re

CANONICAL_HEADING = "h2"

TAG_RENAMES: dict[str, str] = {
    "h1": CANONICAL_HEADING,
    "h2": CANONICAL_HEADING,
    "h3": CANONICAL_HEADING,
    "h4": CANONICAL_HEADING,
    "h5": CANONICAL_HEADING,
    "h6": CANONICAL_HEADING,
    "b": "strong",
    "i": "em",
}

EDITOR_FORMATS: dict[str, str] = {
    "bold": "bold",
    "italic": "italic",
    "underline": "underline",
    "normal": "normal",
    "ordered": "ordered",
    "bullet": "bullet",
    "link": "link",
    "blockquote": "blockquote",
    "header": "2",
}

_TAG_TO_FORMAT: dict[str, str] = {
    **{f"h{n}": EDITOR_FORMATS["header"] for n in range(1, 7)},
    **{t: EDITOR_FORMATS["normal"] for t in ("p", "div", "span", "section", "article")},
    "b": EDITOR_FORMATS["bold"],
    "strong": EDITOR_FORMATS["bold"],
    "i": EDITOR_FORMATS["italic"],
    "em": EDITOR_FORMATS["italic"],
    "u": EDITOR_FORMATS["underline"],
    "ol": EDITOR_FORMATS["ordered"],
    "ul": EDITOR_FORMATS["bullet"],
    "blockquote": EDITOR_FORMATS["blockquote"],
    "a": EDITOR_FORMATS["link"],
}

_RENAME_RE = re.compile(
    r"<(/?)(h[1-6]|b|i)(\s[^>]*)?>",
    re.IGNORECASE,
)


def normalize_html(html: str) -> str:
    """Flatten headings and rename synonym tags. Idempotent."""
    if not html:
        return ""

    def _rename(match: re.Match[str]) -> str:
        closing, name, attrs = match.groups()
        target = TAG_RENAMES[name.lower()]
        if closing:
            return f"</{target}>"
        return f"<{target}{attrs or ''}>"

    return _RENAME_RE.sub(_rename, html)


def editor_format_for_tag(tag_name: str) -> str | None:
    """Return the editor format a tag maps to, or None if unsupported."""
    return _TAG_TO_FORMAT.get(tag_name.lower())


def is_supported_tag(tag_name: str) -> bool:
    return tag_name.lower() in _TAG_TO_FORMAT


def supported_editor_formats() -> list[str]:
    return list(EDITOR_FORMATS.values())
