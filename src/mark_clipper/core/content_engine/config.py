"""Configuration model for the clip content pipeline."""

from pydantic import BaseModel, Field

DEFAULT_ALLOWED_TAGS: list[str] = [
    # structure
    "div", "p", "span", "section", "article", "main", "aside",
    # headings
    "h1", "h2", "h3", "h4", "h5", "h6",
    # inline formatting
    "strong", "b", "em", "i", "u", "mark", "small", "del", "ins", "sub", "sup",
    # lists
    "ul", "ol", "li", "dl", "dt", "dd",
    # links and media
    "a", "img",
    # quotes and code
    "blockquote", "cite", "code", "pre", "kbd", "samp", "var",
    # tables
    "table", "thead", "tbody", "tfoot", "tr", "td", "th", "caption",
    # breaks
    "br", "hr",
]

DEFAULT_STRICT_TAGS: list[str] = [
    "p", "h1", "h2", "h3", "strong", "em", "ul", "ol", "li", "a", "br", "blockquote",
]


class ContentEngineConfig(BaseModel):
    """Engine-wide settings for sanitizing, normalizing, and caching clip HTML."""

    allowed_tags: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_TAGS),
        description="Tags kept in normal mode",
    )
    strict_allowed_tags: list[str] = Field(
        default_factory=lambda: list(DEFAULT_STRICT_TAGS),
        description="Tags kept in strict mode",
    )
    allowed_attributes: dict[str, list[str]] = Field(
        default_factory=lambda: {
            "a": ["href", "title", "target"],
            "img": ["src", "alt", "title", "width", "height"],
        },
        description="Per-tag attribute allow-list",
    )
    global_attributes: list[str] = Field(
        default_factory=lambda: ["id", "class"],
        description="Attributes allowed on every kept tag",
    )
    dropped_with_content: list[str] = Field(
        default_factory=lambda: [
            "script", "style", "iframe", "object", "embed", "noscript", "template",
        ],
        description="Tags removed together with everything inside them",
    )
    dangerous_schemes: list[str] = Field(
        default_factory=lambda: ["javascript", "data", "vbscript", "file", "about"],
        description="URL schemes stripped from href/src",
    )
    max_length: int = Field(
        default=100_000, gt=0, description="Largest HTML input accepted"
    )
    cache_max_size: int = Field(
        default=100, gt=0, description="Translation cache capacity"
    )
    cache_max_age_seconds: float = Field(
        default=30 * 60, gt=0, description="Translation cache entry lifetime"
    )
    use_dom: bool = Field(
        default=True, description="Prefer the BeautifulSoup passes over regex"
    )

    def tags_for(self, strict: bool) -> frozenset[str]:
        return frozenset(self.strict_allowed_tags if strict else self.allowed_tags)

    def attributes_for(self, tag: str) -> frozenset[str]:
        return frozenset(self.allowed_attributes.get(tag, [])) | frozenset(
            self.global_attributes
        )
