"""Pydantic models for clips, processing results, and content reports."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from mark_clipper.core.themes import DEFAULT_CATEGORY, DEFAULT_THEME, ThemeKey

# ── Clip record ──────────────────────────────────────────────────────────────


class Clip(BaseModel):
    """A stored clip as handed to the content engine by the storage layer."""

    id: int | str | None = Field(default=None, description="Storage identifier")
    title: str = Field(default="", description="Display label")
    html_raw: str | None = Field(default=None, description="Captured HTML fragment")
    text_plain: str = Field(default="", description="Captured plain-text fallback")
    url: str | None = Field(default=None, description="Source page URL")
    theme_name: ThemeKey = Field(default=DEFAULT_THEME, description="Card theme")
    category: str = Field(default=DEFAULT_CATEGORY, description="Free-form category")
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("title", "text_plain", mode="before")
    @classmethod
    def _null_to_empty(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("category", mode="before")
    @classmethod
    def _blank_category(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_CATEGORY
        return v


# ── Processing ───────────────────────────────────────────────────────────────


class ContentSource(str, Enum):
    """Which tier produced a piece of display content."""

    processed = "processed"
    cached = "cached"
    translated = "translated"
    raw_html = "raw_html"
    plain_text = "plain_text"
    title = "title"
    placeholder = "placeholder"


class ProcessingStats(BaseModel):
    """Bookkeeping for a single pipeline run."""

    original_length: int = 0
    processed_length: int = 0
    plain_text_length: int = 0
    time_taken_ms: float = 0.0
    removed_tags: list[str] = Field(default_factory=list)


class ProcessingResult(BaseModel):
    """Output of the sanitize -> normalize pipeline."""

    html: str = ""
    plain_text: str = ""
    source: ContentSource = ContentSource.processed
    success: bool = False
    error: str | None = None
    stats: ProcessingStats = Field(default_factory=ProcessingStats)


class ContentResult(BaseModel):
    """Display content plus the tier that satisfied the request."""

    content: str
    source: ContentSource
    has_error: bool = False
    error_message: str | None = None
    stats: ProcessingStats | None = None


class ContentOptions(BaseModel):
    """Per-call options recognized by the content strategy."""

    fallback_to_plain_text: bool = Field(
        default=True, description="Allow the plain-text display tier"
    )
    log_errors: bool = Field(
        default=False, description="Log each tier's attempt and outcome"
    )
    preserve_formatting: bool = Field(
        default=True, description="Hand raw HTML to the editor untouched"
    )
    strict_mode: bool = Field(
        default=False, description="Use the strict tag allow-list"
    )
    use_cache: bool = Field(default=True, description="Memoize pipeline output")
    max_length: int | None = Field(
        default=None,
        gt=0,
        description="Reject HTML longer than this; None uses the engine config",
    )


class DataModelReport(BaseModel):
    """Whether a raw clip record carries redundant derived-content fields."""

    is_simple: bool = True
    redundant_fields: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


# ── Cache ────────────────────────────────────────────────────────────────────


class CacheEntry(BaseModel):
    """A memoized pipeline result."""

    result: str
    created_at: float
    hit_count: int = 0


class CacheStats(BaseModel):
    """Running counters for a translation cache."""

    size: int = 0
    max_size: int = 0
    hits: int = 0
    misses: int = 0
    hit_rate: float = 0.0
    total_memory: int = 0


# ── Quality assessment ───────────────────────────────────────────────────────


class QualityBand(str, Enum):
    excellent = "excellent"
    good = "good"
    fair = "fair"
    poor = "poor"


class QualityAssessment(BaseModel):
    """Completeness score for a clip's content."""

    score: int = 0
    has_html: bool = False
    has_plain_text: bool = False
    has_title: bool = False
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    quality: QualityBand = QualityBand.poor


# ── Validation ───────────────────────────────────────────────────────────────


class IssueType(str, Enum):
    security = "security"
    performance = "performance"
    format = "format"
    content = "content"


class Severity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class SecurityRisk(str, Enum):
    none = "none"
    low = "low"
    medium = "medium"
    high = "high"


class ValidationIssue(BaseModel):
    """A single finding from the validator."""

    type: IssueType
    severity: Severity
    message: str
    suggestion: str | None = None


class ValidationSummary(BaseModel):
    """Basic facts about the clip gathered during validation."""

    has_html: bool = False
    has_plain_text: bool = False
    has_title: bool = False
    content_length: int = 0
    estimated_render_time: float = 0.0
    security_risk: SecurityRisk = SecurityRisk.none
    quality_grade: str = "A"


class ValidationOptions(BaseModel):
    """Which validator checks to run."""

    check_security: bool = True
    check_performance: bool = True
    check_format: bool = True
    check_content: bool = True
    strict_mode: bool = Field(
        default=False, description="Flag inline styles as a security issue"
    )


class ValidationResult(BaseModel):
    """Aggregated diagnostic report for one clip."""

    is_valid: bool
    score: int = Field(ge=0, le=100)
    issues: list[ValidationIssue] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    summary: ValidationSummary = Field(default_factory=ValidationSummary)


class ValidationStats(BaseModel):
    """Roll-up over a batch of validation results."""

    total: int = 0
    valid: int = 0
    invalid: int = 0
    valid_rate: float = 0.0
    average_score: float = 0.0
    security_risks: int = 0
    grade_distribution: dict[str, int] = Field(
        default_factory=lambda: {g: 0 for g in "ABCDF"}
    )


# ── Render optimization ──────────────────────────────────────────────────────


class Complexity(str, Enum):
    simple = "simple"
    moderate = "moderate"
    complex = "complex"
    extreme = "extreme"


class ContentMetrics(BaseModel):
    html_length: int = 0
    text_length: int = 0
    estimated_render_time: int = 0
    complexity: Complexity = Complexity.simple
    recommendations: list[str] = Field(default_factory=list)


class OptimizationOptions(BaseModel):
    enable_lazy_loading: bool = False
    max_initial_height: int | None = None
    enable_virtualization: bool = False
    gpu_acceleration: bool = False


class RenderStrategy(BaseModel):
    should_lazy_load: bool = False
    initial_height: int | None = None
    use_virtualization: bool = False
    css_optimizations: list[str] = Field(default_factory=list)


class ExpandableContent(BaseModel):
    preview: str
    full_content: str
    needs_expansion: bool


class BatchRenderLoad(BaseModel):
    total_complexity: int = 0
    average_length: int = 0
    optimization_suggestions: list[str] = Field(default_factory=list)
