"""Data models for summarization providers backed by Pydantic validation."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SufficiencyAction(str, Enum):
    USE_CURRENT = "use_current"
    FETCH_MORE = "fetch_more"
    METADATA_ONLY = "metadata_only"


class QualityAction(str, Enum):
    ACCEPT = "accept"
    RETRY_DIFFERENT_SCRAPING = "retry_different_scraping"
    USE_METADATA_ONLY = "use_metadata_only"
    MARK_AS_FAILED = "mark_as_failed"


class IssueSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SummaryResult(BaseModel):
    """Structured summary produced by a provider."""

    model_config = ConfigDict(extra="forbid")

    short_summary: str = Field(description="One-line summary, at most about 150 characters.")
    long_summary: str = Field(description="Two to three paragraph summary.")
    tags: list[str] = Field(default_factory=list, description="Up to five topical tags.")
    category: str = Field(default="Uncategorized", description="Single category label.")
    provider: str = Field(description="Name of the provider that produced the result.")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    quality_score: float | None = Field(
        default=None, description="Score assigned by the response quality assessor."
    )
    quality_issues: list[str] | None = Field(
        default=None, description="Quality issues formatted as '<severity>: <description>'."
    )
    error: str | None = Field(default=None, description="Error message when summarization failed.")

    @property
    def is_error(self) -> bool:
        return self.error is not None


class SufficiencyResult(BaseModel):
    """Verdict on whether extracted content is enough to summarize."""

    model_config = ConfigDict(extra="forbid")

    is_sufficient: bool
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str = ""
    suggested_action: SufficiencyAction

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: object) -> float:
        try:
            parsed = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 0.5
        return min(1.0, max(0.0, parsed))


class QualityIssue(BaseModel):
    """A single defect detected in a provider's output."""

    model_config = ConfigDict(frozen=True)

    type: str
    severity: IssueSeverity
    description: str
    suggested_fix: str | None = None

    def format(self) -> str:
        return f"{self.severity.value}: {self.description}"


class QualityAssessment(BaseModel):
    """Outcome of the response quality assessor."""

    model_config = ConfigDict(extra="forbid")

    is_high_quality: bool
    quality_score: float = Field(ge=0.0, le=1.0)
    issues: list[QualityIssue] = Field(default_factory=list)
    suggested_action: QualityAction
    confidence: float = Field(ge=0.0, le=1.0)


class ModelInfo(BaseModel):
    """A model offered by a provider's listing endpoint."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None


class ProviderConfig(BaseModel):
    """Runtime configuration for one summarization provider instance."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Provider discriminant: 'anthropic' (alias 'claude') or 'openai'.")
    api_key: str = Field(default="", repr=False)
    model: str | None = Field(default=None, description="Model id; provider default when unset.")
    base_url: str | None = None
    organization: str | None = Field(default=None, description="OpenAI organization id.")
    max_tokens: int = Field(default=1000, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_retries: int = Field(default=2, ge=0)
    backoff_base: float = Field(default=0.5, ge=0.0)
    timeout_sec: float = Field(default=60.0, gt=0.0)
    max_response_size_bytes: int = Field(default=10 * 1024 * 1024, gt=0)

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_name(cls, value: object) -> str:
        return str(value or "").strip().lower()


class LLMCallResult(BaseModel):
    """Result of a single completion call, successful or not."""

    model_config = ConfigDict(extra="forbid")

    status: str = Field(description="High-level result status (ok, error).")
    model: str | None = Field(default=None, description="Model that produced the response.")
    response_text: str | None = Field(
        default=None, description="Primary text response returned by the provider."
    )
    error_text: str | None = Field(default=None, description="Error message when the call fails.")
    status_code: int | None = Field(default=None, description="HTTP status of the last attempt.")
    tokens_prompt: int | None = Field(
        default=None, description="Prompt tokens consumed by the request."
    )
    tokens_completion: int | None = Field(
        default=None, description="Completion tokens produced by the request."
    )
    latency_ms: int | None = Field(
        default=None, description="Observed latency for the request in milliseconds."
    )
    request_headers: dict[str, str] | None = Field(
        default=None, description="HTTP headers sent with the request, secrets redacted."
    )

    @property
    def ok(self) -> bool:
        return self.status == "ok"
