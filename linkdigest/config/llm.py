from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ._validators import (
    _ensure_api_key,
    _parse_float_in_range,
    _parse_int_in_range,
    validate_model_name,
)

DEFAULT_ANTHROPIC_MODEL = "claude-3-5-haiku-20241022"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class AnthropicConfig(BaseModel):
    """Anthropic API configuration for direct API access."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_key: str = Field(
        default="", validation_alias=AliasChoices("ANTHROPIC_API_KEY", "CLAUDE_API_KEY")
    )
    model: str = Field(default=DEFAULT_ANTHROPIC_MODEL, validation_alias="ANTHROPIC_MODEL")
    base_url: str = Field(
        default="https://api.anthropic.com/v1", validation_alias="ANTHROPIC_BASE_URL"
    )

    @field_validator("api_key", mode="before")
    @classmethod
    def _validate_api_key(cls, value: Any) -> str:
        if value in (None, ""):
            return ""
        return _ensure_api_key(str(value), name="Anthropic")

    @field_validator("model", mode="before")
    @classmethod
    def _validate_model(cls, value: Any) -> str:
        if value in (None, ""):
            return DEFAULT_ANTHROPIC_MODEL
        return validate_model_name(str(value))


class OpenAIConfig(BaseModel):
    """OpenAI API configuration for direct API access."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")
    model: str = Field(default=DEFAULT_OPENAI_MODEL, validation_alias="OPENAI_MODEL")
    base_url: str = Field(default="https://api.openai.com/v1", validation_alias="OPENAI_BASE_URL")
    organization: str | None = Field(default=None, validation_alias="OPENAI_ORGANIZATION")

    @field_validator("api_key", mode="before")
    @classmethod
    def _validate_api_key(cls, value: Any) -> str:
        if value in (None, ""):
            return ""
        return _ensure_api_key(str(value), name="OpenAI")

    @field_validator("model", mode="before")
    @classmethod
    def _validate_model(cls, value: Any) -> str:
        if value in (None, ""):
            return DEFAULT_OPENAI_MODEL
        return validate_model_name(str(value))

    @field_validator("organization", mode="before")
    @classmethod
    def _validate_organization(cls, value: Any) -> str | None:
        if value in (None, ""):
            return None
        org = str(value).strip()
        if len(org) > 100:
            msg = "OpenAI organization ID appears too long"
            raise ValueError(msg)
        return org


class LLMCallConfig(BaseModel):
    """Generation and retry settings shared by every provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_tokens: int = Field(default=1000, validation_alias="LLM_MAX_TOKENS")
    temperature: float = Field(default=0.7, validation_alias="LLM_TEMPERATURE")
    max_retries: int = Field(default=2, validation_alias="LLM_MAX_RETRIES")
    backoff_base: float = Field(default=0.5, validation_alias="LLM_BACKOFF_BASE")
    max_response_size_mb: int = Field(default=10, validation_alias="LLM_MAX_RESPONSE_SIZE_MB")

    @field_validator("max_tokens", "max_retries", "max_response_size_mb", mode="before")
    @classmethod
    def _validate_ints(cls, value: Any, info: ValidationInfo) -> int:
        limits: dict[str, tuple[int, int]] = {
            "max_tokens": (1, 100_000),
            "max_retries": (0, 10),
            "max_response_size_mb": (1, 100),
        }
        low, high = limits[info.field_name]
        return _parse_int_in_range(
            value,
            default=cls.model_fields[info.field_name].default,
            name=info.field_name.replace("_", " "),
            low=low,
            high=high,
        )

    @field_validator("temperature", "backoff_base", mode="before")
    @classmethod
    def _validate_floats(cls, value: Any, info: ValidationInfo) -> float:
        limits: dict[str, tuple[float, float]] = {
            "temperature": (0.0, 2.0),
            "backoff_base": (0.0, 30.0),
        }
        low, high = limits[info.field_name]
        return _parse_float_in_range(
            value,
            default=cls.model_fields[info.field_name].default,
            name=info.field_name.replace("_", " "),
            low=low,
            high=high,
        )
