from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from ._validators import _parse_float_in_range, _parse_int_in_range


class ContentExtractionConfig(BaseModel):
    """Limits and timeouts for the tiered content extractor."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    min_content_length: int = Field(default=200, validation_alias="EXTRACTION_MIN_CONTENT_LENGTH")
    max_text_length: int = Field(default=5000, validation_alias="EXTRACTION_MAX_TEXT_LENGTH")
    quick_analysis_limit_bytes: int = Field(
        default=50 * 1024, validation_alias="EXTRACTION_QUICK_LIMIT_BYTES"
    )
    disk_read_ahead_bytes: int = Field(
        default=50 * 1024, validation_alias="EXTRACTION_DISK_READ_AHEAD_BYTES"
    )
    disk_read_ceiling_bytes: int = Field(
        default=200 * 1024, validation_alias="EXTRACTION_DISK_READ_CEILING_BYTES"
    )
    quick_timeout_sec: float = Field(default=5.0, validation_alias="EXTRACTION_QUICK_TIMEOUT_SEC")
    disk_timeout_sec: float = Field(default=30.0, validation_alias="EXTRACTION_DISK_TIMEOUT_SEC")
    temp_dir: str | None = Field(
        default=None,
        validation_alias="EXTRACTION_TEMP_DIR",
        description="Directory for disk-streamed downloads; system temp dir when unset.",
    )

    @field_validator(
        "min_content_length",
        "max_text_length",
        "quick_analysis_limit_bytes",
        "disk_read_ahead_bytes",
        "disk_read_ceiling_bytes",
        mode="before",
    )
    @classmethod
    def _validate_sizes(cls, value: Any, info: ValidationInfo) -> int:
        return _parse_int_in_range(
            value,
            default=cls.model_fields[info.field_name].default,
            name=info.field_name.replace("_", " "),
            low=1,
            high=100 * 1024 * 1024,
        )

    @field_validator("quick_timeout_sec", "disk_timeout_sec", mode="before")
    @classmethod
    def _validate_timeouts(cls, value: Any, info: ValidationInfo) -> float:
        return _parse_float_in_range(
            value,
            default=cls.model_fields[info.field_name].default,
            name=info.field_name.replace("_", " "),
            low=0.1,
            high=600.0,
        )

    @field_validator("temp_dir", mode="before")
    @classmethod
    def _validate_temp_dir(cls, value: Any) -> str | None:
        if value is None:
            return None
        trimmed = str(value).strip()
        if not trimmed:
            return None
        if "\x00" in trimmed:
            msg = "Extraction temp directory contains invalid characters"
            raise ValueError(msg)
        return trimmed

    @model_validator(mode="after")
    def _validate_read_window(self) -> ContentExtractionConfig:
        """Ensure disk_read_ahead_bytes <= disk_read_ceiling_bytes."""
        if self.disk_read_ahead_bytes > self.disk_read_ceiling_bytes:
            msg = (
                f"disk_read_ahead_bytes ({self.disk_read_ahead_bytes}) must be <= "
                f"disk_read_ceiling_bytes ({self.disk_read_ceiling_bytes})"
            )
            raise ValueError(msg)
        return self
