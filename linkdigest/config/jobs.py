from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from ._validators import _parse_float_in_range, _parse_int_in_range


class JobQueueConfig(BaseModel):
    """Summarization job queue settings."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_attempts: int = Field(default=3, validation_alias="JOB_MAX_ATTEMPTS")
    retry_delay_sec: float = Field(default=5.0, validation_alias="JOB_RETRY_DELAY_SEC")
    inter_job_delay_sec: float = Field(
        default=1.0,
        validation_alias="JOB_INTER_DELAY_SEC",
        description="Pause between consecutive jobs; the queue's only backpressure.",
    )
    default_priority: int = Field(default=1, validation_alias="JOB_DEFAULT_PRIORITY")

    @field_validator("max_attempts", mode="before")
    @classmethod
    def _validate_attempts(cls, value: Any) -> int:
        return _parse_int_in_range(
            value,
            default=cls.model_fields["max_attempts"].default,
            name="job max attempts",
            low=1,
            high=10,
        )

    @field_validator("default_priority", mode="before")
    @classmethod
    def _validate_priority(cls, value: Any) -> int:
        return _parse_int_in_range(
            value,
            default=cls.model_fields["default_priority"].default,
            name="job default priority",
            low=-1000,
            high=1000,
        )

    @field_validator("retry_delay_sec", "inter_job_delay_sec", mode="before")
    @classmethod
    def _validate_delays(cls, value: Any, info: ValidationInfo) -> float:
        return _parse_float_in_range(
            value,
            default=cls.model_fields[info.field_name].default,
            name=info.field_name.replace("_", " "),
            low=0.0,
            high=3600.0,
        )
