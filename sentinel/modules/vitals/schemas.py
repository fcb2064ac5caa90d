from datetime import datetime, timezone
from typing import Any

from pydantic import ConfigDict, Field, ValidationError, field_validator

from sentinel.shared.constants import Metric
from sentinel.shared.exceptions import InvalidSample
from sentinel.shared.schemas import CamelModel, ensure_utc, parse_epoch


class VitalsSample(CamelModel):
    """
    One timestamped reading of the three monitored vitals for a subject.

    Bounds are physical plausibility limits, not clinical ranges. Values
    outside them are rejected, never clamped.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    heart_rate: float = Field(ge=0, le=300, description="Beats per minute")
    blood_oxygen: float = Field(ge=0, le=100, description="SpO2 percentage")
    temperature: float = Field(ge=20, le=45, description="Body temperature in Celsius")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    subject_id: str = Field(min_length=1)
    device_id: str | None = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_epoch_timestamp(cls, value: object) -> object:
        return parse_epoch(value)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def value_of(self, metric: Metric) -> float:
        return getattr(self, metric.value)


def parse_sample(payload: dict[str, Any]) -> VitalsSample:
    """Validate a raw feed payload, raising InvalidSample instead of ValidationError."""
    try:
        return VitalsSample.model_validate(payload)
    except ValidationError as exc:
        reasons = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise InvalidSample(reasons) from exc
