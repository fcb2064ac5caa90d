import json
from pathlib import Path
from typing import Any

import structlog
from pydantic import Field, model_validator

from sentinel.shared.constants import Channel, Metric
from sentinel.shared.schemas import CamelModel

log = structlog.get_logger()


class ThresholdRange(CamelModel):
    min: float
    max: float

    @model_validator(mode="after")
    def check_bounds(self) -> "ThresholdRange":
        if self.min > self.max:
            raise ValueError("threshold min must not exceed max")
        return self

    def breached_by(self, value: float, check_max: bool = True) -> bool:
        return value < self.min or (check_max and value > self.max)


# High saturation is never critical; only the lower bound gates these
_LOWER_BOUND_ONLY = frozenset({Metric.BLOOD_OXYGEN})


class CriticalThresholds(CamelModel):
    heart_rate: ThresholdRange = ThresholdRange(min=40, max=140)
    blood_oxygen: ThresholdRange = ThresholdRange(min=90, max=100)
    temperature: ThresholdRange = ThresholdRange(min=35, max=38.5)

    def for_metric(self, metric: Metric) -> ThresholdRange:
        return getattr(self, metric.value)

    def is_critical(self, metric: Metric, value: float) -> bool:
        return self.for_metric(metric).breached_by(
            value, check_max=metric not in _LOWER_BOUND_ONLY
        )


class ChannelToggles(CamelModel):
    email: bool = True
    sms: bool = False
    webhook: bool = True

    def is_enabled(self, channel: Channel) -> bool:
        return getattr(self, channel.value)


class NotificationConfig(CamelModel):
    """Dispatcher gating: configurable critical thresholds, channels and debounce."""

    channel_enabled: ChannelToggles = Field(default_factory=ChannelToggles)
    critical_thresholds: CriticalThresholds = Field(default_factory=CriticalThresholds)
    debounce_seconds: int = Field(default=300, ge=0)

    def merged(self, update: dict[str, Any]) -> "NotificationConfig":
        """Return a new config with only the supplied (possibly nested) fields replaced."""
        return NotificationConfig.model_validate(_deep_merge(self.model_dump(), update))


class ThresholdRangeUpdate(CamelModel):
    min: float | None = None
    max: float | None = None


class CriticalThresholdsUpdate(CamelModel):
    heart_rate: ThresholdRangeUpdate | None = None
    blood_oxygen: ThresholdRangeUpdate | None = None
    temperature: ThresholdRangeUpdate | None = None


class ChannelTogglesUpdate(CamelModel):
    email: bool | None = None
    sms: bool | None = None
    webhook: bool | None = None


class NotificationConfigUpdate(CamelModel):
    """PATCH body; omitted or null fields keep their current value."""

    channel_enabled: ChannelTogglesUpdate | None = None
    critical_thresholds: CriticalThresholdsUpdate | None = None
    debounce_seconds: int | None = Field(default=None, ge=0)

    def as_patch(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


def _deep_merge(base: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_notification_config(path: Path | None) -> NotificationConfig:
    if path is None:
        return NotificationConfig()
    try:
        payload = json.loads(path.read_text())
        return NotificationConfig.model_validate(payload)
    except FileNotFoundError:
        log.info("notification config file not found, using defaults", path=str(path))
        return NotificationConfig()
    except Exception as exc:
        log.warning(
            "notification config load failed, using defaults", path=str(path), error=str(exc)
        )
        return NotificationConfig()
