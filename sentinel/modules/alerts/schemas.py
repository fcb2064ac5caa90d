from datetime import datetime

from pydantic import ConfigDict

from sentinel.modules.vitals.schemas import VitalsSample
from sentinel.shared.constants import (
    AlertSeverity,
    AlertStatus,
    AlertType,
    FindingSeverity,
    Metric,
)
from sentinel.shared.schemas import CamelModel


class FindingRead(CamelModel):
    """Outbound representation of a single anomaly finding."""

    model_config = ConfigDict(from_attributes=True)

    metric: Metric
    severity: FindingSeverity
    observed_value: float
    normal_range: tuple[float, float]
    timestamp: datetime
    confidence: float


class AlertRead(CamelModel):
    """Outbound representation of an emergency alert and its current status."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    type: AlertType
    severity: AlertSeverity
    vitals: VitalsSample
    timestamp: datetime
    subject_id: str
    status: AlertStatus
    acknowledged_at: datetime | None = None
    resolved_at: datetime | None = None
