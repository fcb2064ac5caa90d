from dataclasses import dataclass
from datetime import datetime

from sentinel.modules.vitals.schemas import VitalsSample
from sentinel.shared.constants import (
    AlertSeverity,
    AlertStatus,
    AlertType,
    FindingSeverity,
    Metric,
)


@dataclass(frozen=True)
class AnomalyFinding:
    metric: Metric
    severity: FindingSeverity
    observed_value: float
    normal_range: tuple[float, float]
    timestamp: datetime
    confidence: float


@dataclass
class EmergencyAlert:
    """Stateful emergency record; only status and the action timestamps ever change."""

    id: str
    type: AlertType
    severity: AlertSeverity
    vitals: VitalsSample
    timestamp: datetime
    subject_id: str
    status: AlertStatus = AlertStatus.ACTIVE
    acknowledged_at: datetime | None = None
    resolved_at: datetime | None = None
