from enum import Enum


class Metric(str, Enum):
    # Declaration order is the evaluation and alert-type priority order
    HEART_RATE = "heart_rate"
    BLOOD_OXYGEN = "blood_oxygen"
    TEMPERATURE = "temperature"


class FindingSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, FindingSeverity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, FindingSeverity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, FindingSeverity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, FindingSeverity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    FindingSeverity.LOW: 0,
    FindingSeverity.MEDIUM: 1,
    FindingSeverity.HIGH: 2,
    FindingSeverity.CRITICAL: 3,
}


class AlertType(str, Enum):
    CARDIAC_ANOMALY = "cardiac_anomaly"
    OXYGEN_CRISIS = "oxygen_crisis"
    FEVER_SPIKE = "fever_spike"
    FALL_DETECTION = "fall_detection"


class AlertSeverity(str, Enum):
    EMERGENCY = "emergency"
    URGENT = "urgent"
    WARNING = "warning"


class AlertStatus(str, Enum):
    ACTIVE = "active"
    ACKNOWLEDGED = "acknowledged"
    RESOLVED = "resolved"


class ResponderRole(str, Enum):
    DOCTOR = "doctor"
    NURSE = "nurse"
    EMERGENCY_RESPONDER = "emergency_responder"
    HEALTH_COORDINATOR = "health_coordinator"


class Specialty(str, Enum):
    CARDIAC = "cardiac"
    RESPIRATORY = "respiratory"
    EMERGENCY = "emergency"
    GENERAL = "general"


class Channel(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    WEBHOOK = "webhook"


ALERT_TYPE_BY_METRIC: dict[Metric, AlertType] = {
    Metric.HEART_RATE: AlertType.CARDIAC_ANOMALY,
    Metric.BLOOD_OXYGEN: AlertType.OXYGEN_CRISIS,
    Metric.TEMPERATURE: AlertType.FEVER_SPIKE,
}
