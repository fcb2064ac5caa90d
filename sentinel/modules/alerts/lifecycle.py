from __future__ import annotations

import uuid
from collections import deque
from typing import Deque, Iterable

import structlog

from sentinel.modules.alerts.models import AnomalyFinding, EmergencyAlert
from sentinel.modules.vitals.schemas import VitalsSample
from sentinel.shared.clock import Clock, utcnow
from sentinel.shared.constants import (
    ALERT_TYPE_BY_METRIC,
    AlertSeverity,
    AlertStatus,
    FindingSeverity,
    Metric,
)
from sentinel.shared.exceptions import UnknownAlertId

log = structlog.get_logger()

_METRIC_PRIORITY = {metric: index for index, metric in enumerate(Metric)}

# resolved is terminal
_ALLOWED_TRANSITIONS: dict[AlertStatus, frozenset[AlertStatus]] = {
    AlertStatus.ACTIVE: frozenset({AlertStatus.ACKNOWLEDGED, AlertStatus.RESOLVED}),
    AlertStatus.ACKNOWLEDGED: frozenset({AlertStatus.RESOLVED}),
    AlertStatus.RESOLVED: frozenset(),
}


class AlertLifecycleManager:
    """Create emergency alerts from critical findings and apply operator transitions."""

    def __init__(self, history_limit: int = 10, clock: Clock = utcnow) -> None:
        # newest first; appendleft evicts the oldest alert once full
        self._alerts: Deque[EmergencyAlert] = deque(maxlen=history_limit)
        self._clock = clock

    def raise_from_findings(
        self, sample: VitalsSample, findings: Iterable[AnomalyFinding]
    ) -> EmergencyAlert | None:
        critical = [f for f in findings if f.severity is FindingSeverity.CRITICAL]
        if not critical:
            return None

        trigger = min(critical, key=lambda finding: _METRIC_PRIORITY[finding.metric])
        alert = EmergencyAlert(
            id=uuid.uuid4().hex,
            type=ALERT_TYPE_BY_METRIC[trigger.metric],
            severity=AlertSeverity.EMERGENCY,
            vitals=sample,
            timestamp=self._clock(),
            subject_id=sample.subject_id,
        )
        self._alerts.appendleft(alert)
        log.warning(
            "alert_raised",
            alert_id=alert.id,
            alert_type=alert.type.value,
            subject_id=alert.subject_id,
            metric=trigger.metric.value,
            observed_value=trigger.observed_value,
        )
        return alert

    def acknowledge(self, alert_id: str) -> EmergencyAlert:
        return self._transition(alert_id, AlertStatus.ACKNOWLEDGED)

    def resolve(self, alert_id: str) -> EmergencyAlert:
        return self._transition(alert_id, AlertStatus.RESOLVED)

    def get(self, alert_id: str) -> EmergencyAlert:
        for alert in self._alerts:
            if alert.id == alert_id:
                return alert
        raise UnknownAlertId(alert_id)

    def list_alerts(self, status: AlertStatus | None = None) -> list[EmergencyAlert]:
        if status is None:
            return list(self._alerts)
        return [alert for alert in self._alerts if alert.status is status]

    def active_alerts(self) -> list[EmergencyAlert]:
        return self.list_alerts(AlertStatus.ACTIVE)

    def _transition(self, alert_id: str, target: AlertStatus) -> EmergencyAlert:
        alert = self.get(alert_id)
        if target not in _ALLOWED_TRANSITIONS[alert.status]:
            log.info(
                "alert_transition_ignored",
                alert_id=alert_id,
                status=alert.status.value,
                requested=target.value,
            )
            return alert

        now = self._clock()
        alert.status = target
        if target is AlertStatus.ACKNOWLEDGED:
            alert.acknowledged_at = now
        elif target is AlertStatus.RESOLVED:
            alert.resolved_at = now
        log.info("alert_status_changed", alert_id=alert_id, status=target.value)
        return alert
