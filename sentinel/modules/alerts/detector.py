from __future__ import annotations

from dataclasses import dataclass

from sentinel.modules.alerts.models import AnomalyFinding
from sentinel.modules.vitals.schemas import VitalsSample
from sentinel.shared.constants import FindingSeverity, Metric


@dataclass(frozen=True)
class ClinicalRule:
    """
    Fixed clinical classification for one metric.

    ``normal_range`` is the reference range reported on findings; the trigger
    and critical bands are what classification actually compares against.
    A ``None`` bound means that side is never checked.
    """

    metric: Metric
    normal_range: tuple[float, float]
    trigger_below: float | None
    trigger_above: float | None
    critical_below: float | None
    critical_above: float | None
    confidence: float

    def classify(self, value: float) -> FindingSeverity | None:
        if not _outside(value, self.trigger_below, self.trigger_above):
            return None
        if _outside(value, self.critical_below, self.critical_above):
            return FindingSeverity.CRITICAL
        return FindingSeverity.MEDIUM


CLINICAL_RULES: tuple[ClinicalRule, ...] = (
    ClinicalRule(
        metric=Metric.HEART_RATE,
        normal_range=(60.0, 100.0),
        trigger_below=50.0,
        trigger_above=120.0,
        critical_below=40.0,
        critical_above=140.0,
        confidence=0.95,
    ),
    ClinicalRule(
        metric=Metric.BLOOD_OXYGEN,
        normal_range=(95.0, 100.0),
        trigger_below=95.0,
        trigger_above=None,
        critical_below=90.0,
        critical_above=None,
        confidence=0.92,
    ),
    ClinicalRule(
        metric=Metric.TEMPERATURE,
        normal_range=(36.1, 37.2),
        trigger_below=36.1,
        trigger_above=37.2,
        critical_below=35.0,
        critical_above=38.5,
        confidence=0.88,
    ),
)


class AnomalyDetector:
    """Classify a single vitals sample against the fixed clinical rules."""

    def __init__(self, rules: tuple[ClinicalRule, ...] = CLINICAL_RULES) -> None:
        self._rules = rules

    def detect(self, sample: VitalsSample) -> list[AnomalyFinding]:
        findings: list[AnomalyFinding] = []
        for rule in self._rules:
            value = sample.value_of(rule.metric)
            severity = rule.classify(value)
            if severity is None:
                continue
            findings.append(
                AnomalyFinding(
                    metric=rule.metric,
                    severity=severity,
                    observed_value=value,
                    normal_range=rule.normal_range,
                    timestamp=sample.timestamp,
                    confidence=rule.confidence,
                )
            )
        return findings


def _outside(value: float, below: float | None, above: float | None) -> bool:
    if below is not None and value < below:
        return True
    if above is not None and value > above:
        return True
    return False
