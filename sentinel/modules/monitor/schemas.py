from pydantic import ConfigDict

from sentinel.modules.alerts.schemas import AlertRead, FindingRead
from sentinel.modules.vitals.schemas import VitalsSample
from sentinel.shared.schemas import CamelModel


class SampleEvaluationRead(CamelModel):
    """Result of running one sample through detection, alerting and notification."""

    model_config = ConfigDict(from_attributes=True)

    sample: VitalsSample
    findings: list[FindingRead]
    alert: AlertRead | None = None
    notified: bool
