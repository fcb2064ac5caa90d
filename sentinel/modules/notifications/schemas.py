from pydantic import ConfigDict

from sentinel.modules.alerts.schemas import AlertRead
from sentinel.shared.constants import Channel, Metric
from sentinel.shared.schemas import CamelModel


class DeliveryOutcomeRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    responder_id: str
    channel: Channel
    address: str
    ok: bool
    error: str | None = None


class NotificationRoundRead(CamelModel):
    """One completed notification round and the outcome of every attempt in it."""

    model_config = ConfigDict(from_attributes=True)

    alert: AlertRead
    subject_id: str
    critical_metrics: list[Metric]
    responder_ids: list[str]
    outcomes: list[DeliveryOutcomeRead]
    delivered: int
    failed: int
