"""Domain errors raised by the monitoring core and mapped to HTTP responses in ``main``."""

from sentinel.shared.constants import Channel


class SentinelError(Exception):
    """Base class for every error the monitoring core raises on purpose."""


class InvalidSample(SentinelError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"invalid vitals sample: {reason}")
        self.reason = reason


class DeliveryFailure(SentinelError):
    """A single channel send failed; never propagated past the dispatcher."""

    def __init__(self, channel: Channel, address: str, reason: str) -> None:
        super().__init__(f"{channel.value} delivery to {address} failed: {reason}")
        self.channel = channel
        self.address = address
        self.reason = reason


class UnknownAlertId(SentinelError):
    def __init__(self, alert_id: str) -> None:
        super().__init__(f"alert {alert_id} not found")
        self.alert_id = alert_id


class UnknownResponderId(SentinelError):
    def __init__(self, responder_id: str) -> None:
        super().__init__(f"responder {responder_id} not found")
        self.responder_id = responder_id
