"""
Outbound delivery channels.

Every channel implements the same small capability: given a responder
address and a notification, deliver it or raise ``DeliveryFailure``. The
dispatcher fans out over whatever channels it was constructed with, so new
transports only need to satisfy ``NotificationChannel``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from sentinel.modules.alerts.models import EmergencyAlert
from sentinel.modules.alerts.schemas import AlertRead
from sentinel.shared.constants import Channel
from sentinel.shared.exceptions import DeliveryFailure

EMAIL_SUBJECT = "CRITICAL HEALTH ALERT"
WEBHOOK_SOURCE = "vital-sentinel"


@dataclass(frozen=True)
class Notification:
    alert: EmergencyAlert
    subject_id: str
    message: str


@dataclass(frozen=True)
class DeliveryOutcome:
    responder_id: str
    channel: Channel
    address: str
    ok: bool
    error: str | None = None


class NotificationChannel(Protocol):
    name: Channel

    async def send(self, address: str, notification: Notification) -> None:
        ...


class _HttpChannel:
    name: Channel

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def _post(self, url: str, address: str, payload: dict[str, Any]) -> None:
        try:
            response = await self._client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DeliveryFailure(self.name, address, str(exc) or type(exc).__name__) from exc


class EmailChannel(_HttpChannel):
    """Hands the message to an HTTP email relay (SendGrid/SES style bridge)."""

    name = Channel.EMAIL

    def __init__(self, client: httpx.AsyncClient, relay_url: str | None) -> None:
        super().__init__(client)
        self._relay_url = relay_url

    async def send(self, address: str, notification: Notification) -> None:
        if not self._relay_url:
            raise DeliveryFailure(self.name, address, "relay not configured")
        await self._post(
            self._relay_url,
            address,
            {"to": address, "subject": EMAIL_SUBJECT, "message": notification.message},
        )


class SmsChannel(_HttpChannel):
    name = Channel.SMS

    def __init__(self, client: httpx.AsyncClient, relay_url: str | None) -> None:
        super().__init__(client)
        self._relay_url = relay_url

    async def send(self, address: str, notification: Notification) -> None:
        if not self._relay_url:
            raise DeliveryFailure(self.name, address, "relay not configured")
        await self._post(
            self._relay_url, address, {"to": address, "message": notification.message}
        )


class WebhookChannel(_HttpChannel):
    """Posts the structured alert to the responder's own webhook URL."""

    name = Channel.WEBHOOK

    async def send(self, address: str, notification: Notification) -> None:
        alert = AlertRead.model_validate(notification.alert)
        payload = {
            "alert": alert.model_dump(by_alias=True, mode="json"),
            "userId": notification.subject_id,
            "timestamp": alert.timestamp.isoformat(),
            "source": WEBHOOK_SOURCE,
        }
        await self._post(address, address, payload)


def build_channels(
    client: httpx.AsyncClient,
    email_relay_url: str | None,
    sms_relay_url: str | None,
) -> list[NotificationChannel]:
    return [
        EmailChannel(client, email_relay_url),
        SmsChannel(client, sms_relay_url),
        WebhookChannel(client),
    ]
