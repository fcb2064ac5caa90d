from __future__ import annotations

import asyncio
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Deque, Sequence

import structlog

from sentinel.modules.alerts.models import EmergencyAlert
from sentinel.modules.notifications.channels import (
    DeliveryOutcome,
    Notification,
    NotificationChannel,
)
from sentinel.modules.notifications.config import NotificationConfig
from sentinel.modules.notifications.messages import format_alert_message
from sentinel.modules.responders.models import Responder
from sentinel.modules.responders.service import ResponderDirectory
from sentinel.modules.vitals.schemas import VitalsSample
from sentinel.shared.clock import Clock, utcnow
from sentinel.shared.constants import (
    ALERT_TYPE_BY_METRIC,
    AlertSeverity,
    Metric,
    Specialty,
)
from sentinel.shared.exceptions import DeliveryFailure

log = structlog.get_logger()

SPECIALTIES_BY_METRIC: dict[Metric, frozenset[Specialty]] = {
    Metric.HEART_RATE: frozenset({Specialty.CARDIAC, Specialty.EMERGENCY}),
    Metric.BLOOD_OXYGEN: frozenset({Specialty.RESPIRATORY, Specialty.EMERGENCY}),
    Metric.TEMPERATURE: frozenset({Specialty.EMERGENCY, Specialty.GENERAL}),
}


@dataclass
class NotificationRound:
    alert: EmergencyAlert
    subject_id: str
    critical_metrics: list[Metric]
    responder_ids: list[str]
    outcomes: list[DeliveryOutcome] = field(default_factory=list)

    @property
    def delivered(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.delivered


class NotificationDispatcher:
    """
    Gate critical samples on configurable thresholds and a per-subject
    debounce window, then fan a notification out to every matching responder
    on every enabled channel.

    The debounce map holds one entry per subject ever notified. It is not
    evicted: subjects are the registered patients, so it stays small.
    """

    def __init__(
        self,
        directory: ResponderDirectory,
        channels: Sequence[NotificationChannel],
        config: NotificationConfig | None = None,
        clock: Clock = utcnow,
        delivery_timeout_seconds: float = 10.0,
        round_history_limit: int = 20,
    ) -> None:
        self._directory = directory
        self._channels = list(channels)
        self._config = config or NotificationConfig()
        self._clock = clock
        self._delivery_timeout = delivery_timeout_seconds
        self._last_sent: dict[str, datetime] = {}
        self._rounds: Deque[NotificationRound] = deque(maxlen=round_history_limit)

    @property
    def config(self) -> NotificationConfig:
        return self._config

    def update_config(self, patch: dict[str, Any]) -> NotificationConfig:
        self._config = self._config.merged(patch)
        log.info("notification_config_updated", fields=sorted(patch))
        return self._config

    def recent_rounds(self) -> list[NotificationRound]:
        return list(self._rounds)

    def last_notified(self, subject_id: str) -> datetime | None:
        return self._last_sent.get(subject_id)

    def critical_metrics(self, sample: VitalsSample) -> list[Metric]:
        thresholds = self._config.critical_thresholds
        return [
            metric
            for metric in Metric
            if thresholds.is_critical(metric, sample.value_of(metric))
        ]

    async def check_and_notify(
        self, sample: VitalsSample, subject_id: str | None = None
    ) -> bool:
        """Run one notification round for a sample; True iff a round was sent."""
        subject = subject_id or sample.subject_id
        critical = self.critical_metrics(sample)
        if not critical:
            return False

        now = self._clock()
        last_sent = self._last_sent.get(subject)
        if last_sent is not None:
            elapsed = (now - last_sent).total_seconds()
            if elapsed < self._config.debounce_seconds:
                log.info(
                    "notification_suppressed",
                    subject_id=subject,
                    reason="debounce",
                    elapsed_seconds=elapsed,
                    debounce_seconds=self._config.debounce_seconds,
                )
                return False

        alert = EmergencyAlert(
            id=uuid.uuid4().hex,
            type=ALERT_TYPE_BY_METRIC[critical[0]],
            severity=AlertSeverity.EMERGENCY,
            vitals=sample,
            timestamp=now,
            subject_id=subject,
        )
        needed: set[Specialty] = set()
        for metric in critical:
            needed |= SPECIALTIES_BY_METRIC[metric]
        responders = self._directory.select_for(needed)

        # Gate on detection, not on delivery outcome
        self._last_sent[subject] = now

        notification = Notification(
            alert=alert, subject_id=subject, message=format_alert_message(alert, subject)
        )
        outcomes = await self._fan_out(responders, notification)

        notification_round = NotificationRound(
            alert=alert,
            subject_id=subject,
            critical_metrics=critical,
            responder_ids=[r.id for r in responders],
            outcomes=outcomes,
        )
        self._rounds.appendleft(notification_round)
        log.warning(
            "notification_round_completed",
            subject_id=subject,
            alert_type=alert.type.value,
            critical_metrics=[metric.value for metric in critical],
            responders=len(responders),
            delivered=notification_round.delivered,
            failed=notification_round.failed,
        )
        return True

    async def _fan_out(
        self, responders: list[Responder], notification: Notification
    ) -> list[DeliveryOutcome]:
        attempts = []
        for responder in responders:
            for channel in self._channels:
                if not self._config.channel_enabled.is_enabled(channel.name):
                    continue
                address = responder.address_for(channel.name)
                if not address:
                    continue
                attempts.append(self._deliver(responder, channel, address, notification))
        if not attempts:
            return []
        return list(await asyncio.gather(*attempts))

    async def _deliver(
        self,
        responder: Responder,
        channel: NotificationChannel,
        address: str,
        notification: Notification,
    ) -> DeliveryOutcome:
        try:
            await asyncio.wait_for(
                channel.send(address, notification), timeout=self._delivery_timeout
            )
        except DeliveryFailure as exc:
            error = exc.reason
        except asyncio.TimeoutError:
            error = f"timed out after {self._delivery_timeout}s"
        except Exception as exc:
            # any channel error stays isolated to this attempt
            error = str(exc) or type(exc).__name__
        else:
            log.info(
                "notification_delivered",
                responder_id=responder.id,
                channel=channel.name.value,
            )
            return DeliveryOutcome(
                responder_id=responder.id, channel=channel.name, address=address, ok=True
            )

        log.warning(
            "delivery_failed",
            responder_id=responder.id,
            channel=channel.name.value,
            address=address,
            error=error,
        )
        return DeliveryOutcome(
            responder_id=responder.id,
            channel=channel.name,
            address=address,
            ok=False,
            error=error,
        )
