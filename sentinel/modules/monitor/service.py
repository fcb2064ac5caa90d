from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque

import httpx
import structlog

from sentinel.core.config import Settings
from sentinel.modules.alerts.detector import AnomalyDetector
from sentinel.modules.alerts.lifecycle import AlertLifecycleManager
from sentinel.modules.alerts.models import AnomalyFinding, EmergencyAlert
from sentinel.modules.notifications.channels import build_channels
from sentinel.modules.notifications.config import load_notification_config
from sentinel.modules.notifications.dispatcher import NotificationDispatcher
from sentinel.modules.responders.models import DEFAULT_RESPONDERS
from sentinel.modules.responders.service import ResponderDirectory
from sentinel.modules.vitals.schemas import VitalsSample, parse_sample
from sentinel.shared.clock import Clock, utcnow

log = structlog.get_logger()


@dataclass
class SampleEvaluation:
    sample: VitalsSample
    findings: list[AnomalyFinding]
    alert: EmergencyAlert | None
    notified: bool


class MonitoringService:
    """
    Evaluation pipeline for one sample at a time.

    Owns the detector, alert lifecycle, responder directory and dispatcher,
    plus the bounded sample and finding histories. Every collaborator is
    injected so tests can swap channels and clocks.
    """

    def __init__(
        self,
        detector: AnomalyDetector,
        lifecycle: AlertLifecycleManager,
        directory: ResponderDirectory,
        dispatcher: NotificationDispatcher,
        sample_history_limit: int = 50,
        finding_history_limit: int = 20,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.detector = detector
        self.lifecycle = lifecycle
        self.directory = directory
        self.dispatcher = dispatcher
        self._samples: Deque[VitalsSample] = deque(maxlen=sample_history_limit)
        self._findings: Deque[AnomalyFinding] = deque(maxlen=finding_history_limit)
        self._http_client = http_client

    async def process_sample(self, sample: VitalsSample) -> SampleEvaluation:
        findings = self.detector.detect(sample)
        self._samples.append(sample)
        self._findings.extend(findings)
        if findings:
            log.info(
                "anomalies_detected",
                subject_id=sample.subject_id,
                findings=[
                    {"metric": f.metric.value, "severity": f.severity.value}
                    for f in findings
                ],
            )

        alert = self.lifecycle.raise_from_findings(sample, findings)
        notified = await self.dispatcher.check_and_notify(sample, sample.subject_id)
        return SampleEvaluation(
            sample=sample, findings=findings, alert=alert, notified=notified
        )

    async def ingest(self, payload: dict[str, Any]) -> SampleEvaluation:
        """Validate a raw feed payload and evaluate it; raises InvalidSample."""
        return await self.process_sample(parse_sample(payload))

    def latest_sample(self) -> VitalsSample | None:
        return self._samples[-1] if self._samples else None

    def sample_history(self, subject_id: str | None = None) -> list[VitalsSample]:
        if subject_id is None:
            return list(self._samples)
        return [s for s in self._samples if s.subject_id == subject_id]

    def recent_findings(self) -> list[AnomalyFinding]:
        return list(self._findings)

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None


def build_monitoring_service(settings: Settings, clock: Clock = utcnow) -> MonitoringService:
    """Wire the production pipeline from settings."""
    http_client = httpx.AsyncClient(timeout=settings.DELIVERY_TIMEOUT_SECONDS)
    directory = ResponderDirectory(DEFAULT_RESPONDERS)
    dispatcher = NotificationDispatcher(
        directory=directory,
        channels=build_channels(
            http_client,
            email_relay_url=settings.EMAIL_RELAY_URL,
            sms_relay_url=settings.SMS_RELAY_URL,
        ),
        config=load_notification_config(settings.NOTIFICATION_CONFIG_PATH),
        clock=clock,
        delivery_timeout_seconds=settings.DELIVERY_TIMEOUT_SECONDS,
        round_history_limit=settings.ROUND_HISTORY_LIMIT,
    )
    return MonitoringService(
        detector=AnomalyDetector(),
        lifecycle=AlertLifecycleManager(history_limit=settings.ALERT_HISTORY_LIMIT, clock=clock),
        directory=directory,
        dispatcher=dispatcher,
        sample_history_limit=settings.SAMPLE_HISTORY_LIMIT,
        finding_history_limit=settings.FINDING_HISTORY_LIMIT,
        http_client=http_client,
    )
