import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator, Callable

import pytest
from httpx import ASGITransport, AsyncClient

from sentinel.core import security
from sentinel.main import create_app
from sentinel.modules.alerts.detector import AnomalyDetector
from sentinel.modules.alerts.lifecycle import AlertLifecycleManager
from sentinel.modules.monitor.service import MonitoringService
from sentinel.modules.notifications.channels import Notification
from sentinel.modules.notifications.config import ChannelToggles, NotificationConfig
from sentinel.modules.notifications.dispatcher import NotificationDispatcher
from sentinel.modules.responders.models import Responder
from sentinel.modules.responders.service import ResponderDirectory
from sentinel.modules.vitals.schemas import VitalsSample
from sentinel.shared.constants import Channel, ResponderRole, Specialty
from sentinel.shared.exceptions import DeliveryFailure

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Manually advanced clock so debounce windows can be crossed without sleeping."""

    def __init__(self, start: datetime = BASE_TIME) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeChannel:
    """
    In-memory delivery channel.

    Records every successful send; addresses listed in ``fail_for`` raise
    DeliveryFailure, and ``delay`` simulates a slow transport.
    """

    def __init__(
        self,
        name: Channel,
        fail_for: set[str] | None = None,
        delay: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self.fail_for = fail_for or set()
        self.delay = delay
        self.error = error
        self.sent: list[tuple[str, Notification]] = []

    async def send(self, address: str, notification: Notification) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if address in self.fail_for:
            raise DeliveryFailure(self.name, address, "relay rejected message")
        self.sent.append((address, notification))

    @property
    def addresses(self) -> list[str]:
        return [address for address, _ in self.sent]


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def channels() -> dict[Channel, FakeChannel]:
    return {channel: FakeChannel(channel) for channel in Channel}


@pytest.fixture
def make_responder() -> Callable[..., Responder]:
    def _make_responder(**overrides: Any) -> Responder:
        data: dict[str, Any] = {
            "id": f"responder-{uuid.uuid4().hex[:8]}",
            "name": "Test Responder",
            "role": ResponderRole.DOCTOR,
            "email": "responder@healthcare.org",
            "phone": None,
            "webhook": None,
            "specialties": {Specialty.EMERGENCY},
            "is_active": True,
        }
        data.update(overrides)
        return Responder(**data)

    return _make_responder


@pytest.fixture
def make_sample() -> Callable[..., VitalsSample]:
    def _make_sample(**overrides: Any) -> VitalsSample:
        data: dict[str, Any] = {
            "heart_rate": 70.0,
            "blood_oxygen": 99.0,
            "temperature": 36.9,
            "timestamp": BASE_TIME,
            "subject_id": "patient-1",
            "device_id": "watch-1",
        }
        data.update(overrides)
        return VitalsSample(**data)

    return _make_sample


@pytest.fixture
def directory() -> ResponderDirectory:
    return ResponderDirectory()


@pytest.fixture
def notification_config() -> NotificationConfig:
    return NotificationConfig(
        channel_enabled=ChannelToggles(email=True, sms=True, webhook=True)
    )


@pytest.fixture
def dispatcher(
    directory: ResponderDirectory,
    channels: dict[Channel, FakeChannel],
    notification_config: NotificationConfig,
    clock: FrozenClock,
) -> NotificationDispatcher:
    return NotificationDispatcher(
        directory=directory,
        channels=list(channels.values()),
        config=notification_config,
        clock=clock,
        delivery_timeout_seconds=0.5,
    )


@pytest.fixture
def lifecycle(clock: FrozenClock) -> AlertLifecycleManager:
    return AlertLifecycleManager(history_limit=10, clock=clock)


@pytest.fixture
def monitor(
    directory: ResponderDirectory,
    dispatcher: NotificationDispatcher,
    lifecycle: AlertLifecycleManager,
) -> MonitoringService:
    return MonitoringService(
        detector=AnomalyDetector(),
        lifecycle=lifecycle,
        directory=directory,
        dispatcher=dispatcher,
        sample_history_limit=5,
        finding_history_limit=5,
    )


@pytest.fixture
async def client(monitor: MonitoringService) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=create_app(monitor))
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def auth_headers() -> dict[str, str]:
    token = security.create_access_token(subject="operator-1")
    return {"Authorization": f"Bearer {token}"}
