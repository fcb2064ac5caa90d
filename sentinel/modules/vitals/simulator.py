import math
import random
from typing import Any

from sentinel.shared.clock import Clock, utcnow
from sentinel.shared.constants import Metric
from sentinel.shared.schemas import to_camel

# Values pushed into each metric's critical band when an episode is injected
_EPISODE_VALUES: dict[Metric, tuple[float, float]] = {
    Metric.HEART_RATE: (142.0, 175.0),
    Metric.BLOOD_OXYGEN: (82.0, 89.0),
    Metric.TEMPERATURE: (38.6, 40.2),
}


class SimulatedSampleSource:
    """
    Wearable stand-in producing plausible resting vitals for one subject.

    Heart rate drifts on a slow sine wave around 80 bpm. With
    ``critical_probability`` > 0 a tick occasionally carries one metric in
    its critical band so the alerting path can be exercised end to end.
    """

    def __init__(
        self,
        subject_id: str,
        device_id: str | None = None,
        critical_probability: float = 0.0,
        rng: random.Random | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.subject_id = subject_id
        self.device_id = device_id
        self._critical_probability = critical_probability
        self._rng = rng or random.Random()
        self._clock = clock

    def next_payload(self) -> dict[str, Any]:
        now = self._clock()
        millis = now.timestamp() * 1000
        payload: dict[str, Any] = {
            "heartRate": 65 + self._rng.random() * 30 + math.sin(millis / 10000) * 10,
            "bloodOxygen": 96 + self._rng.random() * 4,
            "temperature": 36.5 + self._rng.random() * 1.5,
            "timestamp": now,
            "subjectId": self.subject_id,
            "deviceId": self.device_id,
        }
        if self._critical_probability and self._rng.random() < self._critical_probability:
            metric = self._rng.choice(list(Metric))
            low, high = _EPISODE_VALUES[metric]
            payload[to_camel(metric.value)] = self._rng.uniform(low, high)
        return payload
