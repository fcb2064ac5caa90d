from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from sentinel.modules.vitals.schemas import VitalsSample, parse_sample
from sentinel.shared.constants import Metric
from sentinel.shared.exceptions import InvalidSample

PAYLOAD = {
    "heartRate": 72,
    "bloodOxygen": 98.5,
    "temperature": 36.7,
    "subjectId": "patient-1",
    "deviceId": "watch-1",
}


def test_parse_camel_case_payload() -> None:
    sample = parse_sample({**PAYLOAD, "timestamp": "2024-01-01T12:00:00Z"})

    assert sample.heart_rate == 72
    assert sample.blood_oxygen == 98.5
    assert sample.device_id == "watch-1"
    assert sample.timestamp == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)


def test_epoch_milliseconds_and_seconds_are_accepted() -> None:
    expected = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)

    assert parse_sample({**PAYLOAD, "timestamp": 1704110400000}).timestamp == expected
    assert parse_sample({**PAYLOAD, "timestamp": 1704110400}).timestamp == expected


def test_naive_timestamp_is_treated_as_utc() -> None:
    sample = parse_sample({**PAYLOAD, "timestamp": "2024-01-01T12:00:00"})

    assert sample.timestamp.tzinfo == timezone.utc


def test_offset_timestamp_is_normalised_to_utc() -> None:
    sample = parse_sample({**PAYLOAD, "timestamp": "2024-01-01T14:00:00+02:00"})

    assert sample.timestamp == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
    assert sample.timestamp.utcoffset() == timedelta(0)


def test_missing_timestamp_defaults_to_now() -> None:
    before = datetime.now(timezone.utc)

    sample = parse_sample(PAYLOAD)

    assert before <= sample.timestamp <= datetime.now(timezone.utc)


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("heartRate", -0.1),
        ("heartRate", -5),
        ("heartRate", 301),
        ("heartRate", float("nan")),
        ("bloodOxygen", 100.1),
        ("bloodOxygen", -1),
        ("bloodOxygen", float("inf")),
        ("temperature", 19.9),
        ("temperature", 45.1),
        ("subjectId", ""),
        ("timestamp", 1e30),
        ("timestamp", -1e30),
        ("timestamp", 10**25),
        ("timestamp", float("inf")),
        ("timestamp", float("nan")),
    ],
)
def test_implausible_values_are_rejected(field, value) -> None:
    with pytest.raises(InvalidSample) as exc_info:
        parse_sample({**PAYLOAD, field: value})

    assert isinstance(exc_info.value.__cause__, ValidationError)


def test_unrepresentable_timestamp_reason_names_the_field() -> None:
    with pytest.raises(InvalidSample) as exc_info:
        parse_sample({**PAYLOAD, "timestamp": 1e30})

    assert exc_info.value.reason.startswith("timestamp:")
    assert "timestamp out of range" in exc_info.value.reason


def test_flatline_heart_rate_is_accepted() -> None:
    assert parse_sample({**PAYLOAD, "heartRate": 0}).heart_rate == 0


def test_missing_field_reason_names_the_field() -> None:
    payload = dict(PAYLOAD)
    del payload["temperature"]

    with pytest.raises(InvalidSample) as exc_info:
        parse_sample(payload)

    assert exc_info.value.reason.startswith("temperature:")


def test_value_of_reads_each_metric(make_sample) -> None:
    sample = make_sample(heart_rate=80, blood_oxygen=97, temperature=37.0)

    assert [sample.value_of(m) for m in Metric] == [80, 97, 37.0]


def test_samples_are_immutable(make_sample) -> None:
    sample = make_sample()

    with pytest.raises(ValidationError):
        sample.heart_rate = 10


def test_serialises_camel_case(make_sample) -> None:
    dumped = make_sample().model_dump(by_alias=True)

    assert set(dumped) == {"heartRate", "bloodOxygen", "temperature", "timestamp", "subjectId", "deviceId"}


def test_constructs_by_field_name() -> None:
    sample = VitalsSample(heart_rate=60, blood_oxygen=95, temperature=36.5, subject_id="p")

    assert sample.device_id is None
