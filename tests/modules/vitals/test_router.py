"""API tests for sample ingestion and recent-sample reads."""

import pytest
from fastapi import status
from httpx import AsyncClient

from sentinel.shared.constants import Specialty

SAMPLE_BODY = {
    "heartRate": 145,
    "bloodOxygen": 98,
    "temperature": 36.8,
    "timestamp": "2024-01-01T12:00:00Z",
    "subjectId": "patient-1",
    "deviceId": "watch-1",
}


@pytest.mark.asyncio
async def test_post_sample_returns_evaluation(
    client: AsyncClient, directory, make_responder, auth_headers
) -> None:
    directory.add(make_responder(specialties={Specialty.CARDIAC}))

    response = await client.post("/api/v1/vitals/", json=SAMPLE_BODY, headers=auth_headers)

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["sample"]["heartRate"] == 145
    assert [f["metric"] for f in body["findings"]] == ["heart_rate"]
    assert body["findings"][0]["severity"] == "critical"
    assert body["alert"]["type"] == "cardiac_anomaly"
    assert body["notified"] is True


@pytest.mark.asyncio
async def test_post_normal_sample(client: AsyncClient, auth_headers) -> None:
    response = await client.post(
        "/api/v1/vitals/",
        json={**SAMPLE_BODY, "heartRate": 70, "bloodOxygen": 99, "temperature": 36.9},
        headers=auth_headers,
    )

    body = response.json()
    assert body["findings"] == []
    assert body["alert"] is None
    assert body["notified"] is False


@pytest.mark.asyncio
async def test_post_implausible_sample_is_rejected(client: AsyncClient, auth_headers) -> None:
    response = await client.post(
        "/api/v1/vitals/", json={**SAMPLE_BODY, "heartRate": 400}, headers=auth_headers
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_post_unrepresentable_timestamp_is_rejected(client: AsyncClient, auth_headers) -> None:
    response = await client.post(
        "/api/v1/vitals/", json={**SAMPLE_BODY, "timestamp": 1e30}, headers=auth_headers
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_latest_is_404_until_a_sample_arrives(client: AsyncClient, auth_headers) -> None:
    empty = await client.get("/api/v1/vitals/latest", headers=auth_headers)
    assert empty.status_code == status.HTTP_404_NOT_FOUND

    await client.post("/api/v1/vitals/", json=SAMPLE_BODY, headers=auth_headers)

    latest = await client.get("/api/v1/vitals/latest", headers=auth_headers)
    assert latest.status_code == status.HTTP_200_OK
    assert latest.json()["subjectId"] == "patient-1"


@pytest.mark.asyncio
async def test_history_filters_by_subject(client: AsyncClient, auth_headers) -> None:
    await client.post("/api/v1/vitals/", json=SAMPLE_BODY, headers=auth_headers)
    await client.post(
        "/api/v1/vitals/", json={**SAMPLE_BODY, "subjectId": "patient-2"}, headers=auth_headers
    )

    everyone = await client.get("/api/v1/vitals/history", headers=auth_headers)
    one = await client.get("/api/v1/vitals/history?subject_id=patient-2", headers=auth_headers)

    assert [s["subjectId"] for s in everyone.json()] == ["patient-1", "patient-2"]
    assert [s["subjectId"] for s in one.json()] == ["patient-2"]


@pytest.mark.asyncio
async def test_ingest_requires_token(client: AsyncClient) -> None:
    response = await client.post("/api/v1/vitals/", json=SAMPLE_BODY)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
