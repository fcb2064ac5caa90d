from datetime import timedelta

import pytest
from fastapi import status
from httpx import AsyncClient
from jose import jwt

from sentinel.core import security
from sentinel.core.config import settings


def test_access_token_round_trip() -> None:
    token = security.create_access_token("operator-1")

    claims = security.decode_access_token(token)

    assert claims["sub"] == "operator-1"
    assert claims["scope"] == security.OPERATOR_SCOPE
    assert "exp" in claims


def test_expired_token_is_rejected() -> None:
    token = security.create_access_token("operator-1", expires_delta=timedelta(seconds=-5))

    assert security.decode_access_token(token) is None


def test_token_signed_with_other_key_is_rejected() -> None:
    token = jwt.encode({"sub": "intruder", "scope": "operator"}, "other-key", algorithm=security.ALGORITHM)

    assert security.decode_access_token(token) is None


@pytest.mark.asyncio
async def test_health_is_public(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_wrong_scope_is_forbidden(client: AsyncClient) -> None:
    token = security.create_access_token("viewer-1", scope="viewer")

    response = await client.get(
        "/api/v1/alerts/", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Not enough permissions"


@pytest.mark.asyncio
async def test_garbage_token_is_forbidden(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/alerts/", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Could not validate credentials"


@pytest.mark.asyncio
async def test_token_without_subject_is_forbidden(client: AsyncClient) -> None:
    token = jwt.encode({"scope": "operator"}, settings.SECRET_KEY, algorithm=security.ALGORITHM)

    response = await client.get(
        "/api/v1/alerts/", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_responses_carry_request_id(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
