#!/usr/bin/env python3
"""
Push vitals samples to a running Vital Sentinel service.

Usage:
    # Mint an operator token (uses SECRET_KEY from the environment / .env)
    python scripts/send_vitals.py token --operator ops-desk

    # Send one sample
    python scripts/send_vitals.py send --subject-id patient-7 --heart-rate 72 --blood-oxygen 98 --temperature 36.8

    # Send a burst of critical heart-rate readings to exercise alerting and debounce
    python scripts/send_vitals.py burst --subject-id patient-7 --count 3
"""

import asyncio
import json
from datetime import datetime, timezone

import httpx
import typer

from sentinel.core import security
from sentinel.core.config import settings

app = typer.Typer()

BASE_URL = "http://localhost:8000"


def _headers(token: str | None, operator: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token or security.create_access_token(operator)}"}


async def _post_sample(
    base_url: str, headers: dict[str, str], sample: dict[str, object]
) -> dict[str, object]:
    async with httpx.AsyncClient(base_url=base_url) as client:
        response = await client.post(f"{settings.API_V1_STR}/vitals/", json=sample, headers=headers)
        if response.status_code != 201:
            typer.echo(f"Sample rejected ({response.status_code}): {response.text}", err=True)
            raise typer.Exit(1)
        return response.json()


def _sample(subject_id: str, device_id: str | None, hr: float, spo2: float, temp: float) -> dict[str, object]:
    return {
        "subjectId": subject_id,
        "deviceId": device_id,
        "heartRate": hr,
        "bloodOxygen": spo2,
        "temperature": temp,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.command()
def token(operator: str = typer.Option("operator", help="Operator id stored in the token subject")):
    """Print a bearer token for the operator API."""
    typer.echo(security.create_access_token(operator))


@app.command()
def send(
    subject_id: str = typer.Option(..., help="Subject (patient) id"),
    heart_rate: float = typer.Option(72.0, help="Heart rate in bpm"),
    blood_oxygen: float = typer.Option(98.0, help="SpO2 percentage"),
    temperature: float = typer.Option(36.8, help="Temperature in Celsius"),
    device_id: str = typer.Option(None, help="Originating device id"),
    base_url: str = typer.Option(BASE_URL, help="Service base URL"),
    bearer: str = typer.Option(None, "--token", help="Existing operator token"),
    operator: str = typer.Option("operator", help="Operator id when minting a token"),
):
    """Send one sample and print the evaluation."""
    sample = _sample(subject_id, device_id, heart_rate, blood_oxygen, temperature)
    result = asyncio.run(_post_sample(base_url, _headers(bearer, operator), sample))
    typer.echo(json.dumps(result, indent=2))


@app.command()
def burst(
    subject_id: str = typer.Option(..., help="Subject (patient) id"),
    count: int = typer.Option(3, min=1, help="Number of critical samples"),
    interval: float = typer.Option(0.5, help="Seconds between samples"),
    device_id: str = typer.Option(None, help="Originating device id"),
    base_url: str = typer.Option(BASE_URL, help="Service base URL"),
    bearer: str = typer.Option(None, "--token", help="Existing operator token"),
    operator: str = typer.Option("operator", help="Operator id when minting a token"),
):
    """Send critical heart-rate samples; only the first should notify within the debounce window."""
    asyncio.run(_burst(subject_id, count, interval, device_id, base_url, _headers(bearer, operator)))


async def _burst(
    subject_id: str,
    count: int,
    interval: float,
    device_id: str | None,
    base_url: str,
    headers: dict[str, str],
) -> None:
    for i in range(1, count + 1):
        sample = _sample(subject_id, device_id, 145.0 + i * 5, 97.0, 36.9)
        result = await _post_sample(base_url, headers, sample)
        alert = result.get("alert") or {}
        typer.echo(
            f"#{i} heartRate={sample['heartRate']} alert={alert.get('type', '-')} "
            f"notified={result.get('notified')}"
        )
        await asyncio.sleep(interval)


if __name__ == "__main__":
    app()
