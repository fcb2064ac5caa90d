"""HTTP endpoints for alert history and operator lifecycle actions."""

from typing import List

import structlog
from fastapi import APIRouter, Depends

from sentinel.modules.alerts.schemas import AlertRead, FindingRead
from sentinel.modules.monitor.service import MonitoringService
from sentinel.shared import deps
from sentinel.shared.constants import AlertStatus

router = APIRouter()
log = structlog.get_logger()


@router.get("/", response_model=List[AlertRead], summary="List recent alerts")
async def read_alerts(
    status: AlertStatus | None = None,
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> List[AlertRead]:
    """Return the bounded alert history, newest first, optionally filtered by status."""
    return [AlertRead.model_validate(a) for a in monitor.lifecycle.list_alerts(status)]


@router.get("/findings", response_model=List[FindingRead], summary="List recent findings")
async def read_findings(
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> List[FindingRead]:
    return [FindingRead.model_validate(f) for f in monitor.recent_findings()]


@router.get("/{alert_id}", response_model=AlertRead, summary="Get one alert")
async def read_alert(
    alert_id: str,
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> AlertRead:
    return AlertRead.model_validate(monitor.lifecycle.get(alert_id))


@router.post("/{alert_id}/acknowledge", response_model=AlertRead, summary="Acknowledge an alert")
async def acknowledge_alert(
    alert_id: str,
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> AlertRead:
    """
    Mark an active alert as acknowledged.

    Acknowledging an alert that is already acknowledged or resolved leaves it
    unchanged. Unknown ids return 404.
    """
    alert = monitor.lifecycle.acknowledge(alert_id)
    log.info("alert_acknowledge_requested", alert_id=alert_id, operator=operator)
    return AlertRead.model_validate(alert)


@router.post("/{alert_id}/resolve", response_model=AlertRead, summary="Resolve an alert")
async def resolve_alert(
    alert_id: str,
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> AlertRead:
    """Close an alert. Resolving twice is a no-op; unknown ids return 404."""
    alert = monitor.lifecycle.resolve(alert_id)
    log.info("alert_resolve_requested", alert_id=alert_id, operator=operator)
    return AlertRead.model_validate(alert)
