"""HTTP endpoints for dispatcher configuration and notification history."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from sentinel.modules.monitor.service import MonitoringService
from sentinel.modules.notifications.config import NotificationConfig, NotificationConfigUpdate
from sentinel.modules.notifications.schemas import NotificationRoundRead
from sentinel.shared import deps

router = APIRouter()


@router.get("/config", response_model=NotificationConfig, summary="Get notification config")
async def read_config(
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> NotificationConfig:
    return monitor.dispatcher.config


@router.patch("/config", response_model=NotificationConfig, summary="Update notification config")
async def update_config(
    update: NotificationConfigUpdate,
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> NotificationConfig:
    """Merge the supplied fields into the current config; omitted fields are kept."""
    try:
        return monitor.dispatcher.update_config(update.as_patch())
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[{"loc": error["loc"], "msg": error["msg"]} for error in exc.errors()],
        ) from None


@router.get(
    "/rounds", response_model=List[NotificationRoundRead], summary="Recent notification rounds"
)
async def read_rounds(
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> List[NotificationRoundRead]:
    return [
        NotificationRoundRead.model_validate(r) for r in monitor.dispatcher.recent_rounds()
    ]
