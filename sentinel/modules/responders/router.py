"""HTTP endpoints for managing the responder roster."""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from sentinel.modules.monitor.service import MonitoringService
from sentinel.modules.responders.models import Responder, ResponderUpsert
from sentinel.shared import deps

router = APIRouter()


@router.get("/", response_model=List[Responder], summary="List responders")
async def read_responders(
    active_only: bool = False,
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> List[Responder]:
    if active_only:
        return monitor.directory.list_active()
    return monitor.directory.list_all()


@router.put("/{responder_id}", response_model=Responder, summary="Add or replace a responder")
async def upsert_responder(
    responder_id: str,
    responder_in: ResponderUpsert,
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> Responder:
    return monitor.directory.add(responder_in.to_responder(responder_id))


@router.delete(
    "/{responder_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a responder",
)
async def delete_responder(
    responder_id: str,
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> Response:
    """Remove a responder; removing an unknown id is a no-op."""
    monitor.directory.remove(responder_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{responder_id}/toggle", response_model=Responder, summary="Toggle active flag")
async def toggle_responder(
    responder_id: str,
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> Responder:
    return monitor.directory.toggle_active(responder_id)
