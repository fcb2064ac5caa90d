"""HTTP endpoints for pushing samples into the monitor and reading recent ones."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from sentinel.modules.monitor.schemas import SampleEvaluationRead
from sentinel.modules.monitor.service import MonitoringService
from sentinel.modules.vitals.schemas import VitalsSample
from sentinel.shared import deps

router = APIRouter()


@router.post(
    "/",
    response_model=SampleEvaluationRead,
    summary="Ingest a vitals sample",
    status_code=status.HTTP_201_CREATED,
)
async def ingest_sample(
    sample: VitalsSample,
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> SampleEvaluationRead:
    """Run one sample through detection, alerting and notification."""
    evaluation = await monitor.process_sample(sample)
    return SampleEvaluationRead.model_validate(evaluation)


@router.get("/latest", response_model=VitalsSample, summary="Most recent sample")
async def read_latest_sample(
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> VitalsSample:
    sample = monitor.latest_sample()
    if sample is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No samples yet")
    return sample


@router.get("/history", response_model=List[VitalsSample], summary="Recent samples")
async def read_sample_history(
    subject_id: Optional[str] = None,
    operator: str = Depends(deps.get_current_operator),
    monitor: MonitoringService = Depends(deps.get_monitor),
) -> List[VitalsSample]:
    """Return the bounded rolling sample history, oldest first."""
    return monitor.sample_history(subject_id)
