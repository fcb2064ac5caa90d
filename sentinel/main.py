import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sentinel.core.config import settings
from sentinel.core.logging import setup_logging
from sentinel.core.middleware import StructlogMiddleware
from sentinel.modules.alerts.router import router as alerts_router
from sentinel.modules.monitor.feed import run_feed
from sentinel.modules.monitor.service import MonitoringService, build_monitoring_service
from sentinel.modules.notifications.router import router as notifications_router
from sentinel.modules.responders.router import router as responders_router
from sentinel.modules.vitals.router import router as vitals_router
from sentinel.modules.vitals.simulator import SimulatedSampleSource
from sentinel.shared.exceptions import UnknownAlertId, UnknownResponderId

setup_logging()
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    monitor: MonitoringService = app.state.monitor
    feed_task: asyncio.Task | None = None

    # Startup
    log.info("monitor_started", simulator_enabled=settings.SIMULATOR_ENABLED)
    if settings.SIMULATOR_ENABLED:
        source = SimulatedSampleSource(
            subject_id=settings.SIMULATOR_SUBJECT_ID,
            device_id=settings.SIMULATOR_DEVICE_ID,
            critical_probability=settings.SIMULATOR_CRITICAL_PROBABILITY,
        )
        feed_task = asyncio.create_task(
            run_feed(monitor, source, settings.MONITOR_TICK_SECONDS)
        )

    yield

    # Shutdown
    if feed_task is not None:
        feed_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await feed_task
    await monitor.aclose()


async def _unknown_alert_handler(request: Request, exc: UnknownAlertId) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def _unknown_responder_handler(
    request: Request, exc: UnknownResponderId
) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


def create_app(monitor: MonitoringService | None = None) -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="""
    ## Vital Sentinel API

    * **Vitals**: push samples into the monitor and read recent ones
    * **Alerts**: review emergency alerts, acknowledge and resolve them
    * **Responders**: manage who is notified and on which channels
    * **Notifications**: tune critical thresholds, channels and debounce

    Every endpoint except `/health` requires an operator bearer token.
    """,
        version="0.1.0",
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )
    app.state.monitor = monitor or build_monitoring_service(settings)

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(StructlogMiddleware)

    app.add_exception_handler(UnknownAlertId, _unknown_alert_handler)
    app.add_exception_handler(UnknownResponderId, _unknown_responder_handler)

    app.include_router(
        vitals_router, prefix=f"{settings.API_V1_STR}/vitals", tags=["vitals"]
    )
    app.include_router(
        alerts_router, prefix=f"{settings.API_V1_STR}/alerts", tags=["alerts"]
    )
    app.include_router(
        responders_router,
        prefix=f"{settings.API_V1_STR}/responders",
        tags=["responders"],
    )
    app.include_router(
        notifications_router,
        prefix=f"{settings.API_V1_STR}/notifications",
        tags=["notifications"],
    )

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
