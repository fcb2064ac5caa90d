import asyncio
from typing import Any, Protocol

import structlog

from sentinel.modules.monitor.service import MonitoringService
from sentinel.shared.exceptions import InvalidSample

log = structlog.get_logger()


class SampleSource(Protocol):
    def next_payload(self) -> dict[str, Any]:
        ...


async def run_tick(monitor: MonitoringService, source: SampleSource) -> bool:
    """Pull one payload from the source and evaluate it; False when it was rejected."""
    try:
        await monitor.ingest(source.next_payload())
    except InvalidSample as exc:
        log.warning("sample_rejected", reason=exc.reason)
        return False
    return True


async def run_feed(
    monitor: MonitoringService, source: SampleSource, interval_seconds: float
) -> None:
    """Tick forever until cancelled; a failing tick is logged and the loop continues."""
    log.info("sample_feed_started", interval_seconds=interval_seconds)
    try:
        while True:
            try:
                await run_tick(monitor, source)
            except Exception:
                log.exception("sample_feed_tick_failed")
            await asyncio.sleep(interval_seconds)
    except asyncio.CancelledError:
        log.info("sample_feed_stopped")
        raise
