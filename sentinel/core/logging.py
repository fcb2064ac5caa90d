import logging
import logging.config
import sys
from typing import Any, Dict, List

import sentry_sdk
import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from sentinel.core.config import settings

# Third-party loggers routed through the structlog formatter, with their floor level
_ROUTED_LOGGERS: Dict[str, str] = {
    "uvicorn": "INFO",
    "uvicorn.error": "INFO",
    "uvicorn.access": "INFO",
    "httpx": "WARNING",
}


def add_service_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Stamp every record with the service name and deployment environment."""
    event_dict.setdefault("service", settings.PROJECT_NAME)
    event_dict.setdefault("environment", settings.ENVIRONMENT)
    return event_dict


def _renderer() -> Processor:
    if settings.ENVIRONMENT in ["local", "dev"]:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def _stdlib_config(shared_processors: List[Processor]) -> Dict[str, Any]:
    handler = {"handlers": ["default"], "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": _renderer(),
                "foreign_pre_chain": shared_processors,
            },
        },
        "handlers": {
            "default": {
                "level": settings.LOG_LEVEL,
                "class": "logging.StreamHandler",
                "stream": sys.stdout,
                "formatter": "default",
            },
        },
        "loggers": {
            "": {"handlers": ["default"], "level": settings.LOG_LEVEL, "propagate": True},
            **{name: {**handler, "level": level} for name, level in _ROUTED_LOGGERS.items()},
        },
    }


def setup_logging() -> None:
    """
    Configure structured logging for the monitor.

    Local and dev environments get the console renderer, everything else JSON.
    Records from uvicorn and httpx pass through the same processors, and
    Sentry is initialised when a DSN is configured.
    """
    shared_processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_context,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.SENTRY_DSN:
        sentry_sdk.init(
            dsn=settings.SENTRY_DSN,
            environment=settings.ENVIRONMENT,
            traces_sample_rate=1.0 if settings.ENVIRONMENT == "local" else 0.1,
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.config.dictConfig(_stdlib_config(shared_processors))
