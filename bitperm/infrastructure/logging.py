import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import Processor

from bitperm.core.config import Settings, get_settings
from bitperm.infrastructure.logging_processors import (
    add_service_context,
    add_subject_context,
    format_exception_info,
    set_log_severity,
    set_service_context,
)


def configure_default_logging() -> None:
    """
    Route structlog through stdlib logging until setup_logging runs.

    Library callers that never configure logging get stdlib's defaults:
    debug and info are dropped, warnings reach stderr.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def setup_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    set_service_context(settings.app_name, settings.environment)
    timestamper = structlog.processors.TimeStamper(fmt="iso")

    shared_processors: list[Processor] = [
        # Add contextvars (actor, subject, correlation ID)
        structlog.contextvars.merge_contextvars,

        add_service_context,
        add_subject_context,

        structlog.processors.add_log_level,
        set_log_severity,

        format_exception_info,

        timestamper,
    ]

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level] + shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # stdout is reserved for command output
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.log_level))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


configure_default_logging()
