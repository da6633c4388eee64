"""Custom structlog processors for enhanced logging"""

import socket
import sys
import traceback
from typing import Dict

from structlog.types import EventDict, WrappedLogger
from structlog.contextvars import get_contextvars

# Filled once by setup_logging
_service_context: Dict[str, str] = {}


def set_service_context(service: str, environment: str) -> None:
    """Fix the service fields stamped on every log entry"""
    _service_context.clear()
    _service_context["service"] = service
    _service_context["environment"] = environment

    try:
        _service_context["hostname"] = socket.gethostname()
    except OSError:
        pass


def add_service_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level context to logs"""
    for key, value in _service_context.items():
        event_dict.setdefault(key, value)

    return event_dict


def add_subject_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add actor/subject identifiers bound through contextvars"""
    context = get_contextvars()

    # Authorization checks run on behalf of an actor against a target subject
    for key in ("correlation_id", "actor_id", "subject_id"):
        if key in context:
            event_dict.setdefault(key, context[key])

    return event_dict


def format_exception_info(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Format exception information for better readability"""
    exc_info = event_dict.pop("exc_info", None)
    if exc_info:
        if isinstance(exc_info, tuple):
            exc_type, exc_value, exc_tb = exc_info
        elif isinstance(exc_info, BaseException):
            exc_type, exc_value, exc_tb = type(exc_info), exc_info, exc_info.__traceback__
        else:
            exc_type, exc_value, exc_tb = sys.exc_info()

        if exc_type:
            event_dict["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb)
            }

    return event_dict


def set_log_severity(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Set proper severity field for log aggregation systems"""
    level_map = {
        "debug": "DEBUG",
        "info": "INFO",
        "warning": "WARNING",
        "error": "ERROR",
        "critical": "CRITICAL"
    }

    if "level" in event_dict:
        event_dict["severity"] = level_map.get(event_dict["level"], "INFO")

    return event_dict
