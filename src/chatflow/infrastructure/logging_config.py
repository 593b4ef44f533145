"""Structlog configuration for the flow engine.

Events are rendered as JSON when ``CHATFLOW_ENV=production`` and as colored
console lines otherwise. Every event carries the service name, the
environment and, once a session is bound, the flow session id and mode.
"""

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

CHATFLOW_ENV = os.getenv("CHATFLOW_ENV", "development")
IS_PRODUCTION = CHATFLOW_ENV == "production"
LOG_LEVEL = os.getenv("CHATFLOW_LOG_LEVEL", "INFO" if IS_PRODUCTION else "DEBUG")

SERVICE_NAME = "chatflow-engine"


def add_service_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Tag events with the service and environment."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("environment", CHATFLOW_ENV)
    return event_dict


def configure_structlog(json_logs: bool | None = None, level: str | None = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        json_logs: Force JSON (True) or console (False) output. Defaults to
            JSON in production.
        level: Minimum stdlib level name. Defaults to ``CHATFLOW_LOG_LEVEL``.
    """
    json_logs = IS_PRODUCTION if json_logs is None else json_logs
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_service_context,
    ]

    if json_logs:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger bound to ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)


def bind_session(session_id: str, mode: str) -> None:
    """Bind an editor or visitor session to the logging context.

    Args:
        session_id: Identifier of the owning session
        mode: "editor", "preview" or "visitor"
    """
    structlog.contextvars.bind_contextvars(flow_session=session_id, flow_mode=mode)


def clear_session() -> None:
    """Drop the session keys bound by ``bind_session``."""
    structlog.contextvars.unbind_contextvars("flow_session", "flow_mode")


configure_structlog()
