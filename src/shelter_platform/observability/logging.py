"""
shelter_platform.observability.logging

Structured logging configuration for the service.

Responsibilities:
- Route stdlib and structlog output through one structlog pipeline.
- Render JSON (default) or human-readable console lines (`log_format="console"`).
- Stamp every event with the service name and environment.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.typing import EventDict, Processor

LogFormat = Literal["json", "console"]

# Third-party loggers that are chatty at INFO; the access middleware covers requests.
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "aiosqlite")


def configure_logging(
    *,
    service_name: str,
    level: str,
    env: str = "prod",
    log_format: LogFormat = "json",
) -> None:
    log_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    renderer: Processor
    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _StaticFields(service=service_name, env=env),
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


class _StaticFields:
    def __init__(self, **fields: str) -> None:
        self._fields = fields

    def __call__(self, _: Any, __: str, event_dict: EventDict) -> EventDict:
        for key, value in self._fields.items():
            event_dict.setdefault(key, value)
        return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Request-scoped fields (request_id, path, method, user_id) come from
# contextvars bound in `observability.middleware` and `auth.deps`.
