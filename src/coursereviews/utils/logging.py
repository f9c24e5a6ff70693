"""Logging for the Course Reviews domain.

Every log line carries the domain name and, while a request is served, the
request id, method and path plus the acting user. Production emits JSON;
other environments get colored console output with Rich tracebacks.
"""

import logging
import os
import sys
import uuid

import structlog

DOMAIN_NAME = "coursereviews"

# Chatty third-party loggers that only matter when debugging them
QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")


def _add_domain(logger, method_name, event_dict):
    event_dict.setdefault("domain", DOMAIN_NAME)
    return event_dict


def _renderer(env: str):
    if env == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
    )


def configure_logging() -> None:
    """Route stdlib and structlog output to stdout at ``LOG_LEVEL`` (INFO by default)."""
    env = os.getenv("PROTEAN_ENV", "development").lower()
    level = os.getenv("LOG_LEVEL", "INFO").upper()

    handler = logging.StreamHandler(sys.stdout)
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            _add_domain,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(env),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request(method: str, path: str, request_id: str | None = None) -> str:
    """Start a fresh log context for one HTTP request and return its id."""
    structlog.contextvars.clear_contextvars()
    request_id = request_id or uuid.uuid4().hex
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)
    return request_id


def bind_actor(actor_id: str, role: str) -> None:
    """Attach the acting user to every log line emitted during the request."""
    structlog.contextvars.bind_contextvars(actor_id=actor_id, actor_role=role)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
