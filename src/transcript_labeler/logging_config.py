"""Structured logging configuration using structlog.

Every event carries the service name plus whatever the request middleware
bound (request_id, caller_id). Production renders JSON lines; other
environments render a colored console view.

Two processors keep logs safe to ship:
- secrets (API key, raw principal header) are masked
- prompt and model-response fields are truncated
"""

import logging
import sys
from typing import Iterable

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "transcript-labeler"

SECRET_KEYS = frozenset({"api_key", "x-api-key", "anthropic_api_key", "principal_header"})
TEXT_KEYS = frozenset({"prompt", "content", "api_response", "error_text"})
MAX_TEXT_CHARS = 2000

NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "uvicorn.access")


def add_service_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def mask_secrets(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    for key in SECRET_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = "***"
    return event_dict


def truncate_text_fields(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Cap long prompt/response strings; the full text is never needed in logs."""
    for key in TEXT_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str) and len(value) > MAX_TEXT_CHARS:
            event_dict[key] = f"{value[:MAX_TEXT_CHARS]}... [{len(value) - MAX_TEXT_CHARS} more chars]"
    return event_dict


def _quiet(logger_names: Iterable[str], level: int = logging.WARNING) -> None:
    for name in logger_names:
        logging.getLogger(name).setLevel(level)


def configure_logging(log_level: str = "INFO", environment: str = "development") -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        environment: "production" selects the JSON renderer
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    json_output = environment.lower() == "production"

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_name,
        mask_secrets,
        truncate_text_fields,
    ]
    if json_output:
        shared.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: Processor = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=True)
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    # Request logging is done by RequestTracingMiddleware
    _quiet(NOISY_LOGGERS)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=logging.getLevelName(level),
        renderer="json" if json_output else "console",
    )
