"""Centralized logging utilities for the voice-stress analyzer."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import IO, Any

import structlog


def _numeric_level(level: str) -> int:
    value = logging.getLevelName((level or "").upper())
    if isinstance(value, int):
        return value
    return logging.INFO


Processor = Callable[[Any, str, dict[str, Any]], dict[str, Any]]


def _add_service(service_name: str | None) -> Processor:
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        if service_name and "service" not in event_dict:
            event_dict["service"] = service_name
        return event_dict

    return processor


def configure_logging(
    level: str = "INFO",
    *,
    json_logs: bool = True,
    service_name: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure structlog + stdlib logging for the process.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Whether to output JSON formatted logs (True) or console format (False)
        service_name: Optional service name to include in all log messages
        stream: Optional output stream for logs (defaults to sys.stdout).
                Useful for testing to capture log output to StringIO.

    Example:
        configure_logging(level="INFO", json_logs=True, service_name="voice-stress")
    """

    numeric_level = _numeric_level(level)
    output_stream = stream if stream is not None else sys.stdout

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        _add_service(service_name),
        structlog.processors.dict_tracebacks,
    ]
    if json_logs:
        formatter_processors = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ]
    else:
        formatter_processors = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    handler = logging.StreamHandler(output_stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=formatter_processors,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)
    logging.captureWarnings(True)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(
    name: str,
    *,
    session_id: str | None = None,
    service_name: str | None = None,
) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound with standard metadata."""

    logger = structlog.stdlib.get_logger(name)
    if session_id:
        logger = logger.bind(session_id=session_id)
    if service_name:
        logger = logger.bind(service=service_name)
    return logger


@contextmanager
def session_context(
    session_id: str | None,
) -> Generator[structlog.stdlib.BoundLogger, None, None]:
    """Bind a session id into structlog contextvars for the enclosed block.

    The previous binding (if any) is restored on exit, so nested sessions
    behave like a stack.

    Example:
        with session_context("session_42") as logger:
            logger.info("session.tick")
    """
    if session_id:
        previous_session_id = structlog.contextvars.get_contextvars().get(
            "session_id"
        )
        structlog.contextvars.bind_contextvars(session_id=session_id)

    logger = structlog.stdlib.get_logger()

    try:
        yield logger
    finally:
        if session_id:
            if previous_session_id is not None:
                structlog.contextvars.bind_contextvars(session_id=previous_session_id)
            else:
                structlog.contextvars.unbind_contextvars("session_id")


__all__ = [
    "configure_logging",
    "get_logger",
    "session_context",
]
