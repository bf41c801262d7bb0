"""Structured logging for the dashboard engine using structlog.

Console output while developing, one JSON object per line for a headless
deployment. Everything goes to stderr so the CLI can keep stdout for JSON
results. Use get_logger() everywhere instead of print().
"""

import logging
import sys

import structlog

# Chatty third-party loggers that only matter when debugging HTTP
_NOISY_LOGGERS: tuple[str, ...] = ("urllib3", "requests")


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog processors and the stdlib bridge.

    Timestamps are local wall-clock time, the same clock the period status
    and alarms run on.

    Args:
        json_output: Emit JSON lines instead of the coloured console format.
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers = [logging.StreamHandler(sys.stderr)]
    root.setLevel(numeric_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def bind_refresh(refresh_id: str) -> None:
    """Tag every log line of the current refresh with ``refresh_id``.

    Bound through contextvars, so the worker threads started by the refresh
    inherit it.
    """
    structlog.contextvars.bind_contextvars(refresh=refresh_id)


def clear_refresh() -> None:
    structlog.contextvars.unbind_contextvars("refresh")


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
