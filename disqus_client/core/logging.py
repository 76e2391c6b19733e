"""Structured logging setup for the Disqus client."""

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog


if TYPE_CHECKING:
    from disqus_client.config.logging import LoggingSettings


_NOISY_LOGGERS = ("httpx", "httpcore", "keyring")


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def setup_logging(
    json_logs: bool = False,
    log_level_name: str = "INFO",
) -> structlog.stdlib.BoundLogger:
    """Configure structlog and route stdlib logging through it.

    Args:
        json_logs: Render JSON lines instead of the coloured console format
        log_level_name: Logging level name (DEBUG, INFO, ...)

    Returns:
        A logger bound to this module
    """
    level = getattr(logging, log_level_name.upper(), logging.INFO)
    shared = _shared_processors()

    structlog.configure(
        processors=[
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    renderer: Any
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info if json_logs else _identity,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(
            max(level, logging.WARNING)
        )

    return get_logger(__name__)  # type: ignore[no-any-return]


def _identity(_: Any, __: str, event_dict: Any) -> Any:
    return event_dict


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)


def setup_logging_from_settings(settings: "LoggingSettings") -> Any:
    """Configure logging from ``LoggingSettings``.

    ``auto`` renders JSON when stderr is not a terminal.
    """
    fmt = settings.format
    if fmt == "auto":
        json_logs = not sys.stderr.isatty()
    else:
        json_logs = fmt == "json"
    return setup_logging(json_logs=json_logs, log_level_name=settings.level)
