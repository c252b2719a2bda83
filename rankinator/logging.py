"""Structured logging for Rankinator, routed through the standard library.

Every module logs through get_logger(__name__), which hands structlog events
to a stdlib logger of the same name. Nothing is printed until a host either
sets up stdlib logging itself or calls configure_logging(); the engine and
matchmaker stay silent when embedded as a library.
"""

import logging
import sys

import structlog
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    TimeStamper,
    add_log_level,
    format_exc_info,
)
from structlog.stdlib import ProcessorFormatter, add_logger_name, filter_by_level

ROOT_LOGGER = "rankinator"

# Run for every event before it reaches the stdlib logger
_EVENT_PROCESSORS = [
    filter_by_level,
    add_logger_name,
    add_log_level,
    TimeStamper(fmt="iso"),
    StackInfoRenderer(),
    format_exc_info,
    ProcessorFormatter.wrap_for_formatter,
]

# Applied to plain stdlib records (other libraries) rendered by our handler
_FOREIGN_PRE_CHAIN = [
    add_logger_name,
    add_log_level,
    TimeStamper(fmt="iso"),
]

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())


class _RankinatorHandler(logging.StreamHandler):
    """Marker type so configure_logging can replace its own handler."""


def configure_logging(cli_mode: bool = False, log_level: str = "INFO") -> None:
    """Install a stdout handler that renders structlog events.

    Calling it again replaces the handler installed by the previous call.

    Args:
        cli_mode: If True, use the console renderer for pretty terminal output.
                  If False, emit one JSON object per line.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    if cli_mode:
        # ConsoleRenderer picks up Rich when it is installed
        from structlog.dev import ConsoleRenderer
        renderer = ConsoleRenderer(colors=True)
    else:
        renderer = JSONRenderer()

    handler = _RankinatorHandler(sys.stdout)
    handler.setFormatter(
        ProcessorFormatter(
            processors=[ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=_FOREIGN_PRE_CHAIN,
        )
    )

    level = getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    reset_logging()
    root.addHandler(handler)
    root.setLevel(level)

    # Plain structlog.get_logger() callers go through the same pipeline
    structlog.configure(
        processors=_EVENT_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def reset_logging() -> None:
    """Remove the handler installed by configure_logging, if any."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _RankinatorHandler)]:
        root.removeHandler(existing)
        existing.close()


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger backed by the stdlib logger of the same name.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Bound logger; output follows the host's stdlib logging setup
    """
    return structlog.wrap_logger(
        logging.getLogger(name or ROOT_LOGGER),
        processors=_EVENT_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )
