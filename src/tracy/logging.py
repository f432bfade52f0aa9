"""structlog configuration for the tracy CLI.

Library modules only call ``structlog.get_logger(__name__)``; the CLI calls
configure_logging() once per invocation. Logs always go to stderr so the
report on stdout can be piped.

Example:
    >>> configure_logging(verbose=True)
    >>> structlog.get_logger("tracy").debug("configured")
"""

from __future__ import annotations

import logging
import sys

import structlog


def configure_logging(verbose: bool = False, json_output: bool = False) -> None:
    """Configure structlog for a CLI run.

    Args:
        verbose: Emit DEBUG events; otherwise only WARNING and above.
        json_output: Render events as JSON instead of console text.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    renderer: structlog.typing.Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


__all__ = ["configure_logging"]
