"""CLI output helpers and exit codes.

Errors and warnings are plain text on stderr, one line each, so CI logs
stay readable and stdout carries only the report.

Example:
    from tracy.cli.utils import ExitCode, error_exit

    if not root.is_dir():
        error_exit("Scan root not found", exit_code=ExitCode.FILE_NOT_FOUND, path=str(root))
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from typing import NoReturn


class ExitCode(IntEnum):
    """Exit codes of the tracy command."""

    SUCCESS = 0
    """Scan completed."""

    GENERAL_ERROR = 1
    """Unexpected failure."""

    USAGE_ERROR = 2
    """Invalid arguments (reported by click)."""

    FILE_NOT_FOUND = 3
    """Scan root or configuration file missing."""

    CONFIGURATION_ERROR = 4
    """No markers, bad configuration file or option."""

    SCAN_ERROR = 5
    """A selected file could not be read or parsed."""

    GIT_ERROR = 6
    """Repository metadata was requested but git failed."""

    NO_MATCHES = 7
    """--fail-on-empty was given and nothing was found."""


def _format(prefix: str, message: str, context: dict[str, str | int | bool | None]) -> str:
    details = ", ".join(f"{k}={v}" for k, v in context.items() if v is not None)
    return f"{prefix}: {message} ({details})" if details else f"{prefix}: {message}"


def error(message: str, **context: str | int | bool | None) -> None:
    """Print an error message to stderr.

    Example:
        error("Scan root not found", path="services/api")
        # Output: Error: Scan root not found (path=services/api)
    """
    click.echo(_format("Error", message, context), err=True)


def error_exit(
    message: str,
    exit_code: ExitCode = ExitCode.GENERAL_ERROR,
    **context: str | int | bool | None,
) -> NoReturn:
    """Print an error message to stderr and exit with ``exit_code``.

    Raises:
        SystemExit: Always.
    """
    error(message, **context)
    sys.exit(exit_code)


def warn(message: str, **context: str | int | bool | None) -> None:
    """Print a warning message to stderr."""
    click.echo(_format("Warning", message, context), err=True)


__all__ = ["ExitCode", "error", "error_exit", "warn"]
