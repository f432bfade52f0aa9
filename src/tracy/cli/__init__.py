"""Command-line interface for tracy.

Example:
    $ tracy --help
    $ tracy --version
    $ tracy --marker REQ --format sarif

Exit Codes:
    0: Success
    1: General error
    2: Usage error (invalid arguments)
    3: Scan root or configuration file not found
    4: Configuration error
    5: Scan error (unreadable file, missing grammar)
    6: Git error while collecting repository metadata
    7: No markers found with --fail-on-empty
"""

from __future__ import annotations

from tracy.cli.main import cli, main
from tracy.cli.utils import ExitCode, error, error_exit, warn

__all__ = ["ExitCode", "cli", "error", "error_exit", "main", "warn"]
