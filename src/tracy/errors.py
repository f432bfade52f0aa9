"""Exception hierarchy for tracy.

All exceptions raised by the scanning and attribution engine inherit from
TracyError, so the CLI can report any engine failure with one handler.

Exception Hierarchy:
    TracyError (base)
    ├── ConfigurationError      # Bad marker set, config file or option
    ├── FileReadError           # Selected source file unreadable (fatal)
    ├── GrammarUnavailableError # Grammar package for a language missing
    └── GitError                # git unavailable or not a repository
        └── GitCommandError     # git exited non-zero

Example:
    >>> from tracy.errors import ConfigurationError
    >>> raise ConfigurationError("at least one marker prefix is required")
    Traceback (most recent call last):
        ...
    ConfigurationError: at least one marker prefix is required
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class TracyError(Exception):
    """Base exception for all tracy errors.

    Example:
        >>> try:
        ...     scan_files(root, paths, [])
        ... except TracyError as e:
        ...     print(f"Scan failed: {e}")
    """

    pass


class ConfigurationError(TracyError):
    """Raised when the run cannot be configured.

    Covers an empty or blank marker set, a marker pattern that fails to
    compile, and an invalid configuration file. Always fatal, and always
    raised before any file is scanned.

    Attributes:
        source: Where the bad value came from (config path or option name).
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Description of the problem.
            source: Optional origin of the bad value.
        """
        self.source = source
        if source:
            message = f"{message} ({source})"
        super().__init__(message)


class FileReadError(TracyError):
    """Raised when a selected source file cannot be read.

    Files reach the scanner already vetted by the file filter, so a read
    failure aborts the whole run.

    Attributes:
        path: The file that could not be read.
        reason: The underlying OS or decoding error text.
    """

    def __init__(self, path: Path, reason: str) -> None:
        """Initialize FileReadError.

        Args:
            path: The file that could not be read.
            reason: The underlying OS or decoding error text.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read {path}: {reason}")


class GrammarUnavailableError(TracyError):
    """Raised when a supported language's grammar package cannot be imported.

    Attributes:
        language: Language identifier from the language table.
        module: Python module that provides the grammar.
    """

    def __init__(self, language: str, module: str) -> None:
        """Initialize GrammarUnavailableError.

        Args:
            language: Language identifier from the language table.
            module: Python module that provides the grammar.
        """
        self.language = language
        self.module = module
        super().__init__(
            f"Grammar for {language} is not installed (missing module {module!r})"
        )


class GitError(TracyError):
    """Error executing git."""

    pass


class GitCommandError(GitError):
    """Raised when a git invocation exits with a non-zero status.

    Attributes:
        args_: The git arguments that were run (without the executable).
        stderr: Error text reported by git.
    """

    def __init__(self, args: Sequence[str], stderr: str) -> None:
        """Initialize GitCommandError.

        Args:
            args: The git arguments that were run.
            stderr: Error text reported by git.
        """
        self.args_ = tuple(args)
        self.stderr = stderr.strip()
        command = " ".join(self.args_)
        super().__init__(f"git {command} failed: {self.stderr or 'no error output'}")


__all__ = [
    "ConfigurationError",
    "FileReadError",
    "GitCommandError",
    "GitError",
    "GrammarUnavailableError",
    "TracyError",
]
