"""tracy - requirement traceability scanner.

Finds requirement markers (for example ``REQ-123``) inside source-code
comments, records the code around each occurrence and its enclosing
scopes, and optionally attributes every occurrence to git history.

Example:
    >>> from pathlib import Path
    >>> from tracy import scan_files
    >>> results = scan_files(Path("."), [Path("src/main.rs")], ["REQ"])
    >>> sorted(results)
    ['REQ-1', 'REQ-2']
"""

from __future__ import annotations

from tracy.blame import add_blame, parse_blame_porcelain
from tracy.errors import (
    ConfigurationError,
    FileReadError,
    GitCommandError,
    GitError,
    GrammarUnavailableError,
    TracyError,
)
from tracy.git import collect_git_meta
from tracy.models import BlameInfo, CodeContext, GitMeta, Occurrence, ScanResult, ScopeItem
from tracy.scanner import Scanner, scan_files

__version__ = "0.4.0"

__all__ = [
    "BlameInfo",
    "CodeContext",
    "ConfigurationError",
    "FileReadError",
    "GitCommandError",
    "GitError",
    "GitMeta",
    "GrammarUnavailableError",
    "Occurrence",
    "ScanResult",
    "Scanner",
    "ScopeItem",
    "TracyError",
    "__version__",
    "add_blame",
    "collect_git_meta",
    "parse_blame_porcelain",
    "scan_files",
]
