"""Git queries.

Thin wrappers over the ``git`` executable: repository metadata and
line-range blame. Every query runs ``git -C <root> ...`` synchronously and
expects UTF-8 output; a non-zero exit becomes GitCommandError and a
missing executable becomes GitError.

Example:
    >>> from tracy.git import collect_git_meta
    >>> meta = collect_git_meta(Path("."))
    >>> meta.head_ref
    'main'
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import structlog

from tracy.errors import GitCommandError, GitError
from tracy.models import GitMeta

logger = structlog.get_logger(__name__)


def run_git(root: Path, *args: str) -> str:
    """Run git in ``root`` and return its standard output.

    Args:
        root: Directory to run in (passed as ``-C``).
        *args: git arguments.

    Returns:
        Captured stdout.

    Raises:
        GitCommandError: If git exits non-zero.
        GitError: If git is not installed.
    """
    try:
        result = subprocess.run(
            ["git", "-C", str(root), *args],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=True,
        )
    except subprocess.CalledProcessError as e:
        raise GitCommandError(args, e.stderr or "") from e
    except FileNotFoundError as e:
        msg = "git command not found"
        raise GitError(msg) from e
    return result.stdout


def get_repo_root(root: Path) -> Path:
    """Return the top level of the repository containing ``root``."""
    return Path(run_git(root, "rev-parse", "--show-toplevel").strip())


def collect_git_meta(root: Path) -> GitMeta:
    """Capture HEAD, branch and dirty state of the repository at ``root``.

    A detached HEAD reports ``head_ref=None``. Any failure is raised: the
    caller asked for metadata, so it is never silently omitted.

    Raises:
        GitError: If ``root`` is not inside a repository, has no commits,
            or git is unavailable.
    """
    repo_root = get_repo_root(root)
    head_sha = run_git(root, "rev-parse", "HEAD").strip()
    ref = run_git(root, "rev-parse", "--abbrev-ref", "HEAD").strip()
    dirty = bool(run_git(root, "status", "--porcelain").strip())

    meta = GitMeta(
        repo_root=str(repo_root),
        head_sha=head_sha,
        head_ref=None if ref in ("", "HEAD") else ref,
        is_dirty=dirty,
    )
    logger.debug("git_meta_collected", head_sha=head_sha, head_ref=meta.head_ref, dirty=dirty)
    return meta


def blame_porcelain(root: Path, file: str, start: int, end: int) -> str:
    """Return ``git blame --porcelain`` output for lines ``start``-``end`` of ``file``.

    Args:
        root: Directory ``file`` is relative to.
        file: Path of the file relative to ``root``.
        start: First line, 1-indexed.
        end: Last line, inclusive.
    """
    return run_git(root, "blame", "--porcelain", "-L", f"{start},{end}", "--", file)


__all__ = [
    "blame_porcelain",
    "collect_git_meta",
    "get_repo_root",
    "run_git",
]
