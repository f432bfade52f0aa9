"""Candidate file selection.

Walks the scan root and returns the files the scanner should read, in a
stable sorted order. Filtering, in order of application:

1. ``.git`` directories are never entered.
2. Nested checkouts (a directory below root containing ``.git``) are skipped
   unless submodules are included.
3. ``.gitignore`` files at any level and ``.git/info/exclude`` apply.
4. Root ``.gitattributes`` patterns marked ``linguist-vendored`` or
   ``linguist-generated`` are skipped unless explicitly included.
5. ``include`` globs, when given, must match; ``exclude`` globs must not.

Globs use gitignore syntax against the root-relative POSIX path. A pattern
that cannot be compiled raises ConfigurationError naming the option or file
it came from.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from pathspec import GitIgnoreSpec

from tracy.errors import ConfigurationError

logger = structlog.get_logger(__name__)

_VENDORED = "linguist-vendored"
_GENERATED = "linguist-generated"


@dataclass(frozen=True)
class FilterOptions:
    """What to keep while walking the scan root."""

    include_vendored: bool = False
    include_generated: bool = False
    include_submodules: bool = False
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()


@dataclass
class _IgnoreRules:
    base: str
    spec: GitIgnoreSpec

    def matches(self, rel_path: str) -> bool:
        if self.base:
            if not rel_path.startswith(self.base + "/"):
                return False
            rel_path = rel_path[len(self.base) + 1 :]
        return self.spec.match_file(rel_path)


@dataclass
class _Attributes:
    vendored: list[GitIgnoreSpec] = field(default_factory=list)
    generated: list[GitIgnoreSpec] = field(default_factory=list)


def _compile(lines: Sequence[str], source: str) -> GitIgnoreSpec:
    try:
        return GitIgnoreSpec.from_lines(lines)
    except ValueError as e:
        raise ConfigurationError(f"invalid pattern: {e}", source=source) from e


def _read_lines(path: Path) -> list[str]:
    try:
        return path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("ignore_file_unreadable", path=str(path), error=str(e))
        return []


def _is_set(attribute: str, name: str) -> bool:
    return attribute == name or attribute in (f"{name}=true", f"{name}=set")


def parse_gitattributes(lines: Sequence[str]) -> tuple[list[str], list[str]]:
    """Return (vendored, generated) patterns from ``.gitattributes`` lines.

    Example:
        >>> parse_gitattributes(["vendor/** linguist-vendored", "# note"])
        (['vendor/**'], [])
    """
    vendored: list[str] = []
    generated: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        pattern, *attributes = stripped.split()
        if any(_is_set(attr, _VENDORED) for attr in attributes):
            vendored.append(pattern)
        if any(_is_set(attr, _GENERATED) for attr in attributes):
            generated.append(pattern)
    return vendored, generated


def _any_match(specs: list[GitIgnoreSpec], rel_path: str) -> bool:
    return any(spec.match_file(rel_path) for spec in specs)


def _load_attributes(root: Path) -> _Attributes:
    attributes = _Attributes()
    path = root / ".gitattributes"
    if not path.is_file():
        return attributes
    vendored, generated = parse_gitattributes(_read_lines(path))
    # One spec per pattern: gitattributes patterns do not negate each other.
    attributes.vendored = [_compile([p], str(path)) for p in vendored]
    attributes.generated = [_compile([p], str(path)) for p in generated]
    return attributes


def collect_files(root: Path, options: FilterOptions | None = None) -> list[Path]:
    """List the files below ``root`` that pass the filters.

    Args:
        root: Directory to walk.
        options: Filter switches and globs (defaults exclude vendored,
            generated and submodule content).

    Returns:
        Paths (``root`` joined with the relative path), sorted by their
        root-relative POSIX form.

    Raises:
        ConfigurationError: If an include/exclude glob, a ``.gitignore`` line
            or a ``.gitattributes`` pattern cannot be compiled.
    """
    options = options or FilterOptions()
    include_spec = _compile(options.include, "include globs") if options.include else None
    exclude_spec = _compile(options.exclude, "exclude globs") if options.exclude else None
    attributes = _load_attributes(root)
    ignore_rules: list[_IgnoreRules] = []
    info_exclude = root / ".git" / "info" / "exclude"
    if info_exclude.is_file():
        spec = _compile(_read_lines(info_exclude), str(info_exclude))
        ignore_rules.append(_IgnoreRules("", spec))

    def ignored(rel_path: str) -> bool:
        return any(rules.matches(rel_path) for rules in ignore_rules)

    def attribute_skip(rel_path: str) -> bool:
        if not options.include_vendored and _any_match(attributes.vendored, rel_path):
            return True
        return not options.include_generated and _any_match(attributes.generated, rel_path)

    selected: list[str] = []
    skipped = 0
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        rel_dir = current.relative_to(root).as_posix()
        rel_dir = "" if rel_dir == "." else rel_dir

        gitignore = current / ".gitignore"
        if gitignore.is_file():
            spec = _compile(_read_lines(gitignore), str(gitignore))
            ignore_rules.append(_IgnoreRules(rel_dir, spec))

        kept_dirs = []
        for name in sorted(dirnames):
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if name == ".git":
                continue
            if not options.include_submodules and (current / name / ".git").exists():
                logger.debug("submodule_skipped", path=rel)
                continue
            if ignored(rel + "/") or attribute_skip(rel + "/"):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for name in filenames:
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if name == ".git" or not (current / name).is_file():
                continue
            if ignored(rel) or attribute_skip(rel):
                skipped += 1
                continue
            if include_spec is not None and not include_spec.match_file(rel):
                skipped += 1
                continue
            if exclude_spec is not None and exclude_spec.match_file(rel):
                skipped += 1
                continue
            selected.append(rel)

    selected.sort()
    logger.debug("files_collected", root=str(root), selected=len(selected), skipped=skipped)
    return [root / rel for rel in selected]


__all__ = ["FilterOptions", "collect_files", "parse_gitattributes"]
