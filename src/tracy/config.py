"""Configuration file loading and option resolution.

tracy reads an optional ``tracy.yaml`` (or ``tracy.yml``) found by walking
up from the working directory. Values from the file are merged with command
line options into a single Settings object:

    CLI flag > configuration file > built-in default

Boolean options are opt-in switches, so a flag can only turn a feature on.
List options given on the command line replace the configured list.
Relative ``root`` and ``output`` paths in the file resolve against the
file's own directory. When a file is used but neither side names a
root, the file's directory is scanned, not the working directory.

Example tracy.yaml:

    root: .
    format: sarif
    include_blame: true
    scan:
      markers: [REQ, SPEC]
    filter:
      exclude: ["tests/fixtures/**"]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tracy.errors import ConfigurationError
from tracy.filters import FilterOptions

logger = structlog.get_logger(__name__)

CONFIG_FILENAMES: tuple[str, ...] = ("tracy.yaml", "tracy.yml")

OutputFormat = Literal["json", "jsonl", "csv", "sarif"]


class ScanConfig(BaseModel):
    """``scan`` section."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    markers: list[str] = Field(default_factory=list, description="Marker prefixes")


class FilterConfig(BaseModel):
    """``filter`` section."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    include_vendored: bool = False
    include_generated: bool = False
    include_submodules: bool = False
    include: list[str] = Field(default_factory=list, description="Globs a file must match")
    exclude: list[str] = Field(default_factory=list, description="Globs that drop a file")


class TracyConfig(BaseModel):
    """Contents of a tracy configuration file.

    Attributes:
        root: Directory to scan.
        format: Report format.
        output: File to also write the report to.
        quiet: Suppress the report on stdout.
        fail_on_empty: Exit non-zero when nothing is found.
        include_git_meta: Attach repository metadata to the report.
        include_blame: Attach per-line git attribution.
        scan: Marker settings.
        filter: File selection settings.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    root: Path | None = None
    format: OutputFormat | None = None
    output: Path | None = None
    quiet: bool = False
    fail_on_empty: bool = False
    include_git_meta: bool = False
    include_blame: bool = False
    scan: ScanConfig = Field(default_factory=ScanConfig)
    filter: FilterConfig = Field(default_factory=FilterConfig)


class Settings(BaseModel):
    """Fully resolved options for one run."""

    model_config = ConfigDict(frozen=True)

    root: Path
    format: OutputFormat = "json"
    output: Path | None = None
    quiet: bool = False
    fail_on_empty: bool = False
    include_git_meta: bool = False
    include_blame: bool = False
    markers: tuple[str, ...]
    filters: FilterOptions


def find_config(start: Path) -> Path | None:
    """Return the nearest configuration file at or above ``start``."""
    for directory in (start, *start.parents):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def load_config(path: Path) -> TracyConfig:
    """Load and validate a configuration file.

    Raises:
        ConfigurationError: If the file is unreadable, not YAML, or fails
            validation.
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"cannot read configuration: {e}", source=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML: {e}", source=str(path)) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError("configuration must be a mapping", source=str(path))
    try:
        config = TracyConfig.model_validate(raw)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"invalid configuration: {errors}", source=str(path)) from e

    logger.debug("config_loaded", path=str(path))
    return config


def resolve_settings(
    config: TracyConfig | None = None,
    config_path: Path | None = None,
    *,
    cwd: Path | None = None,
    **cli: Any,
) -> Settings:
    """Merge command line options over a configuration file.

    Args:
        config: Loaded configuration file, if any.
        config_path: Where ``config`` was loaded from; anchors relative paths.
        cwd: Root used when there is no configuration file and no
            ``root`` option.
        **cli: Command line values. None, False and empty sequences count
            as "not given".

    Returns:
        Resolved settings.

    Raises:
        ConfigurationError: If no marker prefix is configured.
    """
    config = config or TracyConfig()
    base = config_path.parent if config_path is not None else (cwd or Path.cwd())

    def anchored(value: Path | None) -> Path | None:
        if value is None or value.is_absolute():
            return value
        return base / value

    def flag(name: str) -> bool:
        return bool(cli.get(name)) or bool(getattr(config, name))

    def listed(name: str, configured: list[str]) -> tuple[str, ...]:
        given = cli.get(name)
        return tuple(given) if given else tuple(configured)

    markers = listed("markers", config.scan.markers)
    if not markers:
        raise ConfigurationError(
            "no marker prefixes configured; pass --marker or set scan.markers"
        )

    root = cli.get("root") or anchored(config.root) or base
    filter_config = config.filter
    filters = FilterOptions(
        include_vendored=bool(cli.get("include_vendored")) or filter_config.include_vendored,
        include_generated=bool(cli.get("include_generated")) or filter_config.include_generated,
        include_submodules=bool(cli.get("include_submodules"))
        or filter_config.include_submodules,
        include=listed("include", filter_config.include),
        exclude=listed("exclude", filter_config.exclude),
    )
    return Settings(
        root=root,
        format=cli.get("format") or config.format or "json",
        output=cli.get("output") or anchored(config.output),
        quiet=flag("quiet"),
        fail_on_empty=flag("fail_on_empty"),
        include_git_meta=flag("include_git_meta"),
        include_blame=flag("include_blame"),
        markers=markers,
        filters=filters,
    )


__all__ = [
    "CONFIG_FILENAMES",
    "FilterConfig",
    "OutputFormat",
    "ScanConfig",
    "Settings",
    "TracyConfig",
    "find_config",
    "load_config",
    "resolve_settings",
]
