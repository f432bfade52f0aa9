"""Entry point for the tracy command.

Resolves settings from the command line and an optional ``tracy.yaml``,
selects candidate files, scans them for requirement markers, optionally
adds git attribution and repository metadata, and prints the report.

Example:
    $ tracy --marker REQ
    $ tracy --root services/api --marker REQ --marker SPEC --format sarif -o trace.sarif
    $ tracy --include-blame --include-git-meta --format jsonl
"""

from __future__ import annotations

import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path

import click
import structlog

from tracy.blame import add_blame
from tracy.cli.utils import ExitCode, error_exit, warn
from tracy.config import find_config, load_config, resolve_settings
from tracy.errors import (
    ConfigurationError,
    FileReadError,
    GitError,
    GrammarUnavailableError,
)
from tracy.exporters import RENDERERS, format_report, write_report
from tracy.filters import collect_files
from tracy.git import collect_git_meta
from tracy.languages import supported_extensions
from tracy.logging import configure_logging
from tracy.scanner import Scanner

logger = structlog.get_logger(__name__)


def _get_version() -> str:
    """Get the installed tracy version, or 'unknown' when not installed."""
    try:
        return get_version("tracy")
    except PackageNotFoundError:
        return "unknown"


@click.command(
    name="tracy",
    help="Find requirement markers in source comments and report where they live.",
    epilog=f"""
Examples:
    $ tracy --marker REQ
    $ tracy --marker REQ --format csv --output trace.csv
    $ tracy --marker REQ --include-blame --include-git-meta --format sarif

Scanned extensions: {' '.join(supported_extensions())}
""",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=_get_version(), prog_name="tracy", message="%(prog)s %(version)s")
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory to scan (default: configured root or the current directory).",
    metavar="PATH",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(sorted(RENDERERS), case_sensitive=False),
    help="Report format (default: json).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file to use instead of discovering tracy.yaml.",
    metavar="PATH",
)
@click.option("--no-config", is_flag=True, default=False, help="Ignore any tracy.yaml.")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write the report to this file.",
    metavar="PATH",
)
@click.option("--quiet", "-q", is_flag=True, default=False, help="Do not print the report.")
@click.option(
    "--fail-on-empty",
    is_flag=True,
    default=False,
    help="Exit with a non-zero status when no marker is found.",
)
@click.option(
    "--include-git-meta",
    is_flag=True,
    default=False,
    help="Add repository root, HEAD and dirty state to the report.",
)
@click.option(
    "--include-blame",
    is_flag=True,
    default=False,
    help="Add last-commit attribution to every occurrence.",
)
@click.option(
    "--marker",
    "--slug",
    "-m",
    "markers",
    multiple=True,
    help="Marker prefix to search for, e.g. REQ (repeatable).",
    metavar="TEXT",
)
@click.option(
    "--include-vendored", is_flag=True, default=False, help="Scan linguist-vendored paths."
)
@click.option(
    "--include-generated", is_flag=True, default=False, help="Scan linguist-generated paths."
)
@click.option(
    "--include-submodules", is_flag=True, default=False, help="Descend into nested checkouts."
)
@click.option("--include", multiple=True, help="Only scan paths matching GLOB.", metavar="GLOB")
@click.option("--exclude", multiple=True, help="Skip paths matching GLOB.", metavar="GLOB")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug events to stderr.")
@click.option(
    "--log-json", is_flag=True, default=False, help="Render log events on stderr as JSON lines."
)
def cli(
    root: Path | None,
    fmt: str | None,
    config_path: Path | None,
    no_config: bool,
    output: Path | None,
    quiet: bool,
    fail_on_empty: bool,
    include_git_meta: bool,
    include_blame: bool,
    markers: tuple[str, ...],
    include_vendored: bool,
    include_generated: bool,
    include_submodules: bool,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    verbose: bool,
    log_json: bool,
) -> None:
    """Scan for requirement markers and print the report."""
    configure_logging(verbose=verbose, json_output=log_json)

    if config_path is not None and no_config:
        error_exit("--config and --no-config cannot be combined", exit_code=ExitCode.USAGE_ERROR)

    try:
        if config_path is None and not no_config:
            config_path = find_config(Path.cwd())
        config = load_config(config_path) if config_path is not None else None
        settings = resolve_settings(
            config,
            config_path,
            root=root,
            format=fmt.lower() if fmt else None,
            output=output,
            quiet=quiet,
            fail_on_empty=fail_on_empty,
            include_git_meta=include_git_meta,
            include_blame=include_blame,
            markers=markers,
            include_vendored=include_vendored,
            include_generated=include_generated,
            include_submodules=include_submodules,
            include=include,
            exclude=exclude,
        )
    except ConfigurationError as e:
        error_exit(str(e), exit_code=ExitCode.CONFIGURATION_ERROR)

    if settings.quiet and settings.output is None:
        warn("--quiet without --output discards the report")

    scan_root = settings.root
    if not scan_root.is_dir():
        error_exit("Scan root not found", exit_code=ExitCode.FILE_NOT_FOUND, path=str(scan_root))

    log = logger.bind(root=str(scan_root), markers=list(settings.markers))
    try:
        scanner = Scanner(scan_root, settings.markers)
        paths = collect_files(scan_root, settings.filters)
        results = scanner.scan(paths)
    except ConfigurationError as e:
        error_exit(str(e), exit_code=ExitCode.CONFIGURATION_ERROR)
    except (FileReadError, GrammarUnavailableError) as e:
        error_exit(str(e), exit_code=ExitCode.SCAN_ERROR)

    if settings.include_blame:
        add_blame(scan_root, results)

    meta = None
    if settings.include_git_meta:
        try:
            meta = collect_git_meta(scan_root)
        except GitError as e:
            error_exit(str(e), exit_code=ExitCode.GIT_ERROR)

    report = format_report(results, settings.format, meta)
    if settings.output is not None:
        try:
            write_report(report, settings.output)
        except OSError as e:
            error_exit(
                f"Cannot write report: {e.strerror or e}",
                exit_code=ExitCode.GENERAL_ERROR,
                path=str(settings.output),
            )
    if not settings.quiet:
        click.echo(report, nl=False)

    log.info("run_complete", files=len(paths), slugs=len(results), format=settings.format)
    if settings.fail_on_empty and not results:
        error_exit("No requirement markers found", exit_code=ExitCode.NO_MATCHES)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the tracy CLI.

    Args:
        argv: Command-line arguments (uses sys.argv if None).
    """
    try:
        cli(args=argv, standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.GENERAL_ERROR)


if __name__ == "__main__":
    main()
