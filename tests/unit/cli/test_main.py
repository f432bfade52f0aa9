"""Unit tests for the tracy command."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from tracy.cli.main import cli, main
from tracy.cli.utils import ExitCode


class TestScanCommand:
    """Tests for a plain scan."""

    def test_json_report_on_stdout(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(cli, ["--no-config", "--marker", "REQ"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert list(data) == ["REQ-1", "REQ-2"]
        assert [occ["file"] for occ in data["REQ-1"]] == ["src/main.rs", "src/util.py"]
        assert data["REQ-1"][0]["below"]["name"] == "main"
        assert data["REQ-2"][0]["inline"]["name"] == "rate"

    def test_include_vendored(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(cli, ["--no-config", "-m", "REQ", "--include-vendored"])
        assert result.exit_code == 0, result.output
        assert "REQ-9" in json.loads(result.stdout)

    def test_slug_alias_and_exclude(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--no-config", "--slug", "REQ", "--exclude", "*.py", "--format", "jsonl"]
        )
        assert result.exit_code == 0, result.output
        records = [json.loads(line) for line in result.stdout.splitlines()]
        assert {r["entry"]["file"] for r in records} == {"src/main.rs"}

    def test_explicit_root(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--no-config", "-m", "REQ", "--root", str(project / "src"), "--format", "csv"]
        )
        assert result.exit_code == 0, result.output
        assert "main.rs" in result.stdout
        assert "src/main.rs" not in result.stdout

    def test_output_file_and_quiet(self, cli_runner: CliRunner, project: Path) -> None:
        target = project / "out" / "trace.sarif"
        result = cli_runner.invoke(
            cli, ["--no-config", "-m", "REQ", "--format", "sarif", "-o", str(target), "-q"]
        )
        assert result.exit_code == 0, result.output
        assert result.stdout == ""
        assert json.loads(target.read_text())["version"] == "2.1.0"

    def test_json_log_events_on_stderr(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(cli, ["--no-config", "-m", "REQ", "-v", "--log-json"])
        assert result.exit_code == 0, result.output
        events = [json.loads(line) for line in result.stderr.splitlines()]
        complete = next(e for e in events if e["event"] == "scan_complete")
        assert complete["level"] == "info"
        assert complete["slugs"] == 2
        assert json.loads(result.stdout)["REQ-2"][0]["file"] == "src/main.rs"

    def test_quiet_without_output_warns(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(cli, ["--no-config", "-m", "REQ", "-q"])
        assert result.exit_code == 0, result.output
        assert result.stdout == ""
        assert "Warning: --quiet without --output discards the report" in result.stderr


class TestConfiguration:
    """Tests for configuration discovery and errors."""

    def test_config_file_is_discovered(self, cli_runner: CliRunner, project: Path) -> None:
        (project / "tracy.yaml").write_text("format: jsonl\nscan:\n  markers: [REQ]\n")
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout.splitlines()[0])["type"] == "match"

    def test_no_config_ignores_file(self, cli_runner: CliRunner, project: Path) -> None:
        (project / "tracy.yaml").write_text("scan:\n  markers: [REQ]\n")
        result = cli_runner.invoke(cli, ["--no-config"])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert "no marker prefixes" in result.stderr
        assert result.stdout == ""

    def test_explicit_config(self, cli_runner: CliRunner, project: Path) -> None:
        config = project / "ci" / "trace.yaml"
        config.parent.mkdir()
        config.write_text("root: ..\nformat: csv\nscan:\n  markers: [REQ]\n")
        result = cli_runner.invoke(cli, ["--config", str(config)])
        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("requirement_id,")

    def test_invalid_config(self, cli_runner: CliRunner, project: Path) -> None:
        (project / "tracy.yaml").write_text("unknown_key: 1\n")
        result = cli_runner.invoke(cli, ["-m", "REQ"])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert result.stderr.startswith("Error: invalid configuration")

    def test_config_and_no_config_conflict(self, cli_runner: CliRunner, project: Path) -> None:
        config = project / "tracy.yaml"
        config.write_text("scan:\n  markers: [REQ]\n")
        result = cli_runner.invoke(cli, ["--config", str(config), "--no-config"])
        assert result.exit_code == ExitCode.USAGE_ERROR

    def test_blank_marker(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(cli, ["--no-config", "-m", " "])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR

    def test_invalid_exclude_glob(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(cli, ["--no-config", "-m", "REQ", "--exclude", "foo\\"])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert result.stdout == ""
        assert result.stderr.startswith("Error: invalid pattern")
        assert len(result.stderr.strip().splitlines()) == 1

    def test_bad_format_choice(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(cli, ["--no-config", "-m", "REQ", "--format", "xml"])
        assert result.exit_code == 2


class TestExitCodes:
    """Tests for fatal paths and --fail-on-empty."""

    def test_fail_on_empty(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(cli, ["--no-config", "-m", "NOPE", "--fail-on-empty"])
        assert result.exit_code == ExitCode.NO_MATCHES
        assert json.loads(result.stdout) == {}
        assert "No requirement markers found" in result.stderr

    def test_empty_without_flag_succeeds(self, cli_runner: CliRunner, project: Path) -> None:
        result = cli_runner.invoke(cli, ["--no-config", "-m", "NOPE"])
        assert result.exit_code == 0

    def test_unreadable_file_emits_no_report(self, cli_runner: CliRunner, project: Path) -> None:
        (project / "src" / "broken.py").write_bytes(b"# REQ-5 caf\xe9\n")
        result = cli_runner.invoke(cli, ["--no-config", "-m", "REQ"])
        assert result.exit_code == ExitCode.SCAN_ERROR
        assert result.stdout == ""
        assert "broken.py" in result.stderr

    def test_git_meta_failure_is_fatal(self, cli_runner: CliRunner, project: Path) -> None:
        with patch("subprocess.run", side_effect=FileNotFoundError()):
            result = cli_runner.invoke(cli, ["--no-config", "-m", "REQ", "--include-git-meta"])
        assert result.exit_code == ExitCode.GIT_ERROR
        assert result.stdout == ""
        assert "git command not found" in result.stderr

    def test_blame_failure_is_not_fatal(self, cli_runner: CliRunner, project: Path) -> None:
        with patch("subprocess.run", side_effect=FileNotFoundError()):
            result = cli_runner.invoke(cli, ["--no-config", "-m", "REQ", "--include-blame"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert all("blame" not in occ for occ in data["REQ-1"])


class TestMain:
    """Tests for the main() wrapper."""

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--version"])
        assert capsys.readouterr().out.startswith("tracy ")

    def test_help_lists_scanned_extensions(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Scanned extensions:" in result.stdout
        assert ".rs" in result.stdout
        assert ".tsx" in result.stdout

    def test_usage_error_exits(self, project: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--format", "xml"])
        assert exc_info.value.code == 2

    def test_unexpected_error_is_one_line(
        self, project: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with (
            patch("tracy.cli.main.collect_files", side_effect=RuntimeError("walk failed")),
            pytest.raises(SystemExit) as exc_info,
        ):
            main(["--no-config", "-m", "REQ"])
        assert exc_info.value.code == ExitCode.GENERAL_ERROR
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Error: walk failed\n"
