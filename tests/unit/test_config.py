"""Unit tests for configuration loading and option resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from tracy.config import TracyConfig, find_config, load_config, resolve_settings
from tracy.errors import ConfigurationError


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "tracy.yaml"
    path.write_text(
        """
root: src
format: csv
output: reports/trace.csv
include_blame: true
scan:
  markers: [REQ, SPEC]
filter:
  include_generated: true
  exclude: ["tests/**"]
"""
    )
    return path


class TestFindConfig:
    """Tests for find_config."""

    def test_found_in_parent_directory(self, config_file: Path) -> None:
        nested = config_file.parent / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == config_file

    def test_yml_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "tracy.yml"
        path.write_text("scan:\n  markers: [REQ]\n")
        assert find_config(tmp_path) == path

    def test_nothing_found(self, tmp_path: Path) -> None:
        isolated = tmp_path / "isolated"
        isolated.mkdir()
        found = find_config(isolated)
        assert found is None or not found.is_relative_to(tmp_path)


class TestLoadConfig:
    """Tests for load_config."""

    def test_valid_file(self, config_file: Path) -> None:
        config = load_config(config_file)
        assert config.format == "csv"
        assert config.scan.markers == ["REQ", "SPEC"]
        assert config.filter.exclude == ["tests/**"]
        assert config.include_blame is True

    def test_empty_file_is_default(self, tmp_path: Path) -> None:
        path = tmp_path / "tracy.yaml"
        path.write_text("")
        assert load_config(path) == TracyConfig()

    def test_unknown_key_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "tracy.yaml"
        path.write_text("scan:\n  slugs: [REQ]\n")
        with pytest.raises(ConfigurationError, match="scan.slugs"):
            load_config(path)

    def test_bad_format_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "tracy.yaml"
        path.write_text("format: xml\n")
        with pytest.raises(ConfigurationError, match="format"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "tracy.yaml"
        path.write_text("scan: [unclosed\n")
        with pytest.raises(ConfigurationError, match="invalid YAML"):
            load_config(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "tracy.yaml"
        path.write_text("- REQ\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)


class TestResolveSettings:
    """Tests for CLI-over-config precedence."""

    def test_config_values_anchor_to_config_directory(self, config_file: Path) -> None:
        settings = resolve_settings(load_config(config_file), config_file)
        base = config_file.parent
        assert settings.root == base / "src"
        assert settings.output == base / "reports" / "trace.csv"
        assert settings.format == "csv"
        assert settings.markers == ("REQ", "SPEC")
        assert settings.include_blame is True
        assert settings.filters.include_generated is True
        assert settings.filters.exclude == ("tests/**",)

    def test_cli_overrides_config(self, config_file: Path, tmp_path: Path) -> None:
        other = tmp_path / "other"
        settings = resolve_settings(
            load_config(config_file),
            config_file,
            root=other,
            format="sarif",
            markers=("TICKET",),
            exclude=("docs/**",),
            include_git_meta=True,
        )
        assert settings.root == other
        assert settings.format == "sarif"
        assert settings.markers == ("TICKET",)
        assert settings.filters.exclude == ("docs/**",)
        assert settings.include_git_meta is True
        assert settings.include_blame is True

    def test_defaults_without_config(self, tmp_path: Path) -> None:
        settings = resolve_settings(None, None, cwd=tmp_path, markers=("REQ",))
        assert settings.root == tmp_path
        assert settings.format == "json"
        assert settings.output is None
        assert settings.quiet is False
        assert settings.filters.include == ()

    def test_root_defaults_to_config_directory(self, tmp_path: Path) -> None:
        """Running from a subdirectory scans the directory holding tracy.yaml."""
        config_path = tmp_path / "tracy.yaml"
        config = TracyConfig.model_validate({"scan": {"markers": ["REQ"]}})
        settings = resolve_settings(config, config_path, cwd=tmp_path / "sub")
        assert settings.root == tmp_path

    def test_no_markers_anywhere_is_an_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="no marker prefixes"):
            resolve_settings(None, None, cwd=tmp_path, markers=())
