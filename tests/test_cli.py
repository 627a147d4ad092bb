"""Tests for CLI commands — temp project trees, CliRunner."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from gyp_cli import __version__
from gyp_cli.builder import MANIFEST_FILE
from gyp_cli.cli import main


@pytest.fixture
def cache_env(tmp_path: Path) -> dict[str, str]:
    return {"GYP_CLI_CACHE_PATH": str(tmp_path / "cache"), "GYP_CLI_LOG_LEVEL": "WARNING"}


def _invoke(args: list[str], env: dict[str, str] | None = None):
    return CliRunner().invoke(main, args, env=env)


class TestVersion:
    def test_version(self):
        result = _invoke(["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# ── init ──


class TestInit:
    def test_generates_manifest(self, addon_project: Path):
        result = _invoke(["--root", str(addon_project), "init"])
        assert result.exit_code == 0, result.output
        assert "Generate binding.gyp" in result.output
        assert "Parsing local package.json" in result.output
        assert '"target_name": "foo"' in result.output
        assert "(3 file(s))" in result.output

        data = json.loads((addon_project / MANIFEST_FILE).read_text())
        assert data["targets"][0]["target_name"] == "foo"

    def test_existing_manifest_exits_nonzero(self, tmp_path: Path):
        (tmp_path / MANIFEST_FILE).write_text("{}")
        result = _invoke(["--root", str(tmp_path), "init"])
        assert result.exit_code == 1
        assert "already exist" in result.output
        assert (tmp_path / MANIFEST_FILE).read_text() == "{}"

    def test_scan_error_exits_nonzero(self, tmp_path: Path):
        with patch("gyp_cli.builder.search_tree", side_effect=PermissionError("denied")):
            result = _invoke(["--root", str(tmp_path), "init"])
        assert result.exit_code == 1
        assert "Unable to scan" in result.output
        assert not (tmp_path / MANIFEST_FILE).exists()

    def test_missing_root(self, tmp_path: Path):
        result = _invoke(["--root", str(tmp_path / "nope"), "init"])
        assert result.exit_code != 0


# ── update ──


class TestUpdate:
    def test_missing_manifest_exits_nonzero(self, tmp_path: Path):
        result = _invoke(["--root", str(tmp_path), "update"])
        assert result.exit_code == 1
        assert "Unable to find binding.gyp" in result.output

    def test_invalid_manifest_exits_nonzero(self, tmp_path: Path):
        (tmp_path / MANIFEST_FILE).write_text("nope")
        result = _invoke(["--root", str(tmp_path), "update"])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_unreadable_manifest_is_not_a_scan_error(self, tmp_path: Path):
        (tmp_path / MANIFEST_FILE).mkdir()
        result = _invoke(["--root", str(tmp_path), "update"])
        assert result.exit_code == 1
        assert "Cannot read binding.gyp" in result.output
        assert "Unable to scan" not in result.output

    def test_up_to_date(self, addon_project: Path):
        assert _invoke(["--root", str(addon_project), "init"]).exit_code == 0
        result = _invoke(["--root", str(addon_project), "update"])
        assert result.exit_code == 0
        assert "already up to date" in result.output

    def test_reports_new_source(self, addon_project: Path):
        assert _invoke(["--root", str(addon_project), "init"]).exit_code == 0
        (addon_project / "src" / "new.cc").write_text("")
        result = _invoke(["--root", str(addon_project), "update"])
        assert result.exit_code == 0
        assert '+                "src/new.cc"' in result.output
        assert "sources: +1 / -0" in result.output


# ── set / get ──


class TestConfigCommands:
    def test_set_then_get(self, cache_env: dict[str, str]):
        result = _invoke(["set", "python=/usr/bin/python3"], env=cache_env)
        assert result.exit_code == 0
        assert "Set new config key" in result.output

        result = _invoke(["get", "python"], env=cache_env)
        assert result.exit_code == 0
        assert result.output.splitlines()[0] == "/usr/bin/python3"

    def test_value_keeps_extra_equals(self, cache_env: dict[str, str]):
        _invoke(["set", "flags=a=b"], env=cache_env)
        result = _invoke(["get", "flags"], env=cache_env)
        assert result.output.splitlines()[0] == "a=b"

    def test_set_requires_equals(self, cache_env: dict[str, str]):
        result = _invoke(["set", "novalue"], env=cache_env)
        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output

    def test_get_unknown_key(self, cache_env: dict[str, str]):
        result = _invoke(["get", "missing"], env=cache_env)
        assert result.exit_code == 1
        assert "not found in the local cache" in result.output

    def test_corrupt_store(self, cache_env: dict[str, str]):
        cache = Path(cache_env["GYP_CLI_CACHE_PATH"])
        cache.mkdir()
        (cache / "config.json").write_text("{")
        result = _invoke(["get", "python"], env=cache_env)
        assert result.exit_code == 1
        assert "Cannot read config store" in result.output
