"""Shared pytest fixtures for gyp-cli tests."""

import json
import logging

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_logging():
    """CLI tests bind logging to captured streams; undo it afterwards."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)


@pytest.fixture
def write_package(tmp_path):
    """Write a package.json into tmp_path."""

    def _write(data) -> None:
        content = data if isinstance(data, str) else json.dumps(data)
        (tmp_path / "package.json").write_text(content)

    return _write


@pytest.fixture
def addon_project(tmp_path, write_package):
    """A small addon tree: sources at several depths, plus excluded directories."""
    write_package({"name": "foo", "dependencies": {"node-addon-api": "1.0.0"}})
    (tmp_path / "include").mkdir()
    (tmp_path / "include" / "foo.h").write_text("#pragma once\n")
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "addon.cc").write_text("")
    (tmp_path / "src" / "util.cpp").write_text("")
    (tmp_path / "src" / "deep").mkdir()
    (tmp_path / "src" / "deep" / "legacy.c").write_text("")
    (tmp_path / "node_modules" / "dep").mkdir(parents=True)
    (tmp_path / "node_modules" / "dep" / "dep.cc").write_text("")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "hook.c").write_text("")
    (tmp_path / "README.md").write_text("# foo\n")
    return tmp_path
