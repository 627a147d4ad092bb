"""Tests for the best-effort package.json reader."""

from __future__ import annotations

from pathlib import Path

from gyp_cli.models.project import PackageInfo
from gyp_cli.package import read_package_info


class TestReadPackageInfo:
    def test_name_and_dependencies(self, tmp_path: Path, write_package):
        write_package({"name": "foo", "dependencies": {"node-addon-api": "1.0.0", "nan": "^2"}})
        info = read_package_info(tmp_path)
        assert info == PackageInfo(
            name="foo", dependencies={"node-addon-api": "1.0.0", "nan": "^2"}
        )
        assert info.has_node_addon_api
        assert info.has_nan

    def test_missing_file(self, tmp_path: Path):
        assert read_package_info(tmp_path) is None

    def test_invalid_json(self, tmp_path: Path, write_package):
        write_package("{not json")
        assert read_package_info(tmp_path) is None

    def test_missing_and_malformed_are_indistinguishable(self, tmp_path: Path, write_package):
        missing = read_package_info(tmp_path)
        write_package("]]")
        assert read_package_info(tmp_path) == missing

    def test_top_level_array(self, tmp_path: Path, write_package):
        write_package("[1, 2]")
        assert read_package_info(tmp_path) is None

    def test_no_name(self, tmp_path: Path, write_package):
        write_package({"dependencies": {"nan": "2.0.0"}})
        info = read_package_info(tmp_path)
        assert info is not None
        assert info.name is None
        assert info.has_nan
        assert not info.has_node_addon_api

    def test_non_string_name_ignored(self, tmp_path: Path, write_package):
        write_package({"name": 42})
        assert read_package_info(tmp_path).name is None

    def test_no_dependencies(self, tmp_path: Path, write_package):
        write_package({"name": "foo"})
        info = read_package_info(tmp_path)
        assert info.dependencies == {}
        assert not info.has_node_addon_api

    def test_non_object_dependencies_ignored(self, tmp_path: Path, write_package):
        write_package({"name": "foo", "dependencies": ["node-addon-api"]})
        info = read_package_info(tmp_path)
        assert info.name == "foo"
        assert info.dependencies == {}

    def test_dev_dependencies_do_not_count(self, tmp_path: Path, write_package):
        write_package({"name": "foo", "devDependencies": {"node-addon-api": "1.0.0"}})
        assert not read_package_info(tmp_path).has_node_addon_api
