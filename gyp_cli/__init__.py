"""gyp-cli: generate and update binding.gyp for native addon projects."""

__version__ = "1.0.0"

from gyp_cli.builder import ManifestBuilder, UpdateResult
from gyp_cli.config_store import ConfigStore
from gyp_cli.models.manifest import BuildManifest, Target
from gyp_cli.models.project import PackageInfo
from gyp_cli.package import read_package_info
from gyp_cli.scanner import scan, search_tree

__all__ = [
    "BuildManifest",
    "ConfigStore",
    "ManifestBuilder",
    "PackageInfo",
    "Target",
    "UpdateResult",
    "read_package_info",
    "scan",
    "search_tree",
]
