"""Data models for project metadata read from package.json."""

from __future__ import annotations

from dataclasses import dataclass, field

NODE_ADDON_API = "node-addon-api"
NAN = "nan"


@dataclass
class PackageInfo:
    """Subset of package.json that drives manifest generation."""

    name: str | None = None
    dependencies: dict[str, str] = field(default_factory=dict)  # {"node-addon-api": "^1.0.0"}

    @property
    def has_node_addon_api(self) -> bool:
        return NODE_ADDON_API in self.dependencies

    @property
    def has_nan(self) -> bool:
        return NAN in self.dependencies
