"""Data models for the binding.gyp build manifest."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any

from gyp_cli.exceptions import InvalidManifestError

DEFAULT_TARGET_NAME = "binding"
LOCAL_INCLUDE_DIR = "include"
NODE_ADDON_API_INCLUDE = "<!@(node -p \"require('node-addon-api').include\")"
NODE_ADDON_API_GYP = "<!(node -p \"require('node-addon-api').gyp\")"
NAN_INCLUDE = "<!(node -e \"require('nan')\")"

# Exception handling is disabled for every generated target
DEFAULT_DEFINES = ["NAPI_DISABLE_CPP_EXCEPTIONS"]
DEFAULT_CFLAGS_REMOVED = ["-fno-exceptions"]
DEFAULT_MSVS_SETTINGS = {"VCCLCompilerTool": {"ExceptionHandling": 1}}

# JSON key -> attribute name, in serialization order
_KNOWN_KEYS: list[tuple[str, str]] = [
    ("target_name", "target_name"),
    ("sources", "sources"),
    ("include_dirs", "include_dirs"),
    ("defines", "defines"),
    ("cflags!", "cflags_removed"),
    ("cflags_cc!", "cflags_cc_removed"),
    ("msvs_settings", "msvs_settings"),
    ("dependencies", "dependencies"),
]
_LIST_KEYS = {"sources", "include_dirs", "defines", "cflags!", "cflags_cc!", "dependencies"}


@dataclass
class Target:
    """One buildable unit of a manifest.

    Optional fields set to ``None`` are omitted from the serialized output,
    and so are empty ``include_dirs`` / ``dependencies`` lists.  Keys this
    model does not know about are kept in ``extra`` and written back after
    the known ones.
    """

    target_name: str = DEFAULT_TARGET_NAME
    sources: list[str] = field(default_factory=list)
    include_dirs: list[str] | None = None
    defines: list[str] | None = None
    cflags_removed: list[str] | None = None
    cflags_cc_removed: list[str] | None = None
    msvs_settings: dict[str, Any] | None = None
    dependencies: list[str] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def with_defaults(cls, target_name: str, sources: list[str]) -> Target:
        """Create a target carrying the conventional compiler flags."""
        return cls(
            target_name=target_name or DEFAULT_TARGET_NAME,
            sources=list(sources),
            defines=list(DEFAULT_DEFINES),
            cflags_removed=list(DEFAULT_CFLAGS_REMOVED),
            cflags_cc_removed=list(DEFAULT_CFLAGS_REMOVED),
            msvs_settings=copy.deepcopy(DEFAULT_MSVS_SETTINGS),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for key, attr in _KNOWN_KEYS:
            value = getattr(self, attr)
            if value is None:
                continue
            if key in ("include_dirs", "dependencies") and not value:
                continue
            data[key] = copy.deepcopy(value)
        for key, value in self.extra.items():
            data[key] = copy.deepcopy(value)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Target:
        if not isinstance(data, dict):
            raise InvalidManifestError(f"target must be a JSON object, got {type(data).__name__}")
        name = data.get("target_name")
        if not isinstance(name, str) or not name:
            raise InvalidManifestError("target is missing a non-empty 'target_name'")

        kwargs: dict[str, Any] = {}
        for key, attr in _KNOWN_KEYS:
            if key not in data:
                continue
            value = data[key]
            if key in _LIST_KEYS and not isinstance(value, list):
                raise InvalidManifestError(f"'{key}' of target '{name}' must be a list")
            if key in _LIST_KEYS and not all(isinstance(s, str) for s in value):
                raise InvalidManifestError(f"'{key}' of target '{name}' must hold strings")
            kwargs[attr] = copy.deepcopy(value)
        known = {key for key, _ in _KNOWN_KEYS}
        extra = {k: copy.deepcopy(v) for k, v in data.items() if k not in known}
        kwargs.setdefault("sources", [])
        return cls(extra=extra, **kwargs)


@dataclass
class BuildManifest:
    """Top-level binding.gyp document."""

    targets: list[Target] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)  # e.g. top-level "variables"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"targets": [t.to_dict() for t in self.targets]}
        for key, value in self.extra.items():
            data[key] = copy.deepcopy(value)
        return data

    def to_json(self) -> str:
        """Serialize with the 4-space indentation used by binding.gyp files."""
        return json.dumps(self.to_dict(), indent=4) + "\n"

    @classmethod
    def from_dict(cls, data: Any) -> BuildManifest:
        if not isinstance(data, dict):
            raise InvalidManifestError("manifest must be a JSON object")
        targets = data.get("targets", [])
        if not isinstance(targets, list):
            raise InvalidManifestError("'targets' must be a list")
        extra = {k: copy.deepcopy(v) for k, v in data.items() if k != "targets"}
        return cls(targets=[Target.from_dict(t) for t in targets], extra=extra)

    @classmethod
    def from_json(cls, content: str) -> BuildManifest:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise InvalidManifestError(f"Invalid JSON: {e}") from e
        return cls.from_dict(data)
