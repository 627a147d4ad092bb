"""Best-effort reader for the project's package.json."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from gyp_cli.models.project import PackageInfo

log = structlog.get_logger("gyp_cli.package")

PACKAGE_FILE = "package.json"


def read_package_info(root: str | Path) -> PackageInfo | None:
    """Read name and dependencies from ``<root>/package.json``.

    Returns ``None`` when the file is missing, unreadable, or not a JSON
    object; callers cannot tell those cases apart.  A missing or non-string
    ``name`` and a missing or non-object ``dependencies`` are tolerated.
    """
    path = Path(root) / PACKAGE_FILE
    try:
        content = path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        log.debug("package.unreadable", path=str(path))
        return None

    if not isinstance(data, dict):
        log.debug("package.not_an_object", path=str(path))
        return None

    name = data.get("name")
    if not isinstance(name, str) or not name:
        name = None

    raw_deps = data.get("dependencies")
    dependencies: dict[str, str] = {}
    if isinstance(raw_deps, dict):
        dependencies = {str(k): str(v) for k, v in raw_deps.items()}

    return PackageInfo(name=name, dependencies=dependencies)
