"""Manifest builder — create or reconcile binding.gyp from the project tree."""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

import structlog

from gyp_cli.exceptions import InvalidManifestError, ManifestExistsError, ManifestNotFoundError
from gyp_cli.models.manifest import (
    DEFAULT_TARGET_NAME,
    LOCAL_INCLUDE_DIR,
    NAN_INCLUDE,
    NODE_ADDON_API_GYP,
    NODE_ADDON_API_INCLUDE,
    BuildManifest,
    Target,
)
from gyp_cli.models.project import PackageInfo
from gyp_cli.package import read_package_info
from gyp_cli.progress import ProgressTracker
from gyp_cli.scanner import relative_sources, search_tree

log = structlog.get_logger("gyp_cli.builder")

MANIFEST_FILE = "binding.gyp"


@dataclass
class ProjectConventions:
    """Conventions detected in the project that shape the generated target."""

    target_name: str = DEFAULT_TARGET_NAME
    has_include_dir: bool = False
    has_node_addon_api: bool = False
    has_nan: bool = False

    @classmethod
    def from_package(cls, info: PackageInfo | None, has_include_dir: bool) -> ProjectConventions:
        if info is None:
            return cls(has_include_dir=has_include_dir)
        return cls(
            target_name=info.name or DEFAULT_TARGET_NAME,
            has_include_dir=has_include_dir,
            has_node_addon_api=info.has_node_addon_api,
            has_nan=info.has_nan,
        )

    def include_dirs(self) -> list[str]:
        dirs = []
        if self.has_include_dir:
            dirs.append(LOCAL_INCLUDE_DIR)
        if self.has_node_addon_api:
            dirs.append(NODE_ADDON_API_INCLUDE)
        if self.has_nan:
            dirs.append(NAN_INCLUDE)
        return dirs

    def dependencies(self) -> list[str]:
        return [NODE_ADDON_API_GYP] if self.has_node_addon_api else []


@dataclass
class UpdateResult:
    """Outcome of :meth:`ManifestBuilder.update`."""

    before: BuildManifest
    after: BuildManifest
    added_sources: list[str] = field(default_factory=list)
    removed_sources: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.before.to_dict() != self.after.to_dict()


def build_target(conventions: ProjectConventions, sources: list[str]) -> Target:
    """Create a fresh target from detected conventions and scanned sources."""
    target = Target.with_defaults(conventions.target_name, sources)
    target.include_dirs = conventions.include_dirs() or None
    target.dependencies = conventions.dependencies() or None
    return target


def _is_expansion(entry: str) -> bool:
    """gyp variable or command expansions ('<(var)', '<!@(cmd)', '>(var)') are not file paths."""
    return "<" in entry or ">" in entry


def _normalize_source(entry: str) -> str:
    return PurePosixPath(os.path.normpath(entry.replace("\\", "/"))).as_posix()


def _reconcile_entries(
    current: list[str] | None, managed: dict[str, bool]
) -> list[str] | None:
    """Add managed entries that apply, drop managed entries that no longer do.

    Entries not in *managed* are preserved in place.
    """
    entries = [e for e in (current or []) if managed.get(e, True)]
    for entry, wanted in managed.items():
        if wanted and entry not in entries:
            entries.append(entry)
    return entries or None


class ManifestBuilder:
    """
    Generate and update ``binding.gyp`` for a native addon project.

    init:   package.json -> include dir -> scan -> write (never overwrites)
    update: read manifest -> package.json -> include dir -> scan -> merge -> write if changed
    """

    def __init__(
        self,
        root: str | os.PathLike[str],
        progress: ProgressTracker | None = None,
    ) -> None:
        self.root = Path(root)
        self.progress = progress or ProgressTracker()

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_FILE

    async def init(self) -> BuildManifest:
        """Create binding.gyp from scratch.

        Raises:
            ManifestExistsError: a manifest already exists; nothing is written.
            OSError: the source tree could not be scanned.
        """
        if self.manifest_path.exists():
            raise ManifestExistsError(MANIFEST_FILE)

        conventions = self._detect_conventions()
        sources = await self._scan_sources()

        manifest = BuildManifest(targets=[build_target(conventions, sources)])
        with self.progress.track("write", f"Writing {MANIFEST_FILE}"):
            try:
                with self.manifest_path.open("x", encoding="utf-8") as fh:
                    fh.write(manifest.to_json())
            except FileExistsError:
                raise ManifestExistsError(MANIFEST_FILE) from None

        log.info(
            "builder.init.written",
            path=str(self.manifest_path),
            target=conventions.target_name,
            sources=len(sources),
        )
        return manifest

    async def update(self) -> UpdateResult:
        """Reconcile an existing binding.gyp with the current project tree.

        The primary target (named after the package, else the first one)
        gets new sources appended, sources whose file is gone removed, and
        helper-library entries added or dropped to match package.json.
        Everything else in the manifest is preserved.  The file is only
        rewritten when something changed.

        Raises:
            ManifestNotFoundError: there is no manifest to update.
            InvalidManifestError: the manifest cannot be parsed.
            OSError: the source tree could not be scanned.
        """
        if not self.manifest_path.exists():
            raise ManifestNotFoundError(MANIFEST_FILE)

        with self.progress.track("manifest", f"Reading {MANIFEST_FILE}"):
            try:
                content = self.manifest_path.read_text(encoding="utf-8")
            except UnicodeDecodeError as e:
                raise InvalidManifestError(f"{MANIFEST_FILE} is not valid UTF-8") from e
            except OSError as e:
                raise InvalidManifestError(f"Cannot read {MANIFEST_FILE}: {e}") from e
            before = BuildManifest.from_json(content)

        conventions = self._detect_conventions()
        sources = await self._scan_sources()

        after = copy.deepcopy(before)
        target = self._primary_target(after, conventions.target_name)
        if target is None:
            target = build_target(conventions, [])
            after.targets.append(target)

        kept = [
            s for s in target.sources
            if _is_expansion(s) or (self.root / _normalize_source(s)).is_file()
        ]
        removed = [s for s in target.sources if s not in kept]
        present = {_normalize_source(s) for s in kept if not _is_expansion(s)}
        added = [s for s in sources if _normalize_source(s) not in present]
        target.sources = kept + added

        managed_includes: dict[str, bool] = {}
        # an "include" entry is only ever added, never removed
        if conventions.has_include_dir:
            managed_includes[LOCAL_INCLUDE_DIR] = True
        managed_includes[NODE_ADDON_API_INCLUDE] = conventions.has_node_addon_api
        managed_includes[NAN_INCLUDE] = conventions.has_nan
        target.include_dirs = _reconcile_entries(target.include_dirs, managed_includes)
        target.dependencies = _reconcile_entries(
            target.dependencies,
            {NODE_ADDON_API_GYP: conventions.has_node_addon_api},
        )

        result = UpdateResult(
            before=before, after=after, added_sources=added, removed_sources=removed
        )
        if result.changed:
            with self.progress.track("write", f"Writing {MANIFEST_FILE}"):
                self.manifest_path.write_text(after.to_json(), encoding="utf-8")
            log.info(
                "builder.update.written",
                path=str(self.manifest_path),
                added=len(added),
                removed=len(removed),
            )
        else:
            log.info("builder.update.unchanged", path=str(self.manifest_path))
        return result

    # ── helpers ──────────────────────────────────────────────────────────

    def _detect_conventions(self) -> ProjectConventions:
        self.progress.start("package", "Parsing local package.json")
        info = read_package_info(self.root)
        if info is None:
            self.progress.fail("package", "using defaults")
        else:
            self.progress.succeed("package", info.name or "")

        self.progress.start("include", f"/{LOCAL_INCLUDE_DIR} dir exist")
        has_include_dir = (self.root / LOCAL_INCLUDE_DIR).exists()
        if has_include_dir:
            self.progress.succeed("include")
        else:
            self.progress.fail("include")

        conventions = ProjectConventions.from_package(info, has_include_dir)
        log.debug(
            "builder.conventions",
            target=conventions.target_name,
            include_dir=conventions.has_include_dir,
            node_addon_api=conventions.has_node_addon_api,
            nan=conventions.has_nan,
        )
        return conventions

    async def _scan_sources(self) -> list[str]:
        with self.progress.track(
            "sources", "Search for .c, .cc and .cpp files in the local tree"
        ) as phase:
            sources = relative_sources(self.root, await search_tree(self.root))
            phase.detail = f"{len(sources)} file(s)"
        return sources

    @staticmethod
    def _primary_target(manifest: BuildManifest, target_name: str) -> Target | None:
        for target in manifest.targets:
            if target.target_name == target_name:
                return target
        return manifest.targets[0] if manifest.targets else None
