"""Tree scanner — collect native source files under a project root."""

from __future__ import annotations

import asyncio
import os
import stat
from pathlib import Path, PurePath

import structlog

log = structlog.get_logger("gyp_cli.scanner")

# Native source extensions (matched case-sensitively)
SOURCE_EXTENSIONS = frozenset({".c", ".cc", ".cpp"})

# Directory names never descended into, matched exactly
EXCLUDED_NAMES = frozenset({"node_modules", ".git"})


async def _is_dir(path: str) -> bool:
    st = await asyncio.to_thread(os.stat, path)
    return stat.S_ISDIR(st.st_mode)


async def search_tree(directory: str | os.PathLike[str]) -> list[str]:
    """Recursively collect native source files under *directory*.

    Entries of one directory are stat'ed concurrently and subdirectories are
    descended into concurrently.  Results are ordered deterministically:
    names are visited in sorted order, and the files of a directory come
    before the results of its subdirectories (concatenated in descent order).

    Returned paths are joined to *directory*.  Any ``OSError`` (unreadable
    directory, failing stat) propagates and aborts the whole scan.
    """
    directory = os.fspath(directory)
    names = sorted(await asyncio.to_thread(os.listdir, directory))
    paths = [os.path.join(directory, name) for name in names]
    is_dirs = await asyncio.gather(*(_is_dir(p) for p in paths))

    found: list[str] = []
    subdirs: list[str] = []
    for name, path, is_dir in zip(names, paths, is_dirs):
        if name in EXCLUDED_NAMES:
            continue
        if is_dir:
            subdirs.append(path)
        elif PurePath(name).suffix in SOURCE_EXTENSIONS:
            found.append(path)

    sub_results = await asyncio.gather(*(search_tree(d) for d in subdirs))
    for sub in sub_results:
        found.extend(sub)
    return found


def scan(directory: str | os.PathLike[str]) -> list[str]:
    """Synchronous wrapper around :func:`search_tree`."""
    return asyncio.run(search_tree(directory))


def relative_sources(root: str | os.PathLike[str], paths: list[str]) -> list[str]:
    """Convert scan results to root-relative POSIX paths."""
    base = Path(root)
    return [Path(p).relative_to(base).as_posix() for p in paths]
