"""Console diff between two manifest documents."""

from __future__ import annotations

import difflib
import json
from typing import Any

import click


def diff_lines(before: dict[str, Any], after: dict[str, Any]) -> list[str]:
    """Return unified-diff lines (without file headers) between two JSON documents."""
    old = json.dumps(before, indent=4).splitlines() if before else []
    new = json.dumps(after, indent=4).splitlines() if after else []
    lines = list(difflib.unified_diff(old, new, lineterm="", n=max(len(old), len(new))))
    # Drop the "---" / "+++" headers and "@@" hunk markers
    return [line for line in lines[2:] if not line.startswith("@@")]


def render_diff(before: dict[str, Any], after: dict[str, Any]) -> str:
    """Colorize :func:`diff_lines` for terminal output."""
    out = []
    for line in diff_lines(before, after):
        if line.startswith("+"):
            out.append(click.style(line, fg="green"))
        elif line.startswith("-"):
            out.append(click.style(line, fg="red"))
        else:
            out.append(click.style(line, fg="bright_black"))
    return "\n".join(out)
