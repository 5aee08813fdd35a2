"""Line-level descriptions of what a rewrite changes."""

from __future__ import annotations

import difflib
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Change:
    """Original lines [start_line, end_line) replaced by ``new`` (0-based)."""

    start_line: int
    end_line: int
    old: str
    new: str


def changes(original: str, rewritten: str) -> list[Change]:
    """Return the replaced line ranges between original and rewritten text."""
    old_lines = original.splitlines(keepends=True)
    new_lines = rewritten.splitlines(keepends=True)
    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    result: list[Change] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        result.append(
            Change(
                start_line=i1,
                end_line=i2,
                old="".join(old_lines[i1:i2]),
                new="".join(new_lines[j1:j2]),
            )
        )
    return result


def unified_diff(original: str, rewritten: str, filename: str) -> str:
    """Render a unified diff in the a/ b/ style of ``git diff``."""
    return "".join(
        difflib.unified_diff(
            original.splitlines(keepends=True),
            rewritten.splitlines(keepends=True),
            fromfile=f"a/{filename}",
            tofile=f"b/{filename}",
        )
    )
