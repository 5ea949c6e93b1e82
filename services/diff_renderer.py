# ============================================================================
# DIFF RENDERER
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Service - Colorized line diff of two DDLs
# PURPOSE: Show what sync is about to change before it acts
# CREATED: 17 OCT 2026
# ============================================================================
"""
Diff Renderer

Formats both DDLs one clause per line (format_sql), diffs them line by
line with difflib and renders the result with ANSI colors:

    + added line      (green)
    - removed line    (red)
      context line
      ...(N lines)... (cyan, collapsed unchanged run)

Unchanged runs keep one line of context next to each change. A run
between two changes is shown in full. A leading run keeps its
CREATE TABLE line so the reader knows which table is being shown.

Usage:
    from services.diff_renderer import render_diff

    for line in render_diff(from_ddl, to_ddl):
        print(line)
"""

import difflib
from dataclasses import dataclass
from typing import List

from core.schema.ddl_utils import format_sql

GREEN = "\x1b[32m"
RED = "\x1b[31m"
CYAN = "\x1b[36m"
RESET = "\x1b[0m"

CONTEXT_LINES = 1


@dataclass
class DiffPart:
    """A run of lines that were added, removed or kept."""
    kind: str            # "added", "removed" or "equal"
    lines: List[str]

    @property
    def changed(self) -> bool:
        return self.kind != "equal"


def diff_parts(from_text: str, to_text: str) -> List[DiffPart]:
    """
    Line diff as a list of runs.

    A replaced block becomes a removed run followed by an added run.
    """
    from_lines = from_text.split("\n") if from_text else []
    to_lines = to_text.split("\n") if to_text else []

    parts: List[DiffPart] = []
    matcher = difflib.SequenceMatcher(a=from_lines, b=to_lines, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            parts.append(DiffPart("equal", from_lines[i1:i2]))
        if tag in ("delete", "replace"):
            parts.append(DiffPart("removed", from_lines[i1:i2]))
        if tag in ("insert", "replace"):
            parts.append(DiffPart("added", to_lines[j1:j2]))
    return parts


def _marker(text: str) -> str:
    return f"  {CYAN}{text}{RESET}"


def _is_create_table(line: str) -> bool:
    return line.strip().upper().startswith("CREATE TABLE")


def _render_unchanged(lines: List[str], change_before: bool, change_after: bool) -> List[str]:
    out: List[str] = []

    if change_before and change_after:
        return [f"  {line}" for line in lines]

    if change_before:
        shown = min(CONTEXT_LINES, len(lines))
        out.extend(f"  {line}" for line in lines[:shown])
        if len(lines) > CONTEXT_LINES:
            out.append(_marker(f"...({len(lines) - CONTEXT_LINES} more lines)..."))
        return out

    if change_after:
        shown = min(CONTEXT_LINES, len(lines))
        start = len(lines) - shown
        create_index = next((i for i, line in enumerate(lines) if _is_create_table(line)), -1)
        if create_index >= 0 and start > 0:
            out.append(f"  {lines[create_index]}")
            if create_index < start - 1:
                out.append(_marker(f"...({start - create_index - 1} lines)..."))
        elif start > 0:
            out.append(_marker(f"...({start} lines)..."))
        out.extend(f"  {line}" for line in lines[start:])
        return out

    if len(lines) <= CONTEXT_LINES * 2:
        return [f"  {line}" for line in lines]

    create_index = next((i for i, line in enumerate(lines) if _is_create_table(line)), -1)
    if create_index >= 0:
        out.append(f"  {lines[create_index]}")
        out.append(_marker(f"...({len(lines) - 1} unchanged lines)..."))
    else:
        out.append(_marker(f"...({len(lines)} unchanged lines)..."))
    return out


def render_diff(from_ddl: str, to_ddl: str) -> List[str]:
    """
    Colorized diff lines from one normalized DDL to another.

    Args:
        from_ddl: Current state
        to_ddl: Target state

    Returns:
        Lines ready to print (ANSI colored)
    """
    parts = diff_parts(format_sql(from_ddl), format_sql(to_ddl))
    output: List[str] = []

    for index, part in enumerate(parts):
        lines = [line for line in part.lines if line.strip()]
        if part.kind == "added":
            output.extend(f"{GREEN}+ {line}{RESET}" for line in lines)
        elif part.kind == "removed":
            output.extend(f"{RED}- {line}{RESET}" for line in lines)
        elif lines:
            change_before = index > 0 and parts[index - 1].changed
            change_after = index < len(parts) - 1 and parts[index + 1].changed
            output.extend(_render_unchanged(lines, change_before, change_after))

    return output


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DiffPart",
    "diff_parts",
    "render_diff",
]
