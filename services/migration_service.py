# ============================================================================
# MIGRATION GENERATOR
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Service - Forward migration drafts for locally edited tables
# PURPOSE: Capture the remote -> local delta when the local file is newer
# CREATED: 17 OCT 2026
# ============================================================================
"""
Migration Generator

When a local schema file was edited after the remote last changed, sync
does not touch the file. It writes a migration draft instead:

    supabase/migrations/<YYYYMMDDHHMMSS>_update_<table>.sql

The draft contains:
1. A header naming the table and generation time
2. A unified diff (remote -> local) as comments
3. Both normalized snapshots as comments
4. ALTER TABLE statements derived from the column lists

Section 4 is best effort. It only compares column definitions inside the
CREATE TABLE body and ignores constraints, so it must be reviewed before
it is applied. When nothing can be derived the section says so.

Usage:
    from services.migration_service import generate_migration

    path = generate_migration("users", normalized_remote, normalized_local, Path.cwd())
"""

import difflib
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

from core.config import get_defaults
from core.logging import ComponentType, get_logger
from core.schema.ddl_utils import format_sql

logger = get_logger(__name__, ComponentType.WRITER)

CREATE_TABLE_PATTERN = re.compile(
    r'CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?([\w."]+)\s*\(',
    re.IGNORECASE,
)

# Table-level entries in a CREATE TABLE body
CONSTRAINT_PREFIXES = ("PRIMARY KEY", "UNIQUE", "CONSTRAINT", "FOREIGN KEY", "CHECK", "EXCLUDE", "LIKE")

# Keywords that end the type part of a column definition
MODIFIER_KEYWORDS = {
    "NOT", "NULL", "DEFAULT", "PRIMARY", "UNIQUE", "REFERENCES",
    "CHECK", "CONSTRAINT", "GENERATED", "COLLATE",
}


# ============================================================================
# COLUMN PARSING
# ============================================================================

@dataclass
class ColumnSpec:
    """One column definition pulled out of a CREATE TABLE body."""
    name: str
    data_type: str
    not_null: bool
    default: Optional[str]
    definition: str


def _split_top_level(body: str) -> List[str]:
    parts, depth, current, quoted = [], 0, [], False
    for char in body:
        if char == "'":
            quoted = not quoted
        elif not quoted and char == "(":
            depth += 1
        elif not quoted and char == ")":
            depth -= 1
        if char == "," and depth == 0 and not quoted:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def _table_body(ddl: str) -> Optional[str]:
    match = CREATE_TABLE_PATTERN.search(ddl)
    if not match:
        return None
    start = match.end()
    depth = 1
    for index in range(start, len(ddl)):
        if ddl[index] == "(":
            depth += 1
        elif ddl[index] == ")":
            depth -= 1
            if depth == 0:
                return ddl[start:index]
    return None


def table_name_from_ddl(ddl: str) -> Optional[str]:
    """Qualified table name from the first CREATE TABLE, if any."""
    match = CREATE_TABLE_PATTERN.search(ddl)
    return match.group(1) if match else None


def parse_column(entry: str) -> Optional[ColumnSpec]:
    """Parse one body entry; constraints return None."""
    text = " ".join(entry.split())
    if not text or text.upper().startswith(CONSTRAINT_PREFIXES):
        return None

    if text.startswith('"'):
        end = text.find('"', 1)
        name, rest = text[:end + 1], text[end + 1:].strip()
    else:
        name, _, rest = text.partition(" ")

    tokens = rest.split(" ")
    type_tokens = []
    for token in tokens:
        if token.upper() in MODIFIER_KEYWORDS:
            break
        type_tokens.append(token)

    upper = rest.upper()
    default = None
    default_match = re.search(
        r"\bDEFAULT\s+(.+?)(?=\s+(?:NOT\s+NULL|NULL|PRIMARY|UNIQUE|REFERENCES|CHECK|CONSTRAINT|GENERATED)\b|$)",
        rest,
        re.IGNORECASE,
    )
    if default_match:
        default = default_match.group(1).strip()

    return ColumnSpec(
        name=name,
        data_type=" ".join(type_tokens),
        not_null="NOT NULL" in upper or "PRIMARY KEY" in upper,
        default=default,
        definition=text,
    )


def parse_columns(ddl: str) -> Dict[str, ColumnSpec]:
    """Column name -> ColumnSpec, in declaration order."""
    body = _table_body(ddl)
    if body is None:
        return {}
    columns: Dict[str, ColumnSpec] = {}
    for entry in _split_top_level(body):
        column = parse_column(entry)
        if column:
            columns[column.name] = column
    return columns


# ============================================================================
# ALTER STATEMENTS
# ============================================================================

def derive_alter_statements(table: str, from_ddl: str, to_ddl: str) -> List[str]:
    """
    Best-effort ALTER TABLE statements turning from_ddl into to_ddl.

    Only columns are compared. Renames show up as a drop plus an add.
    """
    target = table_name_from_ddl(to_ddl) or table_name_from_ddl(from_ddl) or table
    before = parse_columns(from_ddl)
    after = parse_columns(to_ddl)
    statements = []

    for name, column in after.items():
        if name not in before:
            statements.append(f"ALTER TABLE {target} ADD COLUMN {column.definition};")

    for name in before:
        if name not in after:
            statements.append(f"ALTER TABLE {target} DROP COLUMN {name};")

    for name, new in after.items():
        old = before.get(name)
        if old is None or old.definition == new.definition:
            continue
        if old.data_type != new.data_type:
            statements.append(
                f"ALTER TABLE {target} ALTER COLUMN {name} TYPE {new.data_type} USING {name}::{new.data_type};"
            )
        if old.not_null != new.not_null:
            action = "SET NOT NULL" if new.not_null else "DROP NOT NULL"
            statements.append(f"ALTER TABLE {target} ALTER COLUMN {name} {action};")
        if old.default != new.default:
            action = f"SET DEFAULT {new.default}" if new.default else "DROP DEFAULT"
            statements.append(f"ALTER TABLE {target} ALTER COLUMN {name} {action};")

    return statements


# ============================================================================
# FILE
# ============================================================================

def _commented(lines: List[str]) -> List[str]:
    return [f"-- {line}" if line else "--" for line in lines]


def render_migration(table: str, from_ddl: str, to_ddl: str, generated_at: datetime) -> str:
    """Full text of a migration draft."""
    from_lines = format_sql(from_ddl).split("\n")
    to_lines = format_sql(to_ddl).split("\n")
    diff = list(difflib.unified_diff(from_lines, to_lines, "remote", "local", lineterm=""))
    statements = derive_alter_statements(table, from_ddl, to_ddl)

    lines = [
        f"-- Migration: update {table}",
        f"-- Generated by supatool at: {generated_at.strftime('%Y-%m-%dT%H:%M:%SZ')}",
        "-- Direction: remote (current) -> local (target)",
        "-- Review before applying. Statements below are best effort.",
        "",
        "-- ---------------------------------------------------------------",
        "-- Diff",
        "-- ---------------------------------------------------------------",
        *_commented(diff),
        "",
        "-- ---------------------------------------------------------------",
        "-- Remote (from)",
        "-- ---------------------------------------------------------------",
        *_commented(from_lines),
        "",
        "-- ---------------------------------------------------------------",
        "-- Local (to)",
        "-- ---------------------------------------------------------------",
        *_commented(to_lines),
        "",
        "-- ---------------------------------------------------------------",
        "-- Statements (best effort, column changes only)",
        "-- ---------------------------------------------------------------",
    ]
    if statements:
        lines.extend(statements)
    else:
        lines.append("-- No column changes detected; write this migration by hand.")

    return "\n".join(lines) + "\n"


def generate_migration(
    table: str,
    from_ddl: str,
    to_ddl: str,
    base_dir: Union[str, Path],
    generated_at: Optional[datetime] = None,
) -> Path:
    """
    Write a migration draft for one table.

    Args:
        table: Table name
        from_ddl: Normalized remote DDL (current state)
        to_ddl: Normalized local DDL (target state)
        base_dir: Project root; migrations go under supabase/migrations
        generated_at: Override for the timestamp (UTC)

    Returns:
        Path of the written file
    """
    moment = generated_at or datetime.now(timezone.utc)
    directory = Path(base_dir) / get_defaults().sync.migrations_dir
    directory.mkdir(parents=True, exist_ok=True)

    path = directory / f"{moment.strftime('%Y%m%d%H%M%S')}_update_{table}.sql"
    path.write_text(render_migration(table, from_ddl, to_ddl, moment), encoding="utf-8")

    logger.info(f"Generated migration for {table}: {path}")
    print(f"📝 Migration written: {path}")
    return path


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ColumnSpec",
    "parse_column",
    "parse_columns",
    "table_name_from_ddl",
    "derive_alter_statements",
    "render_migration",
    "generate_migration",
]
