# ============================================================================
# DDL UTILITIES
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core - Text utilities shared by reader, reconciler and renderers
# PURPOSE: DDL normalization, display formatting, name patterns, literals
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: normalize_ddl, format_sql, wildcard_match, pattern_search,
#          quote_literal, strip_comment_lines, qualified_object_name
# DEPENDENCIES: re
# ============================================================================
"""
DDL Utilities - Shared text handling for schema files.

normalize_ddl is the single definition of DDL equivalence: two DDLs are
the same iff their normalized forms are character-equal. It is
idempotent, so a normalized DDL normalizes to itself.

Usage:
    from core.schema.ddl_utils import normalize_ddl, wildcard_match

    if normalize_ddl(local) == normalize_ddl(remote):
        ...

    wildcard_match("user_profiles", "user_*")   # True
"""

import re
from typing import Iterable


# ============================================================================
# NORMALIZATION
# ============================================================================

_WHITESPACE_RUN = re.compile(r"\s+")
_SEMICOLON_GAP = re.compile(r";\s+")


def normalize_ddl(ddl: str) -> str:
    """
    Canonical form of a DDL string for comparison.

    Every whitespace run becomes a single space, every semicolon followed
    by whitespace becomes semicolon plus newline, and the result is
    trimmed.

    Args:
        ddl: Raw DDL text

    Returns:
        Normalized DDL
    """
    collapsed = _WHITESPACE_RUN.sub(" ", ddl)
    return _SEMICOLON_GAP.sub(";\n", collapsed).strip()


def strip_comment_lines(content: str) -> str:
    """
    DDL body of a schema file.

    Drops blank lines and lines starting with "--" (after trimming),
    joins the rest with newlines and trims the result.
    """
    kept = []
    for line in content.split("\n"):
        trimmed = line.strip()
        if trimmed and not trimmed.startswith("--"):
            kept.append(line)
    return "\n".join(kept).strip()


def comparable_ddl(ddl: str) -> str:
    """
    Normalized DDL body with comment and blank lines removed.

    Remote DDL goes through the same steps a schema file does when it is
    read back, so a freshly synced file compares equal to its source.
    """
    return normalize_ddl(strip_comment_lines(ddl))


# ============================================================================
# DISPLAY FORMATTING
# ============================================================================

_FORMAT_RULES = [
    (re.compile(r",\s*"), ",\n  "),
    (re.compile(r"\s*\(\s*"), " (\n  "),
    (re.compile(r"\s*\)"), "\n)"),
    (re.compile(r"\bCREATE\s+TABLE\b"), "\nCREATE TABLE"),
    (re.compile(r"\bPRIMARY\s+KEY\b"), "\n  PRIMARY KEY"),
    (re.compile(r";\s*"), ";\n"),
]


def format_sql(sql: str) -> str:
    """
    Break normalized DDL into one clause per line for diff display.

    Only used for showing diffs; never for equivalence.

    Args:
        sql: Normalized DDL

    Returns:
        Multi-line text with no blank lines
    """
    text = sql
    for pattern, replacement in _FORMAT_RULES:
        text = pattern.sub(replacement, text)
    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


# ============================================================================
# NAME PATTERNS
# ============================================================================

def wildcard_match(name: str, pattern: str) -> bool:
    """
    Table name filter used by sync.

    "*" matches everything. A pattern containing "*" must match the whole
    name, with "*" standing for any run of characters ("user_*" matches
    "user_profiles" but not "posts"). No other character is special. A
    pattern without "*" matches any name containing it.

    Args:
        name: Table name
        pattern: Filter pattern

    Returns:
        True if the name is selected
    """
    if not pattern or pattern == "*":
        return True
    if "*" in pattern:
        regex = ".*".join(re.escape(part) for part in pattern.split("*"))
        return re.fullmatch(regex, name) is not None
    return pattern in name


def pattern_search(name: str, pattern: str) -> bool:
    """
    Object name filter used by extract.

    "*" becomes ".*" and the result is searched anywhere in the name, so
    "user*" also matches "app_users".
    """
    if not pattern or pattern == "*":
        return True
    regex = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.search(regex, name) is not None


# ============================================================================
# SQL TEXT HELPERS
# ============================================================================

def quote_literal(value: str) -> str:
    """Single-quoted SQL string literal with embedded quotes doubled."""
    return "'" + str(value).replace("'", "''") + "'"


def qualified_object_name(schema: str, name: str) -> str:
    """
    Name used for files of objects in a given schema.

    Public objects keep their bare name; others get a schema prefix.
    """
    if schema == "public":
        return name
    return f"{schema}_{name}"


def join_columns(columns: Iterable[str]) -> str:
    return ", ".join(columns)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "normalize_ddl",
    "comparable_ddl",
    "strip_comment_lines",
    "format_sql",
    "wildcard_match",
    "pattern_search",
    "quote_literal",
    "qualified_object_name",
    "join_columns",
]
