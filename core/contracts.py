# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Foundation - Core enums shared by every component
# PURPOSE: Object kinds, reconciliation verdicts, confirmation responses
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: ObjectKind, Verdict, ConfirmResponse, EPOCH_SENTINEL
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for supatool.

These enums cross every boundary in the tool:
- Catalog introspection (what kind of object was read)
- Reconciliation (what should happen to a table file)
- Interactive confirmation (what the user answered)
"""

from enum import Enum


# Fallback "last modified" when the catalog has no vacuum/analyze history.
# 2020-01-01T00:00:00Z
EPOCH_SENTINEL = 1577836800


# ============================================================================
# OBJECT KINDS
# ============================================================================

class ObjectKind(str, Enum):
    """
    Kinds of schema objects extracted from the database.

    Declaration order is the order used in index files and summaries.
    """
    TABLE = "table"
    VIEW = "view"
    RLS = "rls"
    FUNCTION = "function"
    TRIGGER = "trigger"
    CRON = "cron"
    TYPE = "type"

    @property
    def directory(self) -> str:
        """Subdirectory used when extracting into separate directories."""
        return _DIRECTORIES[self]

    @property
    def label(self) -> str:
        """Human readable plural label."""
        return _LABELS[self]

    def file_name(self, name: str) -> str:
        """
        File name for an object of this kind.

        Functions and triggers get a prefix so they can share rpc/.
        """
        if self is ObjectKind.FUNCTION:
            return f"fn_{name}.sql"
        if self is ObjectKind.TRIGGER:
            return f"trg_{name}.sql"
        return f"{name}.sql"


_DIRECTORIES = {
    ObjectKind.TABLE: "tables",
    ObjectKind.VIEW: "views",
    ObjectKind.RLS: "rls",
    ObjectKind.FUNCTION: "rpc",
    ObjectKind.TRIGGER: "rpc",
    ObjectKind.CRON: "cron",
    ObjectKind.TYPE: "types",
}

_LABELS = {
    ObjectKind.TABLE: "Tables",
    ObjectKind.VIEW: "Views",
    ObjectKind.RLS: "RLS Policies",
    ObjectKind.FUNCTION: "Functions",
    ObjectKind.TRIGGER: "Triggers",
    ObjectKind.CRON: "Cron Jobs",
    ObjectKind.TYPE: "Custom Types",
}


# ============================================================================
# RECONCILIATION
# ============================================================================

class Verdict(str, Enum):
    """
    Outcome of comparing one table's local file against the database.

    Actions:
        LOCAL_ONLY   -> report only (file is swept by the orphan backup)
        REMOTE_ONLY  -> write a new local file
        IDENTICAL    -> nothing
        LOCAL_NEWER  -> generate a migration, local file untouched
        REMOTE_NEWER -> overwrite local file without asking
        AMBIGUOUS    -> overwrite local file after confirmation
    """
    LOCAL_ONLY = "local_only"
    REMOTE_ONLY = "remote_only"
    IDENTICAL = "identical"
    LOCAL_NEWER = "local_newer"
    REMOTE_NEWER = "remote_newer"
    AMBIGUOUS = "ambiguous"

    def needs_diff(self) -> bool:
        """Whether a diff is shown before acting on this verdict."""
        return self in (Verdict.LOCAL_NEWER, Verdict.REMOTE_NEWER, Verdict.AMBIGUOUS)


# ============================================================================
# CONFIRMATION
# ============================================================================

class ConfirmResponse(str, Enum):
    """Answer to an overwrite prompt."""
    YES = "yes"
    NO = "no"
    ALL = "all"          # Yes, and stop asking for the rest of the session

    @property
    def approved(self) -> bool:
        return self is not ConfirmResponse.NO


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "EPOCH_SENTINEL",
    "ObjectKind",
    "Verdict",
    "ConfirmResponse",
]
