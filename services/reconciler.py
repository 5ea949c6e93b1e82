# ============================================================================
# RECONCILIATION DECISION ENGINE
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Service - Pure local/remote comparison
# PURPOSE: Decide, per table, what sync should do
# CREATED: 17 OCT 2026
# ============================================================================
"""
Reconciliation Decision Engine

Compares local schema files with introspected remote tables and yields a
Verdict per table. Performs no I/O.

Decision for a table present on both sides whose normalized DDLs differ:

    is_local_file_newer = local.file_timestamp > remote.timestamp
    is_remote_newer     = remote.timestamp > local.embedded_timestamp

    local file newer -> LOCAL_NEWER   (checked first)
    remote newer     -> REMOTE_NEWER
    otherwise        -> AMBIGUOUS

The two comparisons use different local timestamps on purpose: the file
mtime says whether someone edited the file after the remote last changed,
the embedded header says which remote state the file was synced from.

Usage:
    from services.reconciler import reconcile

    verdicts = reconcile(local_files, remote_tables, pattern="user_*")
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from core.contracts import Verdict
from core.models import LocalSchemaFile, SchemaObject
from core.schema.ddl_utils import comparable_ddl, wildcard_match


@dataclass
class TableDecision:
    """
    Verdict for one table plus the inputs needed to act on it.
    """
    table: str
    verdict: Verdict
    local: Optional[LocalSchemaFile] = None
    remote: Optional[SchemaObject] = None
    normalized_remote: Optional[str] = None

    @property
    def local_lead_hours(self) -> float:
        """How far the local file mtime is ahead of the remote, in hours."""
        if not self.local or not self.remote:
            return 0.0
        return abs(self.local.file_timestamp - self.remote.timestamp) / 3600

    @property
    def remote_lead_hours(self) -> float:
        """How far the remote is ahead of the embedded timestamp, in hours."""
        if not self.local or not self.remote:
            return 0.0
        return abs(self.remote.timestamp - self.local.embedded_timestamp) / 3600


def classify(
    local: Optional[LocalSchemaFile],
    remote: Optional[SchemaObject],
) -> Verdict:
    """
    Verdict for a single table.

    Args:
        local: Local file, if any
        remote: Remote table, if any

    Returns:
        Verdict

    Raises:
        ValueError: If both sides are missing
    """
    if local is None and remote is None:
        raise ValueError("classify() needs at least one side")
    if remote is None:
        return Verdict.LOCAL_ONLY
    if local is None:
        return Verdict.REMOTE_ONLY

    if local.normalized_ddl == comparable_ddl(remote.ddl):
        return Verdict.IDENTICAL

    is_remote_newer = remote.timestamp > local.embedded_timestamp
    is_local_file_newer = local.file_timestamp > remote.timestamp

    if is_local_file_newer:
        return Verdict.LOCAL_NEWER
    if is_remote_newer:
        return Verdict.REMOTE_NEWER
    return Verdict.AMBIGUOUS


def table_universe(
    local: Mapping[str, LocalSchemaFile],
    remote: Mapping[str, SchemaObject],
) -> List[str]:
    """Union of local and remote names; local order first, then new remote names."""
    names = list(local.keys())
    seen = set(names)
    for name in remote.keys():
        if name not in seen:
            names.append(name)
            seen.add(name)
    return names


def plan(
    local: Mapping[str, LocalSchemaFile],
    remote: Mapping[str, SchemaObject],
    pattern: str = "*",
) -> List[TableDecision]:
    """
    Decisions for every table matching the pattern.

    Args:
        local: Table name -> local file
        remote: Table name -> remote table
        pattern: Table name filter

    Returns:
        TableDecision list in table-universe order
    """
    decisions = []
    for name in table_universe(local, remote):
        if not wildcard_match(name, pattern):
            continue
        local_file = local.get(name)
        remote_table = remote.get(name)
        decisions.append(TableDecision(
            table=name,
            verdict=classify(local_file, remote_table),
            local=local_file,
            remote=remote_table,
            normalized_remote=comparable_ddl(remote_table.ddl) if remote_table else None,
        ))
    return decisions


def reconcile(
    local: Mapping[str, LocalSchemaFile],
    remote: Mapping[str, SchemaObject],
    pattern: str = "*",
) -> Dict[str, Verdict]:
    """
    Verdict per table name matching the pattern.

    Args:
        local: Table name -> local file
        remote: Table name -> remote table
        pattern: Table name filter

    Returns:
        Table name -> Verdict
    """
    return {d.table: d.verdict for d in plan(local, remote, pattern)}


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "TableDecision",
    "classify",
    "table_universe",
    "plan",
    "reconcile",
]
