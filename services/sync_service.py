# ============================================================================
# SYNC SERVICE
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Service - Local schema files <-> remote tables
# PURPOSE: Drive one sync run from introspection to file/migration output
# CREATED: 17 OCT 2026
# ============================================================================
"""
Sync Service

One run:
1. New SyncSession (approve_all starts false)
2. Read local schema files
3. Introspect remote public tables
4. Orphan sweep: offer to back up files whose table no longer exists
5. For each table matching the pattern, act on its verdict:

    LOCAL_ONLY    report (the sweep already handled the file)
    REMOTE_ONLY   write a new file
    IDENTICAL     nothing, no output
    LOCAL_NEWER   diff remote -> local, write a migration, file untouched
    REMOTE_NEWER  diff local -> remote, overwrite without asking
    AMBIGUOUS     diff local -> remote, overwrite after confirmation

A declined overwrite skips that table and the run continues.

Usage:
    from services.sync_service import SyncOptions, sync_all_tables

    session = await sync_all_tables(SyncOptions(
        connection_string=conninfo,
        schema_dir=Path("supabase/schemas"),
    ), confirmer)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from core.config import IntrospectionDefaults
from core.contracts import Verdict
from core.logging import ComponentType, get_logger, log_context
from core.models import LocalSchemaFile, SchemaObject, SyncSession
from services.confirmation import Confirmer
from services.diff_renderer import render_diff
from services.introspection_service import introspection_session
from services.local_reader import read_local_schemas
from services.migration_service import generate_migration
from services.reconciler import TableDecision, plan
from services.schema_writer import backup_orphaned_files, write_schema_file

logger = get_logger(__name__, ComponentType.SERVICE)


@dataclass
class SyncOptions:
    """Options for one sync run."""
    connection_string: Optional[str]
    schema_dir: Path
    table_pattern: str = "*"
    force: bool = False
    migrations_base_dir: Optional[Path] = None


def _print_diff(decision: TableDecision) -> None:
    local_ddl = decision.local.normalized_ddl
    remote_ddl = decision.normalized_remote or ""
    if decision.verdict is Verdict.LOCAL_NEWER:
        lines = render_diff(remote_ddl, local_ddl)
    else:
        lines = render_diff(local_ddl, remote_ddl)
    for line in lines:
        print(line)


def apply_decision(
    decision: TableDecision,
    options: SyncOptions,
    session: SyncSession,
    confirmer: Confirmer,
) -> None:
    """
    Act on one table's verdict.

    Args:
        decision: Verdict plus local/remote inputs
        options: Sync options
        session: Current sync session
        confirmer: Prompt implementation
    """
    table = decision.table
    verdict = decision.verdict
    file_name = f"{table}.sql"

    if verdict is Verdict.IDENTICAL:
        return

    if verdict is Verdict.LOCAL_ONLY:
        outcome = "backed up" if table in session.orphans_moved else "kept"
        print(f"[{table}] local only - does not exist remotely ({outcome})")
        return

    if verdict is Verdict.REMOTE_ONLY:
        print(f"[{table}] remote only - fetching schema")
        remote = decision.remote
        if write_schema_file(
            remote.ddl, options.schema_dir, remote.timestamp, file_name, table,
            session=session, confirmer=confirmer, force=options.force,
        ):
            print(f"[{table}] created schema file")
        return

    if verdict is Verdict.LOCAL_NEWER:
        print(f"[{table}] local is {decision.local_lead_hours:.1f} hours newer - generating migration")
    elif verdict is Verdict.REMOTE_NEWER:
        print(f"[{table}] remote is {decision.remote_lead_hours:.1f} hours newer - updating local")
    else:
        print(f"[{table}] difference detected - confirmation required")

    _print_diff(decision)

    if verdict is Verdict.LOCAL_NEWER:
        base_dir = options.migrations_base_dir or Path.cwd()
        path = generate_migration(table, decision.normalized_remote, decision.local.normalized_ddl, base_dir)
        session.migrations.append(str(path))
        return

    remote = decision.remote
    force = options.force or verdict is Verdict.REMOTE_NEWER
    if write_schema_file(
        remote.ddl, options.schema_dir, remote.timestamp, file_name, table,
        session=session, confirmer=confirmer, force=force,
    ):
        print(f"[{table}] updated local file")


def run_sync(
    local: Mapping[str, LocalSchemaFile],
    remote: Mapping[str, SchemaObject],
    options: SyncOptions,
    confirmer: Confirmer,
) -> SyncSession:
    """
    Reconcile already-loaded local and remote snapshots.

    Args:
        local: Table name -> local file
        remote: Table name -> remote table
        options: Sync options
        confirmer: Prompt implementation

    Returns:
        The session, with what was written, skipped and generated
    """
    session = SyncSession(force=options.force)

    moved = backup_orphaned_files(options.schema_dir, remote.keys(), session, confirmer, force=options.force)
    session.orphans_moved = [path.stem for path in moved]

    decisions = plan(local, remote, options.table_pattern)
    counts: Dict[Verdict, int] = {}
    for decision in decisions:
        counts[decision.verdict] = counts.get(decision.verdict, 0) + 1
        with log_context(table=decision.table):
            apply_decision(decision, options, session, confirmer)

    summary = ", ".join(f"{verdict.value}={count}" for verdict, count in counts.items())
    logger.info(f"Sync finished for {len(decisions)} tables ({summary or 'none'})")
    return session


async def sync_all_tables(
    options: SyncOptions,
    confirmer: Confirmer,
    defaults: Optional[IntrospectionDefaults] = None,
) -> SyncSession:
    """
    Sync every table schema between the database and the schema directory.

    Raises:
        ConfigurationError: Missing or malformed connection string
        DatabaseConnectionError: Connection failure
        OSError: A local schema file could not be read
    """
    with log_context(command="sync"):
        local = read_local_schemas(options.schema_dir)
        async with introspection_session(options.connection_string, defaults) as service:
            remote = await service.fetch_remote_tables()
        logger.info(f"Comparing {len(local)} local files with {len(remote)} remote tables")
        return run_sync(local, remote, options, confirmer)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SyncOptions",
    "apply_decision",
    "run_sync",
    "sync_all_tables",
]
