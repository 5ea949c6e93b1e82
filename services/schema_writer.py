# ============================================================================
# SCHEMA FILE WRITER / BACKUP MANAGER
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Service - Write synced schema files with provenance headers
# PURPOSE: Backup-before-overwrite, confirmation protocol, orphan sweep
# CREATED: 17 OCT 2026
# ============================================================================
"""
Schema File Writer / Backup Manager

Applies sync decisions to disk.

Every written file starts with a provenance header:

    -- Remote last updated: 2026-10-17T09:00:00.000Z
    -- Synced by supatool at: 2026-10-17T09:05:12.345Z
    -- ⚠️  This file is auto-generated by supatool. Manual edits may be lost on sync.
    -- Table: users

    CREATE TABLE ...

An existing file is moved (not copied) into <schema_dir>/backup/ before it
is replaced, under a timestamp-prefixed name. Backup then write is not
atomic: a crash in between leaves the table without a current file.

Unless forced, replacing an existing file asks the Confirmer first. An
"all" answer sets session.approve_all for the rest of the run. A declined
prompt skips that one file and is not an error.

Usage:
    from services.schema_writer import write_schema_file

    written = write_schema_file(
        ddl, schema_dir, remote.timestamp, "users.sql", "users",
        session=session, confirmer=confirmer,
    )
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Union

from core.config import get_defaults
from core.contracts import ConfirmResponse
from core.logging import ComponentType, get_logger
from core.models import SyncSession
from services.confirmation import Confirmer

logger = get_logger(__name__, ComponentType.WRITER)

WARNING_LINE = "-- ⚠️  This file is auto-generated by supatool. Manual edits may be lost on sync."


# ============================================================================
# TIMESTAMPS
# ============================================================================

def iso_utc(moment: Optional[Union[int, float, datetime]] = None) -> str:
    """
    ISO-8601 UTC text with millisecond precision and a trailing Z.

    Args:
        moment: Unix seconds, a datetime, or None for now

    Returns:
        e.g. "2026-10-17T09:05:12.345Z"
    """
    if moment is None:
        value = datetime.now(timezone.utc)
    elif isinstance(moment, datetime):
        value = moment.astimezone(timezone.utc)
    else:
        value = datetime.fromtimestamp(moment, tz=timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def backup_file_name(file_name: str, moment: Optional[datetime] = None) -> str:
    """Timestamp-prefixed backup name, with ':' and '.' made filesystem safe."""
    stamp = iso_utc(moment).replace(":", "-").replace(".", "-")
    return f"{stamp}_{file_name}"


def provenance_header(remote_timestamp: int, table_name: str) -> str:
    """Header block written above the DDL of every synced file."""
    return (
        f"-- Remote last updated: {iso_utc(remote_timestamp)}\n"
        f"-- Synced by supatool at: {iso_utc()}\n"
        f"{WARNING_LINE}\n"
        f"-- Table: {table_name}\n\n"
    )


# ============================================================================
# BACKUP
# ============================================================================

def _move_to_backup(path: Path, schema_dir: Path) -> Path:
    backup_dir = schema_dir / get_defaults().sync.backup_dir_name
    backup_dir.mkdir(parents=True, exist_ok=True)

    base = backup_dir / backup_file_name(path.name)
    target = base
    suffix = 1
    while target.exists():
        target = backup_dir / f"{base.stem}-{suffix}{base.suffix}"
        suffix += 1

    path.rename(target)
    return target


def backup_existing_file(
    path: Union[str, Path],
    schema_dir: Union[str, Path],
    session: SyncSession,
    confirmer: Confirmer,
    force: bool = False,
) -> bool:
    """
    Move an existing file into the backup directory.

    Asks first unless forced or the session already approved everything.

    Args:
        path: File that is about to be replaced
        schema_dir: Schema directory owning the backup/ folder
        session: Current sync session
        confirmer: Prompt implementation
        force: Skip the prompt

    Returns:
        True if the caller may write to path (nothing there, or backed up);
        False if the user declined
    """
    path = Path(path)
    schema_dir = Path(schema_dir)

    if not path.exists():
        return True

    if not force and not session.skip_prompts:
        response = confirmer.ask(f"↓ Overwrite existing file {path.name}?", allow_all=True)
        if response is ConfirmResponse.ALL:
            session.approve_all = True
            print("✅ Approving all remaining files")
        elif not response.approved:
            print("Skipped")
            return False

    target = _move_to_backup(path, schema_dir)
    session.backed_up.append(str(target))
    logger.info(f"Backed up {path.name} -> {target}")
    print(f"Backed up existing file: {target}")
    return True


def find_orphaned_files(schema_dir: Union[str, Path], remote_names: Iterable[str]) -> List[Path]:
    """
    Top-level .sql files whose stem is not a remote table name.

    Args:
        schema_dir: Schema directory
        remote_names: Names of tables present remotely

    Returns:
        Orphaned file paths, sorted
    """
    directory = Path(schema_dir)
    if not directory.is_dir():
        return []
    known = set(remote_names)
    return [
        path for path in sorted(directory.iterdir())
        if path.is_file() and path.name.endswith(".sql") and path.stem not in known
    ]


def backup_orphaned_files(
    schema_dir: Union[str, Path],
    remote_names: Iterable[str],
    session: SyncSession,
    confirmer: Confirmer,
    force: bool = False,
) -> List[Path]:
    """
    Move files for tables that no longer exist remotely into backup/.

    One aggregate confirmation covers the whole batch.

    Returns:
        Files that were moved (empty if none or declined)
    """
    orphans = find_orphaned_files(schema_dir, remote_names)
    if not orphans:
        return []

    if not force:
        print("\nThe following files belong to tables that do not exist remotely:")
        for path in orphans:
            print(f"  - {path.name}")
        response = confirmer.ask("Move these files to the backup folder?")
        if not response.approved:
            print("Skipped moving orphaned files")
            return []

    moved = []
    for path in orphans:
        print(f"[{path.stem}] backing up file for missing table")
        # batch already confirmed
        backup_existing_file(path, schema_dir, session, confirmer, force=True)
        moved.append(path)

    logger.info(f"Moved {len(moved)} orphaned schema files to backup")
    return moved


# ============================================================================
# WRITE
# ============================================================================

def write_schema_file(
    ddl: str,
    schema_dir: Union[str, Path],
    remote_timestamp: int,
    file_name: str,
    table_name: str,
    session: SyncSession,
    confirmer: Confirmer,
    force: bool = False,
) -> bool:
    """
    Write one table's DDL with its provenance header.

    Args:
        ddl: Remote DDL text
        schema_dir: Schema directory (created if missing)
        remote_timestamp: Remote last-modified, unix seconds
        file_name: Target file name, e.g. "users.sql"
        table_name: Table name for the header
        session: Current sync session
        confirmer: Prompt implementation
        force: Overwrite without asking

    Returns:
        True if written, False if the user declined
    """
    directory = Path(schema_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / file_name

    if not backup_existing_file(path, directory, session, confirmer, force=force):
        session.skipped.append(table_name)
        return False

    # The header already names the table
    marker = f"-- Table: {table_name}\n"
    body = ddl[len(marker):] if ddl.startswith(marker) else ddl

    path.write_text(provenance_header(remote_timestamp, table_name) + body, encoding="utf-8")
    session.written.append(table_name)
    logger.debug(f"Wrote {path}")
    print(f"📁 Saved {file_name}")
    return True


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "WARNING_LINE",
    "iso_utc",
    "backup_file_name",
    "provenance_header",
    "backup_existing_file",
    "find_orphaned_files",
    "backup_orphaned_files",
    "write_schema_file",
]
