# ============================================================================
# SCHEMA WRITER TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Tests - Write, backup and orphan sweep
# PURPOSE: Verify provenance headers and the confirmation protocol
# CREATED: 17 OCT 2026
# ============================================================================
"""
Schema Writer Tests

Uses ScriptedConfirmer in place of the terminal.

Run with:
    pytest tests/test_schema_writer.py -v
"""

from datetime import datetime, timezone

from core.contracts import ConfirmResponse
from core.models import SyncSession
from services.confirmation import ScriptedConfirmer
from services.local_reader import read_local_schemas
from services.schema_writer import (
    WARNING_LINE,
    backup_file_name,
    backup_orphaned_files,
    find_orphaned_files,
    iso_utc,
    provenance_header,
    write_schema_file,
)


DDL = "CREATE TABLE IF NOT EXISTS users (\n  id uuid NOT NULL\n);\n"


def _write(schema_dir, session, confirmer, force=False, ddl=DDL, name="users"):
    return write_schema_file(
        ddl, schema_dir, 1767225600, f"{name}.sql", name,
        session=session, confirmer=confirmer, force=force,
    )


# ============================================================================
# HEADERS
# ============================================================================

class TestHeaders:

    def test_iso_utc_millis(self):
        assert iso_utc(1767225600) == "2026-01-01T00:00:00.000Z"
        moment = datetime(2026, 10, 17, 9, 5, 12, 345678, tzinfo=timezone.utc)
        assert iso_utc(moment) == "2026-10-17T09:05:12.345Z"

    def test_backup_file_name_is_filesystem_safe(self):
        moment = datetime(2026, 10, 17, 9, 5, 12, 345000, tzinfo=timezone.utc)
        assert backup_file_name("users.sql", moment) == "2026-10-17T09-05-12-345Z_users.sql"

    def test_provenance_header_lines(self):
        lines = provenance_header(1767225600, "users").split("\n")
        assert lines[0] == "-- Remote last updated: 2026-01-01T00:00:00.000Z"
        assert lines[1].startswith("-- Synced by supatool at: ")
        assert lines[2] == WARNING_LINE
        assert lines[3] == "-- Table: users"
        assert lines[4] == ""


# ============================================================================
# WRITE
# ============================================================================

class TestWriteSchemaFile:

    def test_new_file_needs_no_confirmation(self, tmp_path):
        session, confirmer = SyncSession(), ScriptedConfirmer()

        assert _write(tmp_path, session, confirmer)

        assert confirmer.prompts == []
        assert session.written == ["users"]
        content = (tmp_path / "users.sql").read_text(encoding="utf-8")
        assert content.startswith("-- Remote last updated: 2026-01-01T00:00:00.000Z\n")
        assert content.endswith(DDL)

    def test_written_file_reads_back_with_remote_timestamp(self, tmp_path):
        _write(tmp_path, SyncSession(), ScriptedConfirmer())

        users = read_local_schemas(tmp_path)["users"]

        assert users.embedded_timestamp == 1767225600
        assert users.raw_ddl == DDL.strip()

    def test_table_marker_written_once(self, tmp_path):
        _write(tmp_path, SyncSession(), ScriptedConfirmer(), ddl="-- Table: users\n" + DDL)

        content = (tmp_path / "users.sql").read_text(encoding="utf-8")
        assert content.count("-- Table: users") == 1
        assert content.endswith(DDL)

    def test_creates_schema_dir(self, tmp_path):
        target = tmp_path / "supabase" / "schemas"
        assert _write(target, SyncSession(), ScriptedConfirmer())
        assert (target / "users.sql").exists()

    def test_overwrite_declined_keeps_file(self, tmp_path):
        (tmp_path / "users.sql").write_text("old", encoding="utf-8")
        session = SyncSession()
        confirmer = ScriptedConfirmer([ConfirmResponse.NO])

        assert not _write(tmp_path, session, confirmer)

        assert (tmp_path / "users.sql").read_text(encoding="utf-8") == "old"
        assert session.skipped == ["users"]
        assert not (tmp_path / "backup").exists()

    def test_overwrite_approved_moves_old_file_to_backup(self, tmp_path):
        (tmp_path / "users.sql").write_text("old", encoding="utf-8")
        session = SyncSession()

        assert _write(tmp_path, session, ScriptedConfirmer([ConfirmResponse.YES]))

        backups = list((tmp_path / "backup").iterdir())
        assert len(backups) == 1
        assert backups[0].name.endswith("_users.sql")
        assert backups[0].read_text(encoding="utf-8") == "old"
        assert session.backed_up == [str(backups[0])]

    def test_approve_all_stops_asking(self, tmp_path):
        for name in ("a", "b", "c"):
            (tmp_path / f"{name}.sql").write_text("old", encoding="utf-8")
        session = SyncSession()
        confirmer = ScriptedConfirmer([ConfirmResponse.ALL])

        for name in ("a", "b", "c"):
            assert _write(tmp_path, session, confirmer, name=name)

        assert len(confirmer.prompts) == 1
        assert session.approve_all
        assert len(list((tmp_path / "backup").iterdir())) == 3

    def test_force_skips_prompt(self, tmp_path):
        (tmp_path / "users.sql").write_text("old", encoding="utf-8")
        confirmer = ScriptedConfirmer()

        assert _write(tmp_path, SyncSession(), confirmer, force=True)

        assert confirmer.prompts == []

    def test_backup_names_do_not_collide(self, tmp_path):
        session = SyncSession(force=True)
        for _ in range(3):
            (tmp_path / "users.sql").write_text("old", encoding="utf-8")
            _write(tmp_path, session, ScriptedConfirmer())

        names = {p.name for p in (tmp_path / "backup").iterdir()}
        assert len(names) == 3


# ============================================================================
# ORPHANS
# ============================================================================

class TestOrphans:

    def test_find_orphaned_files(self, tmp_path):
        for name in ("users", "legacy", "old_table"):
            (tmp_path / f"{name}.sql").write_text(DDL, encoding="utf-8")

        orphans = find_orphaned_files(tmp_path, ["users"])

        assert [p.name for p in orphans] == ["legacy.sql", "old_table.sql"]

    def test_single_confirmation_for_batch(self, tmp_path):
        for name in ("users", "legacy", "old_table"):
            (tmp_path / f"{name}.sql").write_text(DDL, encoding="utf-8")
        session = SyncSession()
        confirmer = ScriptedConfirmer([ConfirmResponse.YES])

        moved = backup_orphaned_files(tmp_path, ["users"], session, confirmer)

        assert len(moved) == 2
        assert len(confirmer.prompts) == 1
        assert (tmp_path / "users.sql").exists()
        assert not (tmp_path / "legacy.sql").exists()
        assert len(list((tmp_path / "backup").iterdir())) == 2

    def test_declined_sweep_leaves_files(self, tmp_path):
        (tmp_path / "legacy.sql").write_text(DDL, encoding="utf-8")

        moved = backup_orphaned_files(tmp_path, [], SyncSession(), ScriptedConfirmer([ConfirmResponse.NO]))

        assert moved == []
        assert (tmp_path / "legacy.sql").exists()

    def test_nothing_to_sweep_asks_nothing(self, tmp_path):
        confirmer = ScriptedConfirmer()
        assert backup_orphaned_files(tmp_path, [], SyncSession(), confirmer) == []
        assert confirmer.prompts == []
