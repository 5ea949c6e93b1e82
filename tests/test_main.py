# ============================================================================
# CLI TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Tests - Argument parsing, dispatch and exit codes
# PURPOSE: Verify the command line without touching a database
# CREATED: 17 OCT 2026
# ============================================================================
"""
CLI Tests

Services are patched on the main module; generator commands run for real
against a model file in tmp_path.

Run with:
    pytest tests/test_main.py -v
"""

import json
import logging
from unittest.mock import AsyncMock, patch

import pytest
from psycopg.errors import QueryCanceled

from core.errors import ConnectionErrorCategory, DatabaseConnectionError
from core.models import SyncSession
from main import EXIT_FAILURE, EXIT_INTERRUPTED, EXIT_OK, HELP_TEXT, build_parser, main
from services.confirmation import ScriptedConfirmer


MODEL = """
models:
  - tables:
      posts:
        fields:
          id: {type: uuid, primary: true}
          title: {type: text}
"""


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("SUPABASE_CONNECTION_STRING", "DATABASE_URL", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield tmp_path
    # main() installs a stderr handler bound to the captured stream
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)


@pytest.fixture
def model_file(tmp_path):
    path = tmp_path / "model.yaml"
    path.write_text(MODEL, encoding="utf-8")
    return path


# ============================================================================
# PARSING
# ============================================================================

class TestParser:

    def test_sync_options(self):
        args = build_parser().parse_args(["sync", "-c", "postgresql://x", "-d", "db", "-t", "user_*", "-f"])
        assert (args.command, args.connection, args.dir, args.tables, args.force) == (
            "sync", "postgresql://x", "db", "user_*", True,
        )

    def test_extract_defaults(self):
        args = build_parser().parse_args(["extract"])
        assert args.separate is True
        assert args.schema == "public"
        assert args.tables == "*"

    def test_extract_modes_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["extract", "--tables-only", "--views-only"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("supatool ")


# ============================================================================
# COMMANDS
# ============================================================================

class TestHelp:

    @pytest.mark.parametrize("argv", [[], ["help"]])
    def test_help(self, argv, capsys):
        assert main(argv) == EXIT_OK
        assert HELP_TEXT.strip() in capsys.readouterr().out


class TestSyncCommand:

    def test_missing_connection(self, capsys):
        assert main(["sync"], confirmer=ScriptedConfirmer()) == EXIT_FAILURE
        assert "Connection string is required" in capsys.readouterr().err

    def test_runs_sync_with_resolved_options(self):
        sync = AsyncMock(return_value=SyncSession())
        with patch("main.sync_all_tables", new=sync):
            code = main(["sync", "-c", "postgresql://u:p@h/db", "-t", "user_*"], confirmer=ScriptedConfirmer())

        assert code == EXIT_OK
        options = sync.await_args.args[0]
        assert options.connection_string == "postgresql://u:p@h/db"
        assert options.table_pattern == "user_*"
        assert str(options.schema_dir) == "supabase/schemas"

    def test_connection_error_is_rendered(self, capsys):
        error = DatabaseConnectionError("timeout expired", category=ConnectionErrorCategory.TIMEOUT, host="db.x")
        with patch("main.sync_all_tables", new=AsyncMock(side_effect=error)):
            code = main(["sync", "-c", "postgresql://u:p@h/db"], confirmer=ScriptedConfirmer())

        assert code == EXIT_FAILURE
        err = capsys.readouterr().err
        assert "Database connection failed (timeout)" in err
        assert "Host: db.x" in err

    def test_query_timeout_is_rendered(self, capsys):
        error = QueryCanceled("canceling statement due to statement timeout")
        with patch("main.sync_all_tables", new=AsyncMock(side_effect=error)):
            code = main(["sync", "-c", "postgresql://u:p@h/db"], confirmer=ScriptedConfirmer())

        assert code == EXIT_FAILURE
        err = capsys.readouterr().err
        assert "Database query failed (timeout)" in err
        assert "SUPATOOL_STATEMENT_TIMEOUT_MS" in err

    def test_ctrl_c_exits_130(self, capsys):
        with patch("main.sync_all_tables", new=AsyncMock(side_effect=KeyboardInterrupt)):
            code = main(["sync", "-c", "postgresql://u:p@h/db"], confirmer=ScriptedConfirmer())

        assert code == EXIT_INTERRUPTED
        assert "Operation cancelled" in capsys.readouterr().err

    def test_connection_from_config_file(self, tmp_path):
        (tmp_path / "supatool.config.json").write_text(
            json.dumps({"connectionString": "postgresql://file/db", "schemaDir": "db"}), encoding="utf-8"
        )
        sync = AsyncMock(return_value=SyncSession())
        with patch("main.sync_all_tables", new=sync):
            assert main(["sync"], confirmer=ScriptedConfirmer()) == EXIT_OK

        options = sync.await_args.args[0]
        assert options.connection_string == "postgresql://file/db"
        assert str(options.schema_dir) == "db"


class TestExtractCommand:

    def test_options(self):
        extract = AsyncMock()
        with patch("main.extract_definitions", new=extract):
            code = main(
                ["extract", "-c", "postgresql://u:p@h/db", "--all", "--no-separate",
                 "--schema", "public, auth", "-o", "out"],
                confirmer=ScriptedConfirmer(),
            )

        assert code == EXIT_OK
        options = extract.await_args.args[0]
        assert options.all and not options.separate_directories
        assert list(options.schemas) == ["public", "auth"]
        assert str(options.output_dir) == "out"

    def test_query_error_is_categorized(self, capsys):
        error = QueryCanceled("canceling statement due to statement timeout")
        with patch("main.extract_definitions", new=AsyncMock(side_effect=error)):
            code = main(["extract", "-c", "postgresql://u:p@h/db"], confirmer=ScriptedConfirmer())

        assert code == EXIT_FAILURE
        err = capsys.readouterr().err
        assert "Database query failed (timeout)" in err
        assert "Extraction failed" not in err

    def test_unexpected_failure(self, capsys):
        with patch("main.extract_definitions", new=AsyncMock(side_effect=RuntimeError("boom"))):
            code = main(["extract", "-c", "postgresql://u:p@h/db"], confirmer=ScriptedConfirmer())

        assert code == EXIT_FAILURE
        assert "Extraction failed: boom" in capsys.readouterr().err


class TestConfigInit:

    def test_writes_template(self, tmp_path):
        assert main(["config:init"]) == EXIT_OK
        data = json.loads((tmp_path / "supatool.config.json").read_text(encoding="utf-8"))
        assert data["schemaDir"] == "./supabase/schemas"


class TestGeneratorCommands:

    def test_gen_sql(self, tmp_path, model_file):
        assert main(["gen:sql", str(model_file), "-o", "out/schema.sql"]) == EXIT_OK
        assert "CREATE TABLE posts" in (tmp_path / "out" / "schema.sql").read_text(encoding="utf-8")

    def test_gen_docs_writes_relations_next_to_doc(self, tmp_path, model_file):
        assert main(["gen:docs", str(model_file), "-o", "docs/table-doc.md"]) == EXIT_OK
        assert (tmp_path / "docs" / "table-doc.md").exists()
        assert (tmp_path / "docs" / "relations.md").exists()

    def test_gen_all_default_root(self, tmp_path, model_file):
        assert main(["gen:all", str(model_file)]) == EXIT_OK
        root = tmp_path / "docs" / "generated"
        assert (root / "types.ts").exists()
        assert (root / "crud" / "posts.ts").exists()

    def test_bad_model_file(self, tmp_path, capsys):
        assert main(["gen:types", str(tmp_path / "missing.yaml")]) == EXIT_FAILURE
        assert "Cannot read model file" in capsys.readouterr().err
