# ============================================================================
# CONFIGURATION TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Tests - Defaults, env files and settings precedence
# PURPOSE: Verify option > environment > config file > default resolution
# CREATED: 17 OCT 2026
# ============================================================================
"""
Configuration Tests

Run with:
    pytest tests/test_config.py -v
"""

import json

import pytest

from core.config import (
    IntrospectionDefaults,
    create_config_template,
    load_config_file,
    load_env_files,
    reset_defaults,
    resolve_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so monkeypatch restores values written by load_dotenv
    for name in ("SUPABASE_CONNECTION_STRING", "DATABASE_URL", "SUPATOOL_MAX_CONCURRENT"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    reset_defaults()
    yield
    reset_defaults()


# ============================================================================
# DEFAULTS
# ============================================================================

class TestIntrospectionDefaults:

    def test_default_batch_size(self):
        assert IntrospectionDefaults().concurrency_limit == 20

    @pytest.mark.parametrize("requested,expected", [(1, 5), (5, 5), (30, 30), (50, 50), (500, 50)])
    def test_batch_size_is_clamped(self, requested, expected):
        assert IntrospectionDefaults(max_concurrent=requested).concurrency_limit == expected

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SUPATOOL_MAX_CONCURRENT", "8")
        assert IntrospectionDefaults.from_env().concurrency_limit == 8

    def test_bad_env_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("SUPATOOL_MAX_CONCURRENT", "lots")
        assert IntrospectionDefaults.from_env().concurrency_limit == 20


# ============================================================================
# RESOLUTION
# ============================================================================

class TestResolveConfig:

    def test_defaults_without_anything(self, tmp_path):
        config = resolve_config(config_path=tmp_path / "missing.json")

        assert not config.has_connection
        assert config.schema_dir == "./supabase/schemas"
        assert config.table_pattern == "*"

    def test_option_beats_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SUPABASE_CONNECTION_STRING", "postgresql://env")
        config = resolve_config("postgresql://option", config_path=tmp_path / "missing.json")
        assert config.connection_string == "postgresql://option"

    def test_supabase_variable_beats_database_url(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SUPABASE_CONNECTION_STRING", "postgresql://supabase")
        monkeypatch.setenv("DATABASE_URL", "postgresql://database-url")
        assert resolve_config(config_path=tmp_path / "x.json").connection_string == "postgresql://supabase"

    def test_config_file_fills_gaps(self, tmp_path):
        path = tmp_path / "supatool.config.json"
        path.write_text(json.dumps({
            "connectionString": "postgresql://file",
            "schemaDir": "db/schemas",
            "tablePattern": "user_*",
        }), encoding="utf-8")

        config = resolve_config(schema_dir="other", config_path=path)

        assert config.connection_string == "postgresql://file"
        assert config.schema_dir == "other"
        assert config.table_pattern == "user_*"

    def test_invalid_config_file_is_ignored(self, tmp_path):
        path = tmp_path / "supatool.config.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_config_file(path).connection_string is None


class TestEnvFiles:

    def test_env_local_wins(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("DATABASE_URL=postgresql://from-env\n", encoding="utf-8")
        (tmp_path / ".env.local").write_text("DATABASE_URL=postgresql://from-local\n", encoding="utf-8")

        loaded = load_env_files(tmp_path)

        assert loaded == tmp_path / ".env.local"
        assert resolve_config(config_path=tmp_path / "x.json").connection_string == "postgresql://from-local"

    def test_existing_environment_is_kept(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://shell")
        (tmp_path / ".env").write_text("DATABASE_URL=postgresql://file\n", encoding="utf-8")

        load_env_files(tmp_path)

        assert resolve_config(config_path=tmp_path / "x.json").connection_string == "postgresql://shell"

    def test_no_files(self, tmp_path):
        assert load_env_files(tmp_path) is None


class TestConfigTemplate:

    def test_template_round_trips_through_loader(self, tmp_path):
        path = create_config_template(tmp_path / "supatool.config.json")

        config = load_config_file(path)

        assert config.schema_dir == "./supabase/schemas"
        assert config.table_pattern == "*"
        assert config.connection_string.startswith("postgresql://")
