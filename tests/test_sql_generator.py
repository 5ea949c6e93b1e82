# ============================================================================
# CATALOG DDL RENDERER TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Tests - Catalog rows -> DDL text
# PURPOSE: Verify header comments and COMMENT ON output
# CREATED: 17 OCT 2026
# ============================================================================
"""
Catalog DDL Renderer Tests

Run with:
    pytest tests/test_sql_generator.py -v
"""

from core.schema import CatalogDDL, strip_comment_lines


COLUMNS = [
    {"column_name": "id", "full_type": "uuid", "is_nullable": "NO", "column_default": None},
    {"column_name": "email", "full_type": "character varying(255)", "is_nullable": "YES", "column_default": None},
]


class TestTableHeader:

    def test_fallback_marker(self):
        ddl = CatalogDDL.table("users", "public", COLUMNS, primary_keys=["id"])

        assert ddl.startswith("-- Table: users\nCREATE TABLE IF NOT EXISTS users (\n")
        assert "  email character varying(255),\n" in ddl
        assert "-- COMMENT ON TABLE public.users IS '_your_comment_here_';" in ddl

    def test_multiline_comment_is_fully_commented(self):
        ddl = CatalogDDL.table(
            "users", "public", COLUMNS,
            table_comment="User accounts\nOne row per auth user",
        )

        assert ddl.startswith("-- User accounts\n-- One row per auth user\nCREATE TABLE")
        assert "COMMENT ON TABLE public.users IS 'User accounts\nOne row per auth user';" in ddl

    def test_header_leaves_no_bare_text(self):
        ddl = CatalogDDL.table("users", "public", COLUMNS, table_comment="a\n\nb")
        body = strip_comment_lines(ddl)
        assert body.startswith("CREATE TABLE IF NOT EXISTS users (")


class TestOtherHeaders:

    def test_view(self):
        ddl = CatalogDDL.view("active_users", "public", " SELECT 1;", comment="Active\nonly")
        assert ddl.startswith("-- Active\n-- only\nCREATE OR REPLACE VIEW active_users AS\n SELECT 1;")

    def test_custom_type(self):
        ddl = CatalogDDL.custom_type("public", "mood", "CREATE TYPE public.mood AS ENUM ('ok');", "Line one\nLine two")
        assert ddl.startswith("-- Line one\n-- Line two\nCREATE TYPE public.mood")
