# ============================================================================
# DDL UTILITY TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Tests - Normalization, formatting, name patterns
# PURPOSE: Verify the text helpers shared by reader, reconciler and renderers
# CREATED: 17 OCT 2026
# ============================================================================
"""
DDL Utility Tests

Run with:
    pytest tests/test_ddl_utils.py -v
"""

import pytest

from core.schema.ddl_utils import (
    comparable_ddl,
    format_sql,
    normalize_ddl,
    pattern_search,
    qualified_object_name,
    quote_literal,
    strip_comment_lines,
    wildcard_match,
)


# ============================================================================
# NORMALIZATION
# ============================================================================

class TestNormalizeDdl:

    def test_collapses_whitespace_runs(self):
        assert normalize_ddl("CREATE   TABLE\n\tusers (id  uuid)") == "CREATE TABLE users (id uuid)"

    def test_semicolon_followed_by_whitespace_starts_new_line(self):
        ddl = "CREATE TABLE a (id int);   CREATE TABLE b (id int);"
        assert normalize_ddl(ddl) == "CREATE TABLE a (id int);\nCREATE TABLE b (id int);"

    def test_trims(self):
        assert normalize_ddl("  \n SELECT 1; \n ") == "SELECT 1;"

    @pytest.mark.parametrize("ddl", [
        "CREATE TABLE users (\n  id uuid NOT NULL,\n  name text\n);\n\nCOMMENT ON TABLE public.users IS 'x';\n",
        "a ;  b ;\n\n c",
        "",
    ])
    def test_idempotent(self, ddl):
        once = normalize_ddl(ddl)
        assert normalize_ddl(once) == once

    def test_equivalent_formatting_compares_equal(self):
        a = "CREATE TABLE users (\n  id uuid,\n  name text\n);"
        b = "CREATE TABLE users ( id uuid, name text );"
        assert normalize_ddl(a) == normalize_ddl(b)

    def test_token_changes_are_not_equivalent(self):
        a = "CREATE TABLE users (id uuid, name text);"
        b = "CREATE TABLE users (id uuid, name varchar);"
        assert normalize_ddl(a) != normalize_ddl(b)


class TestStripCommentLines:

    def test_drops_comments_and_blank_lines(self):
        content = (
            "-- Remote last updated: 2026-01-01T00:00:00.000Z\n"
            "-- Table: users\n"
            "\n"
            "CREATE TABLE users (\n"
            "  id uuid\n"
            ");\n"
            "   -- indented comment\n"
        )
        assert strip_comment_lines(content) == "CREATE TABLE users (\n  id uuid\n);"

    def test_only_comments_yields_empty(self):
        assert strip_comment_lines("-- a\n-- b\n\n") == ""


class TestComparableDdl:

    def test_matches_what_a_written_file_reads_back_as(self):
        remote = "-- Table: users\nCREATE TABLE IF NOT EXISTS users (\n  id uuid NOT NULL\n);\n\n-- COMMENT ON TABLE public.users IS '_your_comment_here_';\n"
        header = "-- Remote last updated: 2026-01-01T00:00:00.000Z\n-- Table: users\n\n"
        read_back = normalize_ddl(strip_comment_lines(header + remote))
        assert comparable_ddl(remote) == read_back


# ============================================================================
# FORMATTING
# ============================================================================

class TestFormatSql:

    def test_one_clause_per_line(self):
        formatted = format_sql("CREATE TABLE users (id uuid, name text);")
        assert formatted.split("\n") == [
            "CREATE TABLE users (",
            "id uuid,",
            "name text",
            ");",
        ]

    def test_no_blank_lines(self):
        formatted = format_sql("CREATE TABLE a (id int);\nCREATE TABLE b (id int);")
        assert "" not in formatted.split("\n")


# ============================================================================
# NAME PATTERNS
# ============================================================================

class TestWildcardMatch:

    @pytest.mark.parametrize("name", ["users", "posts", "user_profiles"])
    def test_star_matches_everything(self, name):
        assert wildcard_match(name, "*")

    def test_glob_prefix(self):
        assert wildcard_match("user_profiles", "user_*")
        assert wildcard_match("user_settings", "user_*")
        assert not wildcard_match("posts", "user_*")
        assert not wildcard_match("app_user_x", "user_*")

    def test_only_star_is_special(self):
        assert not wildcard_match("user1", "user?*")
        assert wildcard_match("user?_log", "user?*")
        assert not wildcard_match("usera_x", "user[ab]*")
        assert wildcard_match("user[ab]_x", "user[ab]*")

    def test_star_in_the_middle(self):
        assert wildcard_match("user_2026_log", "user_*_log")
        assert not wildcard_match("user_2026_logs", "user_*_log")

    def test_plain_pattern_is_substring(self):
        assert wildcard_match("user_profiles", "profile")
        assert not wildcard_match("posts", "profile")


class TestPatternSearch:

    def test_star_is_unanchored(self):
        assert pattern_search("app_users", "user*")
        assert pattern_search("users", "user*")
        assert not pattern_search("posts", "user*")

    def test_regex_characters_are_literal(self):
        assert not pattern_search("usersX", "users.")
        assert pattern_search("users.", "users.")


class TestSqlText:

    def test_quote_literal_doubles_quotes(self):
        assert quote_literal("it's") == "'it''s'"

    def test_qualified_object_name(self):
        assert qualified_object_name("public", "users") == "users"
        assert qualified_object_name("auth", "users") == "auth_users"
