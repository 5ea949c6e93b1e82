# ============================================================================
# DEFINITION INDEXER TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Tests - index.md and llms.txt
# PURPOSE: Verify grouping, paths and the directory tree
# CREATED: 17 OCT 2026
# ============================================================================
"""
Definition Indexer Tests

Run with:
    pytest tests/test_definition_indexer.py -v
"""

import pytest

from core.contracts import ObjectKind
from core.models import SchemaObject
from services.definition_indexer import (
    group_by_kind,
    render_catalog,
    render_index_markdown,
    write_index,
)


@pytest.fixture
def objects():
    return [
        SchemaObject(name="users", kind=ObjectKind.TABLE, ddl="x", comment="App users"),
        SchemaObject(name="posts", kind=ObjectKind.TABLE, ddl="x"),
        SchemaObject(name="active_users", kind=ObjectKind.VIEW, ddl="x"),
        SchemaObject(name="get_role", kind=ObjectKind.FUNCTION, ddl="x"),
        SchemaObject(name="public_users_touch", kind=ObjectKind.TRIGGER, ddl="x"),
    ]


class TestGrouping:

    def test_every_kind_present_in_order(self, objects):
        grouped = group_by_kind(objects)
        assert list(grouped) == list(ObjectKind)
        assert [o.name for o in grouped[ObjectKind.TABLE]] == ["users", "posts"]
        assert grouped[ObjectKind.CRON] == []


class TestIndexMarkdown:

    def test_summary_and_links(self, objects):
        md = render_index_markdown(objects)

        assert md.startswith("# Database Schema Index\n")
        assert "- Tables: 2 objects" in md
        assert "- Cron Jobs" not in md
        assert "- [users](tables/users.sql) - App users" in md
        assert "- [posts](tables/posts.sql)\n" in md
        assert "- [get_role](rpc/fn_get_role.sql)" in md
        assert "- [public_users_touch](rpc/trg_public_users_touch.sql)" in md

    def test_directory_tree_lists_rpc_once(self, objects):
        md = render_index_markdown(objects)
        assert md.count("└── rpc/") == 1
        assert "└── tables/" in md
        assert "└── views/" in md

    def test_flat_layout(self, objects):
        md = render_index_markdown(objects, separate_directories=False)
        assert "- [users](users.sql)" in md
        assert "└──" not in md


class TestCatalog:

    def test_object_lines(self, objects):
        text = render_catalog(objects)

        assert text.startswith("Database Schema - Complete Objects Catalog\n")
        assert "Tables: 2\n" in text
        assert "table:users:tables/users.sql:App users\n" in text
        assert "function:get_role:rpc/fn_get_role.sql\n" in text

    def test_multiline_comment_stays_on_one_line(self):
        users = SchemaObject(name="users", kind=ObjectKind.TABLE, ddl="x", comment="User accounts\nOne row per auth user")

        text = render_catalog([users])
        md = render_index_markdown([users])

        assert text.endswith("table:users:tables/users.sql:User accounts One row per auth user\n")
        assert "- [users](tables/users.sql) - User accounts One row per auth user\n" in md


class TestWriteIndex:

    def test_writes_both_files(self, tmp_path, objects):
        index_path, catalog_path = write_index(objects, tmp_path / "schemas")

        assert index_path.name == "index.md"
        assert catalog_path.name == "llms.txt"
        assert "users" in index_path.read_text(encoding="utf-8")
        assert "users" in catalog_path.read_text(encoding="utf-8")
