# ============================================================================
# MODEL GENERATOR TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Tests - SQL, RLS, TypeScript, CRUD and docs output
# PURPOSE: Verify generator output for a small blog model
# CREATED: 17 OCT 2026
# ============================================================================
"""
Model Generator Tests

Run with:
    pytest tests/test_generators.py -v
"""

import pytest

from core.models import DataModel, PolicyDef, TableDef
from generators import (
    generate_all,
    generate_crud,
    generate_schema_sql,
    write_generated,
)
from generators.crud import capitalize, crud_module
from generators.docs import render_relations, render_table_doc
from generators.rls import policy_sql, policy_using, render_rls_sql
from generators.sql import render_schema_sql, table_ddl, to_sql_type
from generators.typescript_types import render_types, to_ts_type


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def model():
    return DataModel.model_validate({
        "roles": ["admin", "member"],
        "tables": [
            {"name": "user_profiles", "skipCreate": True, "fields": {"id": {"type": "uuid", "primary": True}}},
            {
                "name": "posts",
                "description": "Blog posts",
                "fields": {
                    "id": {"type": "uuid", "primary": True},
                    "author": {"type": "uuid", "ref": "user_profiles.id", "notNull": True},
                    "title": {"type": "text", "label": "Title | short"},
                    "published": {"type": "boolean", "default": False},
                },
                "relations": {
                    "author": {"type": "belongsTo", "target": "user_profiles", "foreignKey": "author"},
                },
            },
        ],
        "security": {
            "functions": {"get_role": {"template_type": "simple"}},
            "policies": {"posts": {"select": {"role": "member"}}},
        },
    })


# ============================================================================
# SQL
# ============================================================================

class TestSqlGenerator:

    @pytest.mark.parametrize("field_type,column,expected", [
        (None, "x", "text"),
        ("timestamp", "x", "timestamptz"),
        ("text", "created_at", "timestamptz"),
        ("int", "x", "integer"),
        ("vector(1536)", "x", "vector(1536)"),
        ("extensions.vector(1536)", "x", "vector(1536)"),
        ("jsonb", "x", "jsonb"),
    ])
    def test_to_sql_type(self, field_type, column, expected):
        assert to_sql_type(field_type, column) == expected

    def test_table_ddl(self, model):
        assert table_ddl(model.get_table("posts")) == (
            "CREATE TABLE posts (\n"
            "  id uuid PRIMARY KEY,\n"
            "  user_id uuid NOT NULL,\n"
            "  title text,\n"
            "  published boolean DEFAULT false,\n"
            "  FOREIGN KEY (user_id) REFERENCES user_profiles(id)\n"
            ");\n\n\n"
        )

    def test_skip_table_is_a_comment(self, model):
        assert table_ddl(model.get_table("user_profiles")) == (
            "-- [skip] user_profiles (not created: provided by Supabase)\n"
        )

    def test_schema_sql_covers_every_table_in_order(self, model):
        sql = render_schema_sql(model)
        assert sql.index("[skip] user_profiles") < sql.index("CREATE TABLE posts")


# ============================================================================
# RLS
# ============================================================================

class TestRlsGenerator:

    def test_roles_functions_and_policies(self, model):
        sql = render_rls_sql(model)

        assert "CREATE TABLE IF NOT EXISTS m_roles" in sql
        assert "VALUES (gen_random_uuid(), 'member') ON CONFLICT DO NOTHING;" in sql
        assert "CREATE OR REPLACE FUNCTION get_role() RETURNS text" in sql
        assert "CREATE POLICY posts_select_policy ON posts" in sql
        assert "FOR SELECT" in sql
        assert "r.name IN ('member')" in sql

    def test_policy_using_precedence(self):
        assert policy_using(PolicyDef(using="owner_id = auth.uid()", role=["admin"])) == "owner_id = auth.uid()"
        assert "tenant_id = " in policy_using(PolicyDef(role=["admin"], template_type="tenant"))
        assert policy_using(PolicyDef()).startswith("true")

    def test_policy_enables_rls(self):
        sql = policy_sql("posts", "insert", PolicyDef(using="true"))
        assert "ALTER TABLE posts ENABLE ROW LEVEL SECURITY;" in sql
        assert "FOR INSERT" in sql

    def test_no_roles_no_role_tables(self):
        assert "m_roles" not in render_rls_sql(DataModel())


# ============================================================================
# TYPESCRIPT
# ============================================================================

class TestTypescriptGenerators:

    @pytest.mark.parametrize("field_type,expected", [
        ("uuid", "string"), ("timestamp", "string"), ("integer", "number"),
        ("boolean", "boolean"), ("jsonb", "any"), (None, "any"),
    ])
    def test_to_ts_type(self, field_type, expected):
        assert to_ts_type(field_type) == expected

    def test_types_skip_provided_tables(self, model):
        code = render_types(model)

        assert "export type user_profiles" not in code
        assert "export type posts = {\n  id: string;\n  author: string;\n  title: string;\n  published: boolean;\n}" in code

    def test_crud_module_per_creatable_table(self, model, tmp_path):
        [module] = generate_crud(model, tmp_path / "crud")

        assert module.path == tmp_path / "crud" / "posts.ts"
        assert "export async function selectPostsRows()" in module.content
        assert "export async function deletePostsRow(" in module.content
        assert "supabase.from('posts')" in module.content
        assert "__TABLE__" not in module.content and "__NAME__" not in module.content

    def test_capitalize(self):
        assert capitalize("user_profiles") == "User_profiles"
        assert "selectUser_profilesRowById" in crud_module(TableDef(name="user_profiles"))


# ============================================================================
# DOCS
# ============================================================================

class TestDocsGenerator:

    def test_table_doc(self, model):
        md = render_table_doc(model)

        assert md.startswith("# Table Definitions\n")
        assert "## user_profiles (not created: provided by Supabase)" in md
        assert "| id | uuid | ★ |  |  |  |" in md
        assert "| author | uuid |  | ○ |  |  |" in md
        assert "| published | boolean |  |  | false |  |" in md
        assert "Title \\| short" in md

    def test_relations(self, model):
        assert "| posts | belongsTo | user_profiles | author |" in render_relations(model)


# ============================================================================
# OUTPUT
# ============================================================================

class TestOutput:

    def test_generate_all_layout(self, model, tmp_path):
        paths = write_generated(generate_all(model, tmp_path / "generated"))

        root = tmp_path / "generated"
        assert paths == [
            root / "types.ts",
            root / "crud" / "posts.ts",
            root / "table-doc.md",
            root / "relations.md",
        ]
        assert all(path.exists() for path in paths)

    def test_schema_sql_combines_tables_and_rls(self, model, tmp_path):
        [path] = write_generated(generate_schema_sql(model, tmp_path / "schema.sql"))

        sql = path.read_text(encoding="utf-8")
        assert sql.index("CREATE TABLE posts") < sql.index("CREATE POLICY posts_select_policy")
