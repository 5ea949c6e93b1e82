# ============================================================================
# MODEL YAML PARSER TESTS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Tests - YAML layouts and validation failures
# PURPOSE: Verify both model layouts fold into the same DataModel
# CREATED: 17 OCT 2026
# ============================================================================
"""
Model YAML Parser Tests

Run with:
    pytest tests/test_model_parser.py -v
"""

import pytest
import yaml

from core.errors import ModelValidationError
from services.model_parser import build_data_model, parse_model_yaml


MODELS_LAYOUT = """
roles: [admin, member]
models:
  - tables:
      user_profiles:
        skipCreate: true
        fields:
          id: {type: uuid, primary: true}
      posts:
        description: Blog posts
        fields:
          id: {type: uuid, primary: true}
          author: {type: uuid, ref: user_profiles.id, notNull: true}
          title: {type: text, label: Title}
          published: {type: boolean, default: false}
        relations:
          author: {type: belongsTo, target: user_profiles, foreignKey: author}
security:
  functions:
    get_role: {template_type: simple}
  policies:
    posts:
      select: {role: member}
"""

DATA_SCHEMA_LAYOUT = """
dataSchema:
  - tableName: posts
    fields:
      id: {type: uuid, primary: true}
  - raw: comments
    fields:
      id: {type: uuid}
"""


class TestModelsLayout:

    def test_tables_in_document_order(self, tmp_path):
        path = tmp_path / "model.yaml"
        path.write_text(MODELS_LAYOUT, encoding="utf-8")

        model = parse_model_yaml(path)

        assert [t.name for t in model.tables] == ["user_profiles", "posts"]
        assert [t.name for t in model.creatable_tables] == ["posts"]
        assert model.roles == ["admin", "member"]

    def test_field_attributes(self, tmp_path):
        path = tmp_path / "model.yaml"
        path.write_text(MODELS_LAYOUT, encoding="utf-8")

        posts = parse_model_yaml(path).get_table("posts")

        assert list(posts.fields) == ["id", "author", "title", "published"]
        assert posts.fields["author"].not_null
        assert posts.fields["author"].ref_table == "user_profiles"
        assert posts.fields["published"].has_default
        assert posts.fields["published"].default_sql() == "false"
        assert posts.relations["author"].foreign_key == "author"

    def test_security_section(self, tmp_path):
        path = tmp_path / "model.yaml"
        path.write_text(MODELS_LAYOUT, encoding="utf-8")

        security = parse_model_yaml(path).security

        assert security.functions["get_role"].template_type == "simple"
        assert security.policies["posts"]["select"].role == ["member"]


class TestDataSchemaLayout:

    def test_table_name_or_raw(self):
        model = build_data_model(yaml.safe_load(DATA_SCHEMA_LAYOUT))
        assert [t.name for t in model.tables] == ["posts", "comments"]

    def test_entry_without_name_is_rejected(self):
        with pytest.raises(ModelValidationError, match="tableName"):
            build_data_model({"dataSchema": [{"fields": {}}]})


class TestValidationFailures:

    def test_missing_file(self, tmp_path):
        with pytest.raises(ModelValidationError, match="Cannot read model file"):
            parse_model_yaml(tmp_path / "nope.yaml")

    def test_bad_yaml(self, tmp_path):
        path = tmp_path / "model.yaml"
        path.write_text("models: [unclosed", encoding="utf-8")
        with pytest.raises(ModelValidationError, match="Invalid YAML"):
            parse_model_yaml(path)

    @pytest.mark.parametrize("raw", [None, [], "text", {"roles": []}])
    def test_missing_sections(self, raw):
        with pytest.raises(ModelValidationError):
            build_data_model(raw)

    def test_invalid_field_value(self):
        raw = {"models": [{"tables": {"posts": {"fields": {"id": {"primary": "definitely"}}}}}]}
        with pytest.raises(ModelValidationError, match="Invalid model"):
            build_data_model(raw)
