# ============================================================================
# MODEL -> SQL DDL GENERATOR
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Generators - CREATE TABLE statements from a DataModel
# PURPOSE: gen:sql table and relation DDL
# CREATED: 17 OCT 2026
# ============================================================================
"""
Model -> SQL DDL Generator

Rules:
- Tables with skip_create become a "-- [skip]" comment line
- Column types go through to_sql_type (timestamps and *_at columns are
  always timestamptz)
- A column referencing user_profiles.id is renamed to user_id when it is
  the table's only user reference, otherwise to <ref_table>_user_id
- Foreign keys are emitted as table constraints after the columns
"""

import re
from pathlib import Path
from typing import Dict, List, Optional, Union

from core.models import DataModel, FieldDef, TableDef
from generators.base import GeneratedFile

USER_PROFILE_REF_SUFFIX = "user_profiles.id"

_VECTOR = re.compile(r"^vector(\(\d+\))?$", re.IGNORECASE)
_EXTENSION_VECTOR = re.compile(r"^extensions\.vector(\(\d+\))?$", re.IGNORECASE)

_SIMPLE_TYPES = {
    "uuid": "uuid",
    "text": "text",
    "int": "integer",
    "integer": "integer",
    "boolean": "boolean",
}


def to_sql_type(field_type: Optional[str], column_name: str) -> str:
    """
    SQL column type for a model field type.

    Unknown types pass through unchanged; a missing type is text.
    """
    if not field_type:
        return "text"
    if field_type in ("timestamp", "timestamptz") or column_name.endswith("_at"):
        return "timestamptz"
    if _VECTOR.match(field_type):
        return field_type
    extension_vector = _EXTENSION_VECTOR.match(field_type)
    if extension_vector:
        return f"vector{extension_vector.group(1) or ''}"
    return _SIMPLE_TYPES.get(field_type, field_type)


def _references_user_profile(name: str, field: FieldDef) -> bool:
    return name == "user_id" or bool(field.ref and field.ref.endswith(USER_PROFILE_REF_SUFFIX))


def column_names(table: TableDef) -> Dict[str, str]:
    """Model field name -> emitted column name."""
    user_refs = sum(1 for name, f in table.fields.items() if _references_user_profile(name, f))
    names = {}
    for name, field in table.fields.items():
        actual = name
        if name != "user_id" and field.ref and field.ref.endswith(USER_PROFILE_REF_SUFFIX):
            actual = "user_id" if user_refs == 1 else f"{field.ref_table}_user_id"
        names[name] = actual
    return names


def table_ddl(table: TableDef) -> str:
    """CREATE TABLE for one model table, or its skip comment."""
    if table.skip_create:
        return f"-- [skip] {table.name} (not created: provided by Supabase)\n"

    renamed = column_names(table)
    columns: List[str] = []
    constraints: List[str] = []

    for name, field in table.fields.items():
        column = renamed[name]
        definition = f"  {column} {to_sql_type(field.type, column)}"
        if field.primary:
            definition += " PRIMARY KEY"
        if field.unique:
            definition += " UNIQUE"
        if field.not_null:
            definition += " NOT NULL"
        if field.has_default:
            definition += f" DEFAULT {field.default_sql()}"
        columns.append(definition)

        if field.ref:
            constraints.append(f"  FOREIGN KEY ({column}) REFERENCES {field.ref_table}(id)")

    return f"CREATE TABLE {table.name} (\n" + ",\n".join(columns + constraints) + "\n);\n\n\n"


def render_schema_sql(model: DataModel) -> str:
    sql = "-- Generated by supatool: tables and relations\n\n"
    for table in model.tables:
        sql += table_ddl(table)
    return sql


def generate_sql(model: DataModel, out_path: Union[str, Path]) -> GeneratedFile:
    """Table and relation DDL for the whole model."""
    return GeneratedFile(Path(out_path), render_schema_sql(model))


__all__ = [
    "to_sql_type",
    "column_names",
    "table_ddl",
    "render_schema_sql",
    "generate_sql",
]
