# ============================================================================
# MODEL -> TYPESCRIPT TYPES GENERATOR
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Generators - One exported type per table
# PURPOSE: gen:types output
# CREATED: 17 OCT 2026
# ============================================================================
"""
Model -> TypeScript Types Generator

    export type users = {
      id: string;
      age: number;
    }

Tables marked skip_create are left out.
"""

from pathlib import Path
from typing import Optional, Union

from core.models import DataModel, TableDef
from generators.base import GeneratedFile

_TS_TYPES = {
    "uuid": "string",
    "text": "string",
    "timestamp": "string",
    "int": "number",
    "integer": "number",
    "boolean": "boolean",
}


def to_ts_type(field_type: Optional[str]) -> str:
    """TypeScript type for a model field type; anything unknown is any."""
    if not field_type:
        return "any"
    return _TS_TYPES.get(field_type, "any")


def table_type(table: TableDef) -> str:
    lines = [f"export type {table.name} = {{"]
    lines.extend(f"  {name}: {to_ts_type(field.type)};" for name, field in table.fields.items())
    lines.append("}")
    return "\n".join(lines) + "\n\n"


def render_types(model: DataModel) -> str:
    code = "// Generated by supatool: model types\n\n"
    for table in model.creatable_tables:
        code += table_type(table)
    return code


def generate_types(model: DataModel, out_path: Union[str, Path]) -> GeneratedFile:
    return GeneratedFile(Path(out_path), render_types(model))


__all__ = [
    "to_ts_type",
    "table_type",
    "render_types",
    "generate_types",
]
