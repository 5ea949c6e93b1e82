# ============================================================================
# MODEL -> MARKDOWN DOCS GENERATOR
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Generators - Table definitions and relation list
# PURPOSE: gen:docs output
# CREATED: 17 OCT 2026
# ============================================================================
"""
Model -> Markdown Docs Generator

table-doc.md: one section per table with a column table
(column, type, primary key, not null, default, label).

relations.md: one row per declared relation.
"""

from pathlib import Path
from typing import Any, Union

from core.models import DataModel, TableDef
from generators.base import GeneratedFile


def _cell(value: Any) -> str:
    if value is None or value == "":
        return ""
    return str(value).replace("|", "\\|")


def table_section(table: TableDef) -> str:
    skip_note = " (not created: provided by Supabase)" if table.skip_create else ""
    md = f"## {table.name}{skip_note}\n"
    if table.description:
        md += f"{table.description}\n"
    md += "\n| Column | Type | PK | Not null | Default | Label |\n|---|---|---|---|---|---|\n"
    for name, field in table.fields.items():
        default = field.default_sql() if field.has_default else ""
        md += (
            f"| {name} | {_cell(field.type)} | {'★' if field.primary else ''} | "
            f"{'○' if field.not_null else ''} | {_cell(default)} | {_cell(field.label)} |\n"
        )
    return md + "\n"


def render_table_doc(model: DataModel) -> str:
    md = "# Table Definitions\n\n"
    for table in model.tables:
        md += table_section(table)
    return md


def render_relations(model: DataModel) -> str:
    md = "# Relations\n\n| Table | Relation | Target | Foreign key |\n|---|---|---|---|\n"
    for table in model.tables:
        for relation in table.relations.values():
            md += (
                f"| {table.name} | {_cell(relation.type)} | {_cell(relation.target or relation.ref)} | "
                f"{_cell(relation.foreign_key)} |\n"
            )
    return md


def generate_table_doc(model: DataModel, out_path: Union[str, Path]) -> GeneratedFile:
    return GeneratedFile(Path(out_path), render_table_doc(model))


def generate_relations_doc(model: DataModel, out_path: Union[str, Path]) -> GeneratedFile:
    return GeneratedFile(Path(out_path), render_relations(model))


__all__ = [
    "table_section",
    "render_table_doc",
    "render_relations",
    "generate_table_doc",
    "generate_relations_doc",
]
