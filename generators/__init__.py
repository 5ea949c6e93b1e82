# ============================================================================
# GENERATORS MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Generators - Printers over a DataModel
# PURPOSE: SQL, RLS, TypeScript types, CRUD modules and Markdown docs
# CREATED: 17 OCT 2026
# ============================================================================
"""
Generators Module

Pure functions from a DataModel to GeneratedFile values.

Usage:
    from generators import generate_all, write_generated

    write_generated(generate_all(model, Path("docs/generated")))
"""

from pathlib import Path
from typing import List, Union

from core.models import DataModel
from generators.base import GeneratedFile, write_generated
from generators.crud import generate_crud
from generators.docs import generate_relations_doc, generate_table_doc
from generators.rls import generate_rls, render_rls_sql
from generators.sql import generate_sql, render_schema_sql
from generators.typescript_types import generate_types


def generate_schema_sql(model: DataModel, out_path: Union[str, Path]) -> GeneratedFile:
    """Tables and relations followed by RLS/security, in one file."""
    return GeneratedFile(Path(out_path), render_schema_sql(model) + "\n" + render_rls_sql(model))


def generate_all(model: DataModel, output_root: Union[str, Path]) -> List[GeneratedFile]:
    """Types, CRUD modules and both docs under one root."""
    root = Path(output_root)
    return [
        generate_types(model, root / "types.ts"),
        *generate_crud(model, root / "crud"),
        generate_table_doc(model, root / "table-doc.md"),
        generate_relations_doc(model, root / "relations.md"),
    ]


__all__ = [
    "GeneratedFile",
    "write_generated",
    "generate_sql",
    "generate_rls",
    "generate_schema_sql",
    "generate_types",
    "generate_crud",
    "generate_table_doc",
    "generate_relations_doc",
    "generate_all",
]
