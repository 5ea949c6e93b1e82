# ============================================================================
# SCHEMA OBJECT MODELS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core model - Remote objects and local schema files
# PURPOSE: Typed records flowing between reader, introspector and writer
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: SchemaObject, LocalSchemaFile
# DEPENDENCIES: pydantic
# ============================================================================
"""
Schema Object Models

SchemaObject is one database object read from the catalogs. It is built
fresh on every introspection and never cached.

LocalSchemaFile is one .sql file from the schema directory, with the DDL
body stripped of comments and a normalized form for comparison.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from core.contracts import EPOCH_SENTINEL, ObjectKind


class SchemaObject(BaseModel):
    """
    A database object as introspected from the remote catalogs.

    Names are unique within (kind, schema). Objects outside the public
    schema carry a "<schema>_" prefix in their name.
    """
    name: str
    kind: ObjectKind
    ddl: str
    timestamp: int = Field(default=EPOCH_SENTINEL, description="Unix seconds, best effort")
    comment: Optional[str] = None
    category: Optional[str] = Field(
        default=None,
        description="Owning schema.table for RLS policy sets and triggers",
    )
    schema_name: str = "public"

    @property
    def file_name(self) -> str:
        return self.kind.file_name(self.name)

    def relative_path(self, separate_directories: bool = True) -> str:
        """
        Path of this object's file relative to the extract root.

        Always uses forward slashes; it is written into index files.
        """
        if separate_directories:
            return f"{self.kind.directory}/{self.file_name}"
        return self.file_name


class LocalSchemaFile(BaseModel):
    """
    A table schema file found in the local schema directory.

    Two DDLs are equivalent iff their normalized forms are equal.
    """
    table_name: str
    raw_ddl: str
    normalized_ddl: str
    embedded_timestamp: int = Field(
        description="From the 'Remote last updated' header, else file mtime"
    )
    file_timestamp: int = Field(description="File mtime in unix seconds")
    file_path: Path


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SchemaObject",
    "LocalSchemaFile",
]
