# ============================================================================
# CORE MODELS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core module initialization
# PURPOSE: Export schema objects, sync session and data model types
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================

from core.models.schema_object import SchemaObject, LocalSchemaFile
from core.models.session import SyncSession
from core.models.data_model import (
    DataModel,
    TableDef,
    FieldDef,
    RelationDef,
    SecurityDef,
    SecurityFunctionDef,
    PolicyDef,
)

__all__ = [
    # Schema objects
    "SchemaObject",
    "LocalSchemaFile",
    # Session
    "SyncSession",
    # Data model
    "DataModel",
    "TableDef",
    "FieldDef",
    "RelationDef",
    "SecurityDef",
    "SecurityFunctionDef",
    "PolicyDef",
]
