# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core module initialization
# PURPOSE: Export contracts, errors and models
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================

from core.contracts import ObjectKind, Verdict, ConfirmResponse, EPOCH_SENTINEL
from core.errors import (
    SupatoolError,
    ConfigurationError,
    DatabaseConnectionError,
    DatabaseQueryError,
    ModelValidationError,
)
from core.models import (
    SchemaObject,
    LocalSchemaFile,
    SyncSession,
    DataModel,
    TableDef,
    FieldDef,
)

__all__ = [
    # Enums
    "ObjectKind",
    "Verdict",
    "ConfirmResponse",
    "EPOCH_SENTINEL",
    # Errors
    "SupatoolError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "DatabaseQueryError",
    "ModelValidationError",
    # Models
    "SchemaObject",
    "LocalSchemaFile",
    "SyncSession",
    "DataModel",
    "TableDef",
    "FieldDef",
]
