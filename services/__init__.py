# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core - Business logic layer
# PURPOSE: Sync, extract and model parsing services
# CREATED: 17 OCT 2026
# ============================================================================
"""
Services Module

Business logic for supatool commands.
Services coordinate between repositories, the filesystem and the user.

Usage:
    from services import SyncOptions, sync_all_tables, TerminalConfirmer

    session = await sync_all_tables(options, TerminalConfirmer())
"""

from .confirmation import Confirmer, TerminalConfirmer, ScriptedConfirmer
from .local_reader import read_local_schemas
from .reconciler import reconcile, plan, TableDecision
from .schema_writer import write_schema_file, backup_orphaned_files
from .migration_service import generate_migration
from .definition_indexer import write_index
from .introspection_service import IntrospectionService, introspection_session
from .extract_service import ExtractOptions, ExtractResult, extract_definitions
from .sync_service import SyncOptions, sync_all_tables
from .model_parser import parse_model_yaml, build_data_model

__all__ = [
    "Confirmer",
    "TerminalConfirmer",
    "ScriptedConfirmer",
    "read_local_schemas",
    "reconcile",
    "plan",
    "TableDecision",
    "write_schema_file",
    "backup_orphaned_files",
    "generate_migration",
    "write_index",
    "IntrospectionService",
    "introspection_session",
    "ExtractOptions",
    "ExtractResult",
    "extract_definitions",
    "SyncOptions",
    "sync_all_tables",
    "parse_model_yaml",
    "build_data_model",
]
