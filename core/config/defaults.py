# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for introspection, sync paths and generators
# CREATED: 17 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for introspection concurrency, schema directories and
generator output paths. Introspection limits can be overridden via
environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from core.contracts import EPOCH_SENTINEL


@dataclass(frozen=True)
class IntrospectionDefaults:
    """
    Defaults for remote schema introspection.

    max_concurrent is the requested batch size; concurrency_limit is the
    value actually used after clamping to [floor, ceiling].
    """
    max_concurrent: int = 20
    concurrency_floor: int = 5
    concurrency_ceiling: int = 50

    default_schemas: Tuple[str, ...] = ("public",)
    sentinel_timestamp: int = EPOCH_SENTINEL

    # Connection
    application_name: str = "supatool"
    connect_timeout_seconds: int = 10
    statement_timeout_ms: int = 30000

    @property
    def concurrency_limit(self) -> int:
        """Batch size clamped to the allowed range."""
        return max(self.concurrency_floor, min(self.concurrency_ceiling, self.max_concurrent))

    @classmethod
    def from_env(cls) -> "IntrospectionDefaults":
        """Create from environment variables."""
        raw = os.getenv("SUPATOOL_MAX_CONCURRENT", "20")
        try:
            max_concurrent = int(raw)
        except ValueError:
            max_concurrent = 20
        return cls(
            max_concurrent=max_concurrent,
            statement_timeout_ms=int(os.getenv("SUPATOOL_STATEMENT_TIMEOUT_MS", 30000)),
        )


@dataclass(frozen=True)
class SyncDefaults:
    """
    Defaults for schema directories and file layout.
    """
    schema_dir: str = "./supabase/schemas"
    table_pattern: str = "*"
    backup_dir_name: str = "backup"
    migrations_dir: str = os.path.join("supabase", "migrations")
    config_file_name: str = "supatool.config.json"
    env_files: Tuple[str, ...] = (".env.local", ".env")


@dataclass(frozen=True)
class GeneratorDefaults:
    """
    Default output paths for the model generators.
    """
    output_root: str = os.path.join("docs", "generated")
    types_file: str = os.path.join("docs", "generated", "types.ts")
    crud_dir: str = os.path.join("docs", "generated", "crud")
    table_doc_file: str = os.path.join("docs", "generated", "table-doc.md")
    relations_doc_file: str = os.path.join("docs", "generated", "relations.md")
    sql_file: str = os.path.join("docs", "generated", "schema.sql")
    rls_file: str = os.path.join("docs", "generated", "rls.sql")


@dataclass(frozen=True)
class Defaults:
    """
    Aggregate of all default groups.
    """
    introspection: IntrospectionDefaults = field(default_factory=IntrospectionDefaults)
    sync: SyncDefaults = field(default_factory=SyncDefaults)
    generators: GeneratorDefaults = field(default_factory=GeneratorDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment."""
        return cls(
            introspection=IntrospectionDefaults.from_env(),
            sync=SyncDefaults(),
            generators=GeneratorDefaults(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "IntrospectionDefaults",
    "SyncDefaults",
    "GeneratorDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
