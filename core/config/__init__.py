# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 17 OCT 2026
# ============================================================================
"""
Configuration Module

Defaults plus resolution of CLI options, environment and config file.
"""

from core.config.defaults import (
    IntrospectionDefaults,
    SyncDefaults,
    GeneratorDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)
from core.config.settings import (
    ConfigFile,
    SyncConfig,
    load_env_files,
    load_config_file,
    resolve_config,
    create_config_template,
)

__all__ = [
    "IntrospectionDefaults",
    "SyncDefaults",
    "GeneratorDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
    "ConfigFile",
    "SyncConfig",
    "load_env_files",
    "load_config_file",
    "resolve_config",
    "create_config_template",
]
