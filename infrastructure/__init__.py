# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Infrastructure - Database connectivity
# PURPOSE: Connection string handling and connection probing
# CREATED: 17 OCT 2026
# ============================================================================
"""
Infrastructure module for supatool.

Provides:
- prepare_connection_string: Normalize a configured URI
- probe_connection: Find a connection string the server accepts

Usage:
    from infrastructure import prepare_connection_string, probe_connection

    conninfo = await probe_connection(prepare_connection_string(raw))
"""

from infrastructure.postgresql import (
    prepare_connection_string,
    set_query_param,
    mask_connection_string,
    connection_host,
    fallback_candidates,
    probe_connection,
)

__all__ = [
    "prepare_connection_string",
    "set_query_param",
    "mask_connection_string",
    "connection_host",
    "fallback_candidates",
    "probe_connection",
]
