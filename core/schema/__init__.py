# ============================================================================
# SCHEMA MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core - DDL text utilities and catalog rendering
# PURPOSE: Normalize, format and render DDL text
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================

from core.schema.ddl_utils import (
    normalize_ddl,
    comparable_ddl,
    strip_comment_lines,
    format_sql,
    wildcard_match,
    pattern_search,
    quote_literal,
    qualified_object_name,
)
from core.schema.sql_generator import CatalogDDL

__all__ = [
    # Renderer
    "CatalogDDL",
    # Utilities
    "normalize_ddl",
    "comparable_ddl",
    "strip_comment_lines",
    "format_sql",
    "wildcard_match",
    "pattern_search",
    "quote_literal",
    "qualified_object_name",
]
