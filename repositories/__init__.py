# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core - Database access layer
# PURPOSE: Connection pool and catalog reads
# CREATED: 17 OCT 2026
# ============================================================================
"""
Repositories Module

Provides read-only catalog access. Uses psycopg3 async with connection
pooling.

Usage:
    from repositories import CatalogRepository, DatabasePool

    async with DatabasePool(conninfo, max_size=20) as pool:
        repo = CatalogRepository(pool)
        relations = await repo.list_relations(["public"])
"""

from .database import open_pool, DatabasePool
from .catalog_repo import CatalogRepository

__all__ = [
    "open_pool",
    "DatabasePool",
    "CatalogRepository",
]
