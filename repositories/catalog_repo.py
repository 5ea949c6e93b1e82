# ============================================================================
# CATALOG REPOSITORY
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core - Read-only PostgreSQL catalog queries
# PURPOSE: Rows describing tables, views, policies, routines, cron and types
# CREATED: 17 OCT 2026
# ============================================================================
"""
Catalog Repository

Read-only queries against pg_catalog and information_schema. Every
method returns plain dict rows; DDL rendering lives in
core.schema.sql_generator.

Usage:
    from repositories.catalog_repo import CatalogRepository

    repo = CatalogRepository(pool)
    relations = await repo.list_relations(["public"])
"""

from typing import Any, Dict, List, Optional, Sequence

from psycopg import AsyncConnection
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.REPOSITORY)

Row = Dict[str, Any]


# ============================================================================
# QUERIES
# ============================================================================

SQL_LIST_TABLES = """
    SELECT tablename AS name, schemaname AS schema_name, 'table' AS kind
    FROM pg_tables
    WHERE schemaname = ANY(%s)
    ORDER BY schemaname, tablename
"""

SQL_LIST_VIEWS = """
    SELECT viewname AS name, schemaname AS schema_name, 'view' AS kind
    FROM pg_views
    WHERE schemaname = ANY(%s)
    ORDER BY schemaname, viewname
"""

SQL_TABLE_TIMESTAMP = """
    SELECT EXTRACT(EPOCH FROM GREATEST(
        COALESCE(last_vacuum, '1970-01-01'::timestamp),
        COALESCE(last_autovacuum, '1970-01-01'::timestamp),
        COALESCE(last_analyze, '1970-01-01'::timestamp),
        COALESCE(last_autoanalyze, '1970-01-01'::timestamp)
    ))::bigint AS last_updated
    FROM pg_stat_user_tables
    WHERE relname = %s AND schemaname = %s
"""

SQL_VIEW_TIMESTAMP = """
    SELECT EXTRACT(EPOCH FROM GREATEST(
        COALESCE(pg_stat_get_last_vacuum_time(c.oid), '1970-01-01'::timestamp),
        COALESCE(pg_stat_get_last_analyze_time(c.oid), '1970-01-01'::timestamp)
    ))::bigint AS last_updated
    FROM pg_class c
    JOIN pg_namespace n ON c.relnamespace = n.oid
    WHERE c.relname = %s AND n.nspname = %s AND c.relkind = 'v'
"""

SQL_COLUMNS = """
    SELECT
        c.column_name,
        c.data_type,
        c.udt_name,
        c.character_maximum_length,
        c.is_nullable,
        c.column_default,
        pg_catalog.format_type(a.atttypid, a.atttypmod) AS full_type
    FROM information_schema.columns c
    JOIN pg_namespace ns ON ns.nspname = c.table_schema
    JOIN pg_class cl ON cl.relname = c.table_name AND cl.relnamespace = ns.oid
    JOIN pg_attribute a ON a.attrelid = cl.oid AND a.attname = c.column_name
    WHERE c.table_schema = %s AND c.table_name = %s
    ORDER BY c.ordinal_position
"""

SQL_PRIMARY_KEY = """
    SELECT kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON tc.constraint_name = kcu.constraint_name
     AND tc.table_schema = kcu.table_schema
    WHERE tc.table_schema = %s
      AND tc.table_name = %s
      AND tc.constraint_type = 'PRIMARY KEY'
    ORDER BY kcu.ordinal_position
"""

SQL_UNIQUE_CONSTRAINTS = """
    SELECT
        tc.constraint_name,
        string_agg(kcu.column_name, ', ' ORDER BY kcu.ordinal_position) AS columns
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON tc.constraint_name = kcu.constraint_name
     AND tc.table_schema = kcu.table_schema
    WHERE tc.table_schema = %s
      AND tc.table_name = %s
      AND tc.constraint_type = 'UNIQUE'
    GROUP BY tc.constraint_name
    ORDER BY tc.constraint_name
"""

SQL_FOREIGN_KEYS = """
    SELECT
        tc.constraint_name,
        string_agg(kcu.column_name, ', ' ORDER BY kcu.ordinal_position) AS columns,
        ccu.table_schema AS foreign_table_schema,
        ccu.table_name AS foreign_table_name,
        string_agg(ccu.column_name, ', ' ORDER BY kcu.ordinal_position) AS foreign_columns
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON tc.constraint_name = kcu.constraint_name
     AND tc.table_schema = kcu.table_schema
    JOIN information_schema.constraint_column_usage ccu
      ON tc.constraint_name = ccu.constraint_name
     AND tc.table_schema = ccu.table_schema
    WHERE tc.table_schema = %s
      AND tc.table_name = %s
      AND tc.constraint_type = 'FOREIGN KEY'
    GROUP BY tc.constraint_name, ccu.table_schema, ccu.table_name
    ORDER BY tc.constraint_name
"""

SQL_RELATION_COMMENT = """
    SELECT obj_description(c.oid) AS comment
    FROM pg_class c
    JOIN pg_namespace n ON c.relnamespace = n.oid
    WHERE c.relname = %s AND n.nspname = %s AND c.relkind = %s
"""

SQL_COLUMN_COMMENTS = """
    SELECT a.attname AS column_name, d.description AS column_comment
    FROM pg_class c
    JOIN pg_namespace n ON c.relnamespace = n.oid
    JOIN pg_attribute a ON a.attrelid = c.oid AND a.attnum > 0 AND NOT a.attisdropped
    JOIN pg_description d ON d.objoid = c.oid AND d.objsubid = a.attnum
    WHERE n.nspname = %s AND c.relname = %s
    ORDER BY a.attnum
"""

SQL_VIEW_DEFINITION = """
    SELECT pv.definition, c.reloptions
    FROM pg_views pv
    JOIN pg_namespace n ON n.nspname = pv.schemaname
    JOIN pg_class c ON c.relname = pv.viewname AND c.relnamespace = n.oid
    WHERE pv.schemaname = %s AND pv.viewname = %s AND c.relkind = 'v'
"""

SQL_POLICIES = """
    SELECT schemaname, tablename, policyname, permissive, roles, cmd, qual, with_check
    FROM pg_policies
    WHERE schemaname = ANY(%s)
    ORDER BY schemaname, tablename, policyname
"""

SQL_FUNCTIONS = """
    SELECT
        p.proname AS name,
        pg_get_functiondef(p.oid) AS definition,
        n.nspname AS schema_name,
        obj_description(p.oid) AS comment,
        pg_get_function_identity_arguments(p.oid) AS identity_args,
        pg_get_function_arguments(p.oid) AS full_args
    FROM pg_proc p
    JOIN pg_namespace n ON p.pronamespace = n.oid
    WHERE n.nspname = ANY(%s)
      AND p.prokind IN ('f', 'p')
    ORDER BY n.nspname, p.proname
"""

SQL_TRIGGERS = """
    SELECT
        t.tgname AS trigger_name,
        c.relname AS table_name,
        n.nspname AS schema_name,
        pg_get_triggerdef(t.oid) AS definition
    FROM pg_trigger t
    JOIN pg_class c ON t.tgrelid = c.oid
    JOIN pg_namespace n ON c.relnamespace = n.oid
    WHERE n.nspname = ANY(%s)
      AND NOT t.tgisinternal
    ORDER BY n.nspname, c.relname, t.tgname
"""

SQL_CRON_JOBS = """
    SELECT jobid, schedule, command, jobname, active
    FROM cron.job
    ORDER BY jobid
"""

SQL_CUSTOM_TYPES = """
    SELECT
        t.typname AS type_name,
        n.nspname AS schema_name,
        obj_description(t.oid) AS comment,
        CASE
            WHEN t.typtype = 'e' THEN 'enum'
            WHEN t.typtype = 'c' THEN 'composite'
            WHEN t.typtype = 'd' THEN 'domain'
            ELSE 'other'
        END AS type_category
    FROM pg_type t
    JOIN pg_namespace n ON t.typnamespace = n.oid
    WHERE n.nspname = ANY(%s)
      AND t.typtype IN ('e', 'c', 'd')
      AND t.typisdefined = true
      AND NOT t.typarray = 0
      AND NOT EXISTS (
          SELECT 1 FROM pg_class c
          WHERE c.relname = t.typname AND c.relnamespace = n.oid
      )
      AND NOT EXISTS (
          SELECT 1 FROM pg_proc p
          WHERE p.proname = t.typname AND p.pronamespace = n.oid
      )
      AND t.typname NOT LIKE 'pg\\_%%'
      AND t.typname NOT LIKE '\\_%%'
      AND t.typname NOT LIKE '%%\\_old'
      AND t.typname NOT LIKE '%%\\_bak'
      AND t.typname NOT LIKE 'tmp\\_%%'
    ORDER BY n.nspname, t.typname
"""

SQL_ENUM_LABELS = """
    SELECT e.enumlabel
    FROM pg_enum e
    JOIN pg_type t ON t.oid = e.enumtypid
    JOIN pg_namespace n ON n.oid = t.typnamespace
    WHERE t.typname = %s AND n.nspname = %s
    ORDER BY e.enumsortorder
"""

SQL_COMPOSITE_ATTRIBUTES = """
    SELECT
        a.attname AS column_name,
        pg_catalog.format_type(a.atttypid, a.atttypmod) AS column_type
    FROM pg_attribute a
    JOIN pg_type t ON t.typrelid = a.attrelid
    JOIN pg_namespace n ON n.oid = t.typnamespace
    WHERE t.typname = %s AND n.nspname = %s
      AND a.attnum > 0
      AND NOT a.attisdropped
    ORDER BY a.attnum
"""

SQL_DOMAIN = """
    SELECT
        pg_catalog.format_type(t.typbasetype, t.typtypmod) AS base_type,
        t.typnotnull,
        t.typdefault,
        (SELECT string_agg(pg_get_constraintdef(c.oid), ' AND ')
         FROM pg_constraint c
         WHERE c.contypid = t.oid) AS constraints
    FROM pg_type t
    JOIN pg_namespace n ON n.oid = t.typnamespace
    WHERE t.typname = %s AND n.nspname = %s AND t.typtype = 'd'
"""


# ============================================================================
# REPOSITORY
# ============================================================================

async def _fetch_all(conn: AsyncConnection, query: str, params: Sequence[Any] = ()) -> List[Row]:
    async with conn.cursor(row_factory=dict_row) as cur:
        await cur.execute(query, params)
        return await cur.fetchall()


async def _fetch_one(conn: AsyncConnection, query: str, params: Sequence[Any] = ()) -> Optional[Row]:
    async with conn.cursor(row_factory=dict_row) as cur:
        await cur.execute(query, params)
        return await cur.fetchone()


class CatalogRepository:
    """Repository for catalog reads."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def list_relations(self, schemas: Sequence[str]) -> List[Row]:
        """
        List tables then views in the given schemas.

        Args:
            schemas: Schema names

        Returns:
            Rows with name, schema_name, kind ("table" or "view")
        """
        async with self.pool.connection() as conn:
            tables = await _fetch_all(conn, SQL_LIST_TABLES, (list(schemas),))
            views = await _fetch_all(conn, SQL_LIST_VIEWS, (list(schemas),))
        logger.debug(f"Found {len(tables)} tables and {len(views)} views")
        return tables + views

    async def relation_timestamp(self, schema: str, name: str, kind: str) -> Optional[int]:
        """
        Last vacuum/analyze time of a table or view, in unix seconds.

        Returns None when the statistics are missing or never set.
        """
        query = SQL_TABLE_TIMESTAMP if kind == "table" else SQL_VIEW_TIMESTAMP
        async with self.pool.connection() as conn:
            row = await _fetch_one(conn, query, (name, schema))
        if row and row["last_updated"] and int(row["last_updated"]) > 0:
            return int(row["last_updated"])
        return None

    async def table_parts(self, schema: str, name: str) -> Dict[str, Any]:
        """
        Everything needed to render one table's DDL.

        Runs the per-table queries sequentially on a single pooled
        connection.

        Returns:
            Dict with columns, primary_keys, unique_constraints,
            foreign_keys, table_comment, column_comments
        """
        async with self.pool.connection() as conn:
            columns = await _fetch_all(conn, SQL_COLUMNS, (schema, name))
            pk_rows = await _fetch_all(conn, SQL_PRIMARY_KEY, (schema, name))
            uniques = await _fetch_all(conn, SQL_UNIQUE_CONSTRAINTS, (schema, name))
            foreign_keys = await _fetch_all(conn, SQL_FOREIGN_KEYS, (schema, name))
            comment_row = await _fetch_one(conn, SQL_RELATION_COMMENT, (name, schema, "r"))
            comment_rows = await _fetch_all(conn, SQL_COLUMN_COMMENTS, (schema, name))

        return {
            "columns": columns,
            "primary_keys": [r["column_name"] for r in pk_rows],
            "unique_constraints": uniques,
            "foreign_keys": foreign_keys,
            "table_comment": comment_row["comment"] if comment_row else None,
            "column_comments": {
                r["column_name"]: r["column_comment"]
                for r in comment_rows
                if r["column_comment"]
            },
        }

    async def view_parts(self, schema: str, name: str) -> Optional[Dict[str, Any]]:
        """
        Definition, reloptions and comment of one view.

        Returns:
            Dict with definition, reloptions, comment; None if not found
        """
        async with self.pool.connection() as conn:
            row = await _fetch_one(conn, SQL_VIEW_DEFINITION, (schema, name))
            if row is None:
                return None
            comment_row = await _fetch_one(conn, SQL_RELATION_COMMENT, (name, schema, "v"))

        return {
            "definition": row["definition"],
            "reloptions": row["reloptions"],
            "comment": comment_row["comment"] if comment_row else None,
        }

    async def policies(self, schemas: Sequence[str]) -> List[Row]:
        async with self.pool.connection() as conn:
            return await _fetch_all(conn, SQL_POLICIES, (list(schemas),))

    async def functions(self, schemas: Sequence[str]) -> List[Row]:
        async with self.pool.connection() as conn:
            return await _fetch_all(conn, SQL_FUNCTIONS, (list(schemas),))

    async def triggers(self, schemas: Sequence[str]) -> List[Row]:
        async with self.pool.connection() as conn:
            return await _fetch_all(conn, SQL_TRIGGERS, (list(schemas),))

    async def cron_jobs(self) -> List[Row]:
        """pg_cron jobs; raises if the extension is not installed."""
        async with self.pool.connection() as conn:
            return await _fetch_all(conn, SQL_CRON_JOBS)

    async def custom_types(self, schemas: Sequence[str]) -> List[Row]:
        async with self.pool.connection() as conn:
            return await _fetch_all(conn, SQL_CUSTOM_TYPES, (list(schemas),))

    async def enum_labels(self, schema: str, type_name: str) -> List[str]:
        async with self.pool.connection() as conn:
            rows = await _fetch_all(conn, SQL_ENUM_LABELS, (type_name, schema))
        return [r["enumlabel"] for r in rows]

    async def composite_attributes(self, schema: str, type_name: str) -> List[Row]:
        async with self.pool.connection() as conn:
            return await _fetch_all(conn, SQL_COMPOSITE_ATTRIBUTES, (type_name, schema))

    async def domain_info(self, schema: str, type_name: str) -> Optional[Row]:
        async with self.pool.connection() as conn:
            return await _fetch_one(conn, SQL_DOMAIN, (type_name, schema))


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "CatalogRepository",
]
