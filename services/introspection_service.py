# ============================================================================
# REMOTE SCHEMA INTROSPECTION SERVICE
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Service - Catalog rows -> SchemaObjects
# PURPOSE: Bounded-concurrency introspection of a live database
# CREATED: 17 OCT 2026
# ============================================================================
"""
Remote Schema Introspection Service

Wires CatalogRepository (queries) to CatalogDDL (rendering) and produces
SchemaObject lists.

Tables and views are introspected in batches of concurrency_limit
(default 20, clamped to 5..50). Each batch runs concurrently and is
awaited in full before the next one starts. A failing item is logged
with its kind, name and position and yields nothing; its siblings are
unaffected. There are no retries.

RLS policies and cron jobs degrade to an empty list with a warning
(missing permissions, pg_cron not installed). Functions, triggers and
custom types propagate their errors.

Usage:
    service = IntrospectionService(CatalogRepository(pool))
    objects = await service.fetch_all(["public"])
"""

import asyncio
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence

from core.config import IntrospectionDefaults, get_defaults
from core.contracts import ObjectKind
from core.logging import ComponentType, get_logger, log_context
from core.models import SchemaObject
from core.schema.ddl_utils import qualified_object_name
from core.schema.sql_generator import CatalogDDL
from infrastructure.postgresql import prepare_connection_string, probe_connection
from repositories.catalog_repo import CatalogRepository
from repositories.database import DatabasePool

logger = get_logger(__name__, ComponentType.INTROSPECTION)


def _now() -> int:
    return int(time.time())


class IntrospectionService:
    """
    Builds SchemaObjects from the database catalogs.
    """

    def __init__(
        self,
        repo: CatalogRepository,
        defaults: Optional[IntrospectionDefaults] = None,
    ):
        self.repo = repo
        self.defaults = defaults or get_defaults().introspection

    # ------------------------------------------------------------------
    # Tables and views
    # ------------------------------------------------------------------

    async def _relation_timestamp(self, schema: str, name: str, kind: str) -> int:
        timestamp = await self.repo.relation_timestamp(schema, name, kind)
        return timestamp if timestamp else self.defaults.sentinel_timestamp

    async def build_relation(self, relation: Mapping[str, Any]) -> SchemaObject:
        """
        Introspect one table or view.

        Args:
            relation: Row from list_relations (name, schema_name, kind)

        Returns:
            SchemaObject

        Raises:
            LookupError: If a view's definition is no longer available
        """
        name = relation["name"]
        schema = relation["schema_name"]
        kind = relation["kind"]

        if kind == "table":
            parts = await self.repo.table_parts(schema, name)
            ddl = CatalogDDL.table(name=name, schema=schema, **parts)
            comment = parts.get("table_comment")
            object_kind = ObjectKind.TABLE
        else:
            parts = await self.repo.view_parts(schema, name)
            if parts is None:
                raise LookupError(f"view {schema}.{name} has no definition")
            ddl = CatalogDDL.view(name=name, schema=schema, **parts)
            comment = parts.get("comment")
            object_kind = ObjectKind.VIEW

        return SchemaObject(
            name=qualified_object_name(schema, name),
            kind=object_kind,
            ddl=ddl,
            timestamp=await self._relation_timestamp(schema, name, kind),
            comment=comment or None,
            schema_name=schema,
        )

    async def _build_or_none(
        self,
        relation: Mapping[str, Any],
        position: int,
        total: int,
    ) -> Optional[SchemaObject]:
        try:
            with log_context(object_kind=relation["kind"], table=relation["name"]):
                return await self.build_relation(relation)
        except Exception as e:
            logger.error(
                f"Error processing {relation['kind']} {relation['name']} ({position}/{total}): {e}"
            )
            return None

    async def introspect_in_batches(
        self,
        relations: Sequence[Mapping[str, Any]],
    ) -> List[SchemaObject]:
        """
        Introspect relations in fixed-size concurrent batches.

        Args:
            relations: Rows from list_relations

        Returns:
            SchemaObjects for every relation that succeeded, input order kept
        """
        limit = self.defaults.concurrency_limit
        total = len(relations)
        results: List[SchemaObject] = []

        for start in range(0, total, limit):
            batch = relations[start:start + limit]
            logger.debug(f"Introspecting batch {start // limit + 1} ({len(batch)} items)")
            built = await asyncio.gather(*(
                self._build_or_none(relation, start + offset + 1, total)
                for offset, relation in enumerate(batch)
            ))
            results.extend(obj for obj in built if obj is not None)

        failed = total - len(results)
        if failed:
            logger.warning(f"{failed} of {total} tables/views could not be introspected")
        return results

    async def fetch_relations(self, schemas: Sequence[str]) -> List[SchemaObject]:
        """Tables then views in the given schemas."""
        relations = await self.repo.list_relations(schemas)
        logger.info(f"Introspecting {len(relations)} tables/views (batch size {self.defaults.concurrency_limit})")
        return await self.introspect_in_batches(relations)

    # ------------------------------------------------------------------
    # Full mode objects
    # ------------------------------------------------------------------

    async def fetch_rls(self, schemas: Sequence[str]) -> List[SchemaObject]:
        """One RLS object per table that has policies."""
        try:
            rows = await self.repo.policies(schemas)
        except Exception as e:
            logger.warning(f"Skipping RLS policies extraction: {e}")
            return []

        grouped: Dict[tuple, List[Mapping[str, Any]]] = {}
        for row in rows:
            grouped.setdefault((row["schemaname"], row["tablename"]), []).append(row)

        now = _now()
        return [
            SchemaObject(
                name=f"{schema}_{table}_policies",
                kind=ObjectKind.RLS,
                ddl=CatalogDDL.rls_policies(schema, table, policies),
                timestamp=now,
                category=f"{schema}.{table}",
                schema_name=schema,
            )
            for (schema, table), policies in grouped.items()
        ]

    async def fetch_functions(self, schemas: Sequence[str]) -> List[SchemaObject]:
        rows = await self.repo.functions(schemas)
        now = _now()
        return [
            SchemaObject(
                name=qualified_object_name(row["schema_name"], row["name"]),
                kind=ObjectKind.FUNCTION,
                ddl=CatalogDDL.function(row),
                timestamp=now,
                comment=row.get("comment") or None,
                schema_name=row["schema_name"],
            )
            for row in rows
        ]

    async def fetch_triggers(self, schemas: Sequence[str]) -> List[SchemaObject]:
        rows = await self.repo.triggers(schemas)
        now = _now()
        return [
            SchemaObject(
                name=f"{row['schema_name']}_{row['table_name']}_{row['trigger_name']}",
                kind=ObjectKind.TRIGGER,
                ddl=CatalogDDL.trigger(row),
                timestamp=now,
                category=f"{row['schema_name']}.{row['table_name']}",
                schema_name=row["schema_name"],
            )
            for row in rows
        ]

    async def fetch_cron(self) -> List[SchemaObject]:
        """pg_cron jobs; empty when the extension is missing."""
        try:
            rows = await self.repo.cron_jobs()
        except Exception as e:
            logger.warning(f"Skipping cron jobs extraction (pg_cron not available?): {e}")
            return []

        now = _now()
        return [
            SchemaObject(
                name=CatalogDDL.cron_job_name(row),
                kind=ObjectKind.CRON,
                ddl=CatalogDDL.cron_job(row),
                timestamp=now,
                schema_name="cron",
            )
            for row in rows
        ]

    async def _type_body(self, row: Mapping[str, Any]) -> Optional[str]:
        schema, type_name = row["schema_name"], row["type_name"]
        category = row["type_category"]

        if category == "enum":
            labels = await self.repo.enum_labels(schema, type_name)
            return CatalogDDL.enum_type(type_name, labels) if labels else None
        if category == "composite":
            attributes = await self.repo.composite_attributes(schema, type_name)
            return CatalogDDL.composite_type(type_name, attributes) if attributes else None
        if category == "domain":
            domain = await self.repo.domain_info(schema, type_name)
            return CatalogDDL.domain_type(type_name, domain) if domain else None
        return None

    async def fetch_custom_types(self, schemas: Sequence[str]) -> List[SchemaObject]:
        """Enum, composite and domain types."""
        rows = await self.repo.custom_types(schemas)
        now = _now()
        types = []
        for row in rows:
            body = await self._type_body(row)
            if body is None:
                logger.debug(f"Skipping type {row['schema_name']}.{row['type_name']} with no body")
                continue
            types.append(SchemaObject(
                name=f"{row['schema_name']}_{row['type_name']}",
                kind=ObjectKind.TYPE,
                ddl=CatalogDDL.custom_type(row["schema_name"], row["type_name"], body, row.get("comment")),
                timestamp=now,
                comment=row.get("comment") or None,
                schema_name=row["schema_name"],
            ))
        return types

    async def fetch_all(self, schemas: Sequence[str]) -> List[SchemaObject]:
        """
        Every supported object kind, fetched sequentially by kind.

        Returns:
            Tables and views, then RLS, functions, triggers, cron, types
        """
        objects: List[SchemaObject] = []
        with log_context(object_kind="relation"):
            objects.extend(await self.fetch_relations(schemas))
        with log_context(object_kind="rls"):
            objects.extend(await self.fetch_rls(schemas))
        with log_context(object_kind="function"):
            objects.extend(await self.fetch_functions(schemas))
        with log_context(object_kind="trigger"):
            objects.extend(await self.fetch_triggers(schemas))
        with log_context(object_kind="cron"):
            objects.extend(await self.fetch_cron())
        with log_context(object_kind="type"):
            objects.extend(await self.fetch_custom_types(schemas))
        return objects

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    async def fetch_remote_tables(self, schemas: Sequence[str] = ("public",)) -> Dict[str, SchemaObject]:
        """
        Tables (not views) keyed by name, as compared by sync.
        """
        relations = [
            r for r in await self.repo.list_relations(schemas)
            if r["kind"] == "table"
        ]
        tables = await self.introspect_in_batches(relations)
        return {table.name: table for table in tables}


@asynccontextmanager
async def introspection_session(
    connection_string: Optional[str],
    defaults: Optional[IntrospectionDefaults] = None,
) -> AsyncIterator[IntrospectionService]:
    """
    Connect, open a pool sized to the batch limit and yield a service.

    Raises:
        ConfigurationError: Missing or malformed connection string
        DatabaseConnectionError: The server could not be reached
    """
    defaults = defaults or get_defaults().introspection
    conninfo = prepare_connection_string(connection_string, defaults.application_name)
    conninfo = await probe_connection(conninfo, defaults)

    async with DatabasePool(
        conninfo,
        max_size=defaults.concurrency_limit,
        statement_timeout_ms=defaults.statement_timeout_ms,
    ) as pool:
        yield IntrospectionService(CatalogRepository(pool), defaults)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "IntrospectionService",
    "introspection_session",
]
