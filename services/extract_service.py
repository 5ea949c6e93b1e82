# ============================================================================
# EXTRACT SERVICE
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Service - Database -> SQL file tree
# PURPOSE: Extract schema objects into per-kind files plus index files
# CREATED: 17 OCT 2026
# ============================================================================
"""
Extract Service

Extracts database objects into SQL files:

    <output_dir>/
        index.md
        llms.txt
        tables/  views/  rls/  rpc/  cron/  types/

With separate_directories off every file lands in output_dir itself.

Modes:
    default      tables and views
    tables_only  tables
    views_only   views
    all          tables, views, RLS, functions, triggers, cron, types

Usage:
    from services.extract_service import ExtractOptions, extract_definitions

    result = await extract_definitions(ExtractOptions(
        connection_string=conninfo,
        output_dir=Path("supabase/schemas"),
        all=True,
    ), confirmer)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from core.config import IntrospectionDefaults
from core.contracts import ObjectKind
from core.logging import ComponentType, get_logger, log_context
from core.models import SchemaObject
from core.schema.ddl_utils import pattern_search
from services.confirmation import Confirmer
from services.definition_indexer import write_index
from services.introspection_service import IntrospectionService, introspection_session

logger = get_logger(__name__, ComponentType.SERVICE)


@dataclass
class ExtractOptions:
    """Options for one extract run."""
    connection_string: Optional[str]
    output_dir: Path
    separate_directories: bool = True
    tables_only: bool = False
    views_only: bool = False
    all: bool = False
    table_pattern: str = "*"
    force: bool = False
    schemas: Sequence[str] = ("public",)


@dataclass
class ExtractResult:
    """What an extract run wrote."""
    output_dir: Path
    objects: List[SchemaObject] = field(default_factory=list)
    files: List[Path] = field(default_factory=list)
    cancelled: bool = False

    @property
    def counts(self) -> Dict[ObjectKind, int]:
        totals = {kind: 0 for kind in ObjectKind}
        for obj in self.objects:
            totals[obj.kind] += 1
        return totals


def confirm_overwrite(output_dir: Path, force: bool, confirmer: Confirmer) -> bool:
    """Ask before extracting into a non-empty directory."""
    if force or not output_dir.is_dir() or not any(output_dir.iterdir()):
        return True
    response = confirmer.ask(f'Directory "{output_dir}" already exists and contains files. Overwrite?')
    return response.approved


def select_objects(objects: Sequence[SchemaObject], options: ExtractOptions) -> List[SchemaObject]:
    """Apply the mode flags and the name pattern."""
    selected = list(objects)
    if not options.all:
        if options.tables_only:
            selected = [obj for obj in selected if obj.kind is ObjectKind.TABLE]
        elif options.views_only:
            selected = [obj for obj in selected if obj.kind is ObjectKind.VIEW]
    return [obj for obj in selected if pattern_search(obj.name, options.table_pattern)]


def save_definitions(
    objects: Sequence[SchemaObject],
    output_dir: Path,
    separate_directories: bool = True,
) -> List[Path]:
    """
    Write one file per object, each ending in a newline.

    Returns:
        Written paths, in object order
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for obj in objects:
        path = output_dir / obj.relative_path(separate_directories)
        path.parent.mkdir(parents=True, exist_ok=True)
        ddl = obj.ddl if obj.ddl.endswith("\n") else obj.ddl + "\n"
        path.write_text(ddl, encoding="utf-8")
        written.append(path)
    return written


async def collect_objects(service: IntrospectionService, options: ExtractOptions) -> List[SchemaObject]:
    """Fetch what the selected mode needs."""
    if options.all:
        return await service.fetch_all(options.schemas)
    return await service.fetch_relations(options.schemas)


def print_summary(result: ExtractResult) -> None:
    print(f"✔ Extraction completed: {result.output_dir}")
    for kind, count in result.counts.items():
        if count:
            print(f"   {kind.label}: {count}")
    print("")


async def extract_definitions(
    options: ExtractOptions,
    confirmer: Confirmer,
    defaults: Optional[IntrospectionDefaults] = None,
) -> ExtractResult:
    """
    Run an extraction.

    Args:
        options: Extract options
        confirmer: Prompt for overwriting a non-empty output directory
        defaults: Introspection defaults override

    Returns:
        ExtractResult (cancelled=True if the overwrite was declined)

    Raises:
        ConfigurationError: Missing or malformed connection string
        DatabaseConnectionError: Connection failure
    """
    output_dir = Path(options.output_dir)
    result = ExtractResult(output_dir=output_dir)

    if not confirm_overwrite(output_dir, options.force, confirmer):
        print("Operation cancelled.")
        result.cancelled = True
        return result

    with log_context(command="extract"):
        async with introspection_session(options.connection_string, defaults) as service:
            objects = await collect_objects(service, options)

        result.objects = select_objects(objects, options)
        logger.info(f"Saving {len(result.objects)} definitions to {output_dir}")
        result.files = save_definitions(result.objects, output_dir, options.separate_directories)
        write_index(result.objects, output_dir, options.separate_directories)

    print_summary(result)
    return result


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ExtractOptions",
    "ExtractResult",
    "confirm_overwrite",
    "select_objects",
    "save_definitions",
    "collect_objects",
    "extract_definitions",
]
