# ============================================================================
# DEFINITION INDEXER
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Service - Index files for an extracted schema tree
# PURPOSE: Write index.md (for people) and llms.txt (for tools)
# CREATED: 17 OCT 2026
# ============================================================================
"""
Definition Indexer

Regenerated in full after every extraction.

index.md:
    # Database Schema Index
    ## Summary                     - Tables: 3 objects
    ## Tables                      - [users](tables/users.sql) - comment
    ## Directory Structure         tree of the kind folders that were written

llms.txt:
    Database Schema - Complete Objects Catalog
    SUMMARY                        Tables: 3
    OBJECTS                        table:users:tables/users.sql:comment

Usage:
    from services.definition_indexer import write_index

    write_index(objects, Path("supabase/schemas"))
"""

from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Union

from core.contracts import ObjectKind
from core.logging import ComponentType, get_logger
from core.models import SchemaObject

logger = get_logger(__name__, ComponentType.WRITER)

INDEX_FILE = "index.md"
CATALOG_FILE = "llms.txt"


def one_line(text: str) -> str:
    """Comment text with line breaks flattened to single spaces."""
    return " ".join(text.split())


def group_by_kind(objects: Sequence[SchemaObject]) -> Dict[ObjectKind, List[SchemaObject]]:
    """Objects grouped by kind, every kind present, in declaration order."""
    grouped: Dict[ObjectKind, List[SchemaObject]] = {kind: [] for kind in ObjectKind}
    for obj in objects:
        grouped[obj.kind].append(obj)
    return grouped


def render_index_markdown(objects: Sequence[SchemaObject], separate_directories: bool = True) -> str:
    """Human-readable Markdown index grouped by object kind."""
    grouped = group_by_kind(objects)
    lines = ["# Database Schema Index", "", "## Summary", ""]

    for kind, items in grouped.items():
        if items:
            lines.append(f"- {kind.label}: {len(items)} objects")
    lines.append("")

    for kind, items in grouped.items():
        if not items:
            continue
        lines.extend([f"## {kind.label}", ""])
        for obj in items:
            comment = f" - {one_line(obj.comment)}" if obj.comment else ""
            lines.append(f"- [{obj.name}]({obj.relative_path(separate_directories)}){comment}")
        lines.append("")

    lines.extend(["## Directory Structure", "", "```", "schemas/", "├── index.md", "├── llms.txt"])
    if separate_directories:
        # functions and triggers share rpc/
        folders = []
        for kind, items in grouped.items():
            if items and kind.directory not in folders:
                folders.append(kind.directory)
        lines.extend(f"└── {folder}/" for folder in folders)
    lines.append("```")

    return "\n".join(lines) + "\n"


def render_catalog(objects: Sequence[SchemaObject], separate_directories: bool = True) -> str:
    """Flat kind:name:path[:comment] catalog for automated consumers."""
    grouped = group_by_kind(objects)
    lines = ["Database Schema - Complete Objects Catalog", "", "SUMMARY"]

    for kind, items in grouped.items():
        if items:
            lines.append(f"{kind.label}: {len(items)}")
    lines.extend(["", "OBJECTS"])

    for obj in objects:
        comment = f":{one_line(obj.comment)}" if obj.comment else ""
        lines.append(f"{obj.kind.value}:{obj.name}:{obj.relative_path(separate_directories)}{comment}")

    return "\n".join(lines) + "\n"


def write_index(
    objects: Sequence[SchemaObject],
    output_dir: Union[str, Path],
    separate_directories: bool = True,
) -> Tuple[Path, Path]:
    """
    Write index.md and llms.txt into the extraction root.

    Args:
        objects: Everything that was extracted
        output_dir: Extraction root
        separate_directories: Whether objects live in per-kind folders

    Returns:
        (index path, catalog path)
    """
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)

    index_path = directory / INDEX_FILE
    catalog_path = directory / CATALOG_FILE
    index_path.write_text(render_index_markdown(objects, separate_directories), encoding="utf-8")
    catalog_path.write_text(render_catalog(objects, separate_directories), encoding="utf-8")

    logger.info(f"Wrote index for {len(objects)} objects to {directory}")
    return index_path, catalog_path


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "one_line",
    "group_by_kind",
    "render_index_markdown",
    "render_catalog",
    "write_index",
]
