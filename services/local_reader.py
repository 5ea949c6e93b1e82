# ============================================================================
# LOCAL SCHEMA READER
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Service - Read table schema files from disk
# PURPOSE: Turn a schema directory into LocalSchemaFile records
# CREATED: 17 OCT 2026
# ============================================================================
"""
Local Schema Reader

Scans the top level of a schema directory for *.sql files. The backup/
subdirectory and anything else below the top level are not read.

Each file yields:
- table name from the file stem
- embedded timestamp from the "-- Remote last updated: <ISO8601>" header
  when it parses, otherwise the file mtime
- raw DDL with comment and blank lines removed, plus its normalized form

An unreadable file aborts the whole read.

Usage:
    from services.local_reader import read_local_schemas

    local = read_local_schemas("./supabase/schemas")
    local["users"].normalized_ddl
"""

import math
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Union

from core.logging import ComponentType, get_logger
from core.models import LocalSchemaFile
from core.schema.ddl_utils import normalize_ddl, strip_comment_lines

logger = get_logger(__name__, ComponentType.SERVICE)

REMOTE_TIMESTAMP_PATTERN = re.compile(r"-- Remote last updated: (.+)")


def parse_timestamp(text: str) -> Optional[int]:
    """
    Parse an ISO-8601 timestamp into unix seconds.

    A trailing "Z" is accepted and naive values are read as UTC.

    Args:
        text: Timestamp text from a file header

    Returns:
        Unix seconds (floored), or None if the text is not a date
    """
    value = text.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return math.floor(parsed.timestamp())


def read_schema_file(path: Path) -> LocalSchemaFile:
    """
    Read one schema file.

    Args:
        path: Path to a .sql file

    Returns:
        LocalSchemaFile
    """
    file_timestamp = math.floor(path.stat().st_mtime)
    content = path.read_text(encoding="utf-8")

    embedded_timestamp = file_timestamp
    match = REMOTE_TIMESTAMP_PATTERN.search(content)
    if match:
        parsed = parse_timestamp(match.group(1))
        if parsed is not None:
            embedded_timestamp = parsed
        else:
            logger.debug(f"Unparseable remote timestamp in {path.name}: {match.group(1)!r}")

    raw_ddl = strip_comment_lines(content)

    return LocalSchemaFile(
        table_name=path.stem,
        raw_ddl=raw_ddl,
        normalized_ddl=normalize_ddl(raw_ddl),
        embedded_timestamp=embedded_timestamp,
        file_timestamp=file_timestamp,
        file_path=path,
    )


def read_local_schemas(schema_dir: Union[str, Path]) -> Dict[str, LocalSchemaFile]:
    """
    Read every table schema file in a directory.

    Args:
        schema_dir: Schema directory

    Returns:
        Table name -> LocalSchemaFile; empty if the directory is missing
    """
    directory = Path(schema_dir)
    if not directory.is_dir():
        logger.debug(f"Schema directory {directory} does not exist")
        return {}

    schemas: Dict[str, LocalSchemaFile] = {}
    for path in sorted(directory.iterdir()):
        if not path.name.endswith(".sql") or not path.is_file():
            continue
        local = read_schema_file(path)
        schemas[local.table_name] = local

    logger.info(f"Read {len(schemas)} local schema files from {directory}")
    return schemas


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "parse_timestamp",
    "read_schema_file",
    "read_local_schemas",
]
