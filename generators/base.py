# ============================================================================
# GENERATED FILE PRIMITIVES
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Generators - Shared output type
# PURPOSE: Keep generators pure; write their output in one place
# CREATED: 17 OCT 2026
# ============================================================================
"""
Generated File Primitives

Every generator returns GeneratedFile values and never touches the
filesystem. write_generated() is the single place that writes them.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.GENERATOR)


@dataclass(frozen=True)
class GeneratedFile:
    """Output of a generator: where it goes and what it contains."""
    path: Path
    content: str


def write_generated(files: Union[GeneratedFile, Iterable[GeneratedFile]]) -> List[Path]:
    """
    Write generator output, creating parent directories.

    Returns:
        Written paths
    """
    if isinstance(files, GeneratedFile):
        files = [files]

    written = []
    for generated in files:
        path = Path(generated.path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(generated.content, encoding="utf-8")
        logger.debug(f"Wrote {path} ({len(generated.content)} chars)")
        written.append(path)
    return written


__all__ = ["GeneratedFile", "write_generated"]
