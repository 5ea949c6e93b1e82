# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent logging across CLI commands, introspection and writers
# CREATED: 17 OCT 2026
# ============================================================================
"""
Structured Logging

Logging for supatool. Operational events go through these loggers;
user-facing output (diffs, prompts, summaries) is printed directly.

Features:
- Component-based loggers
- Contextual fields (command, table, object_kind)
- JSON output when LOG_FORMAT=json

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger("services.sync")

    with log_context(command="sync", table="users"):
        logger.info("Writing schema file")
"""

import contextvars
import json
import logging
import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Union
from enum import Enum


class ComponentType(str, Enum):
    """Component types for logging categorization."""
    CLI = "cli"
    INTROSPECTION = "introspection"
    SERVICE = "service"
    WRITER = "writer"
    GENERATOR = "generator"
    REPOSITORY = "repository"
    INFRASTRUCTURE = "infrastructure"


@dataclass
class LogContext:
    """
    Context for structured logging.

    Stored in a context variable so concurrent introspection tasks
    each see their own fields.
    """
    command: Optional[str] = None
    table: Optional[str] = None
    object_kind: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict, excluding None values."""
        result = {}
        for key, value in asdict(self).items():
            if value is not None and key != "extra":
                result[key] = value
        if self.extra:
            result.update(self.extra)
        return result


_context_stack: contextvars.ContextVar[Tuple[LogContext, ...]] = contextvars.ContextVar(
    "supatool_log_context", default=()
)


def get_current_context() -> LogContext:
    """Get current logging context."""
    stack = _context_stack.get()
    if stack:
        return stack[-1]
    return LogContext()


@contextmanager
def log_context(**kwargs):
    """
    Context manager for adding logging context.

    Args:
        **kwargs: Context fields to add

    Example:
        with log_context(command="extract", object_kind="view"):
            logger.info("Fetching views")
    """
    parent = get_current_context()
    new_context = LogContext(
        command=kwargs.get("command", parent.command),
        table=kwargs.get("table", parent.table),
        object_kind=kwargs.get("object_kind", parent.object_kind),
        operation=kwargs.get("operation", parent.operation),
        extra={**parent.extra, **kwargs.get("extra", {})},
    )

    token = _context_stack.set(_context_stack.get() + (new_context,))
    try:
        yield new_context
    finally:
        _context_stack.reset(token)


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    One JSON object per line, for piping CI runs into log tooling.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context_dict = get_current_context().to_dict()
        if context_dict:
            log_data["context"] = context_dict

        if hasattr(record, "extra") and record.extra:
            log_data["data"] = record.extra

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """
    Human-readable formatter for terminal use.

    Includes context fields inline for easy reading.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for human reading."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        level = record.levelname.ljust(8)

        context = get_current_context()
        context_parts = []
        if context.command:
            context_parts.append(f"cmd={context.command}")
        if context.object_kind:
            context_parts.append(f"kind={context.object_kind}")
        if context.table:
            context_parts.append(f"table={context.table}")

        context_str = f" [{', '.join(context_parts)}]" if context_parts else ""

        result = f"{timestamp} {level} {record.name}{context_str}: {record.getMessage()}"

        if record.exc_info:
            result += f"\n{self.formatException(record.exc_info)}"

        return result


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that includes context in log records.
    """

    def process(self, msg, kwargs):
        """Process log record to include context."""
        context = get_current_context()

        extra = kwargs.get("extra", {})
        extra.update(context.to_dict())
        if self.extra and self.extra.get("component"):
            extra.setdefault("component", self.extra["component"])

        kwargs["extra"] = {"extra": extra}

        return msg, kwargs


def get_logger(
    name: str,
    component: Optional[ComponentType] = None,
) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (e.g., "services.sync")
        component: Optional component type for categorization

    Returns:
        ContextLogger instance
    """
    base_logger = logging.getLogger(name)
    return ContextLogger(base_logger, {"component": component.value if component else None})


def configure_logging(
    level: Union[str, int] = "WARNING",
    json_output: bool = False,
) -> None:
    """
    Configure logging for the CLI.

    Log output goes to stderr so it never interleaves with generated
    text a user might redirect from stdout.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR); LOG_LEVEL overrides
        json_output: Use JSON format; LOG_FORMAT=json also enables it
    """
    level = os.getenv("LOG_LEVEL", level)
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    # psycopg pool chatter is only useful when debugging connections
    if level > logging.DEBUG:
        logging.getLogger("psycopg.pool").setLevel(logging.WARNING)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
]
