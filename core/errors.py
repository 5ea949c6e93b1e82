# ============================================================================
# ERROR TYPES
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Foundation - Exception hierarchy and connection diagnostics
# PURPOSE: Typed failures that reach the CLI boundary with context attached
# CREATED: 17 OCT 2026
# ============================================================================
"""
Error Types

Every failure the CLI reports deliberately derives from SupatoolError.
Connection failures are classified so the CLI can print remediation hints.

Usage:
    from core.errors import DatabaseConnectionError, classify_connection_error

    try:
        await connect(...)
    except psycopg.OperationalError as e:
        raise DatabaseConnectionError.from_exception(e, host="db.example.co")
"""

from enum import Enum
from typing import List, Optional


class SupatoolError(Exception):
    """Base exception for supatool operations."""

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        super().__init__(message)


class ConfigurationError(SupatoolError):
    """Raised when required configuration is missing or malformed."""

    def __init__(self, message: str, setting: Optional[str] = None):
        self.setting = setting
        super().__init__(message, operation="config")


class ModelValidationError(SupatoolError):
    """Raised when a YAML model file cannot be turned into a DataModel."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message, operation="parse_model")


# ============================================================================
# CONNECTION DIAGNOSTICS
# ============================================================================

class ConnectionErrorCategory(str, Enum):
    """Broad causes of a failed database connection."""
    DNS = "dns"
    AUTHENTICATION = "authentication"
    SASL = "sasl"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


_HINTS = {
    ConnectionErrorCategory.DNS: [
        "Check your internet connection",
        "Check the host name in the connection string",
        "Confirm the Supabase project is not paused",
    ],
    ConnectionErrorCategory.AUTHENTICATION: [
        "Check the user name and password",
        "Reset the database password in the Supabase dashboard if needed",
    ],
    ConnectionErrorCategory.SASL: [
        "Reset the database password in Settings > Database",
        "Avoid special characters in the new password",
        "Copy the connection string again after the reset",
    ],
    ConnectionErrorCategory.TIMEOUT: [
        "Check network and firewall settings",
        "Retry in a moment; the database may be waking up",
    ],
    ConnectionErrorCategory.UNKNOWN: [
        "Check the connection string format",
    ],
}

_QUERY_HINTS = {
    ConnectionErrorCategory.TIMEOUT: [
        "Raise SUPATOOL_STATEMENT_TIMEOUT_MS (milliseconds, default 30000)",
        "Lower SUPATOOL_MAX_CONCURRENT to reduce load on the database",
    ],
    ConnectionErrorCategory.UNKNOWN: [
        "Check that the role can read pg_catalog and information_schema",
        "Run again with --verbose for details",
    ],
}

POOLER_SETUP_STEPS = [
    "Open the Supabase dashboard and select your project",
    "Settings > Database > Connection string",
    "Choose the 'Session pooler' tab and copy the URI",
    "Set it as SUPABASE_CONNECTION_STRING in .env.local",
]


def classify_connection_error(exc: BaseException) -> ConnectionErrorCategory:
    """
    Map a driver exception to a connection error category.

    Args:
        exc: Exception raised while connecting

    Returns:
        ConnectionErrorCategory
    """
    message = str(exc)
    lowered = message.lower()

    if (
        "enotfound" in lowered
        or "could not translate host name" in lowered
        or "name or service not known" in lowered
        or "nodename nor servname" in lowered
    ):
        return ConnectionErrorCategory.DNS
    if "authentication failed" in lowered:
        return ConnectionErrorCategory.AUTHENTICATION
    if "SASL" in message or "SCRAM" in message:
        return ConnectionErrorCategory.SASL
    if "timeout" in lowered or "timed out" in lowered:
        return ConnectionErrorCategory.TIMEOUT
    return ConnectionErrorCategory.UNKNOWN


class DatabaseConnectionError(SupatoolError):
    """
    Raised when the database cannot be reached.

    Carries the category and hints so the CLI can render a diagnostic
    without re-inspecting the driver exception.
    """

    def __init__(
        self,
        message: str,
        category: ConnectionErrorCategory = ConnectionErrorCategory.UNKNOWN,
        host: Optional[str] = None,
    ):
        self.category = category
        self.host = host
        super().__init__(message, operation="connect")

    @property
    def hints(self) -> List[str]:
        return list(_HINTS[self.category])

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        host: Optional[str] = None,
    ) -> "DatabaseConnectionError":
        """Build from a driver exception, classifying its message."""
        return cls(str(exc), category=classify_connection_error(exc), host=host)

    def render(self) -> str:
        """Multi-line diagnostic for the terminal."""
        lines = [f"❌ Database connection failed ({self.category.value})"]
        if self.host:
            lines.append(f"   Host: {self.host}")
        lines.append(f"   Error: {self}")
        lines.append("")
        lines.append("Suggestions:")
        lines.extend(f"  - {hint}" for hint in self.hints)
        lines.append("")
        lines.append("Session pooler setup:")
        lines.extend(f"  {i}. {step}" for i, step in enumerate(POOLER_SETUP_STEPS, 1))
        return "\n".join(lines)


class DatabaseQueryError(SupatoolError):
    """
    Raised when a catalog query fails after the connection was made.

    Statement timeouts and dropped connections land here, classified
    the same way as connection failures.
    """

    def __init__(
        self,
        message: str,
        category: ConnectionErrorCategory = ConnectionErrorCategory.UNKNOWN,
    ):
        self.category = category
        super().__init__(message, operation="query")

    @property
    def hints(self) -> List[str]:
        return list(_QUERY_HINTS.get(self.category) or _HINTS[self.category])

    @classmethod
    def from_exception(cls, exc: BaseException) -> "DatabaseQueryError":
        return cls(str(exc).strip(), category=classify_connection_error(exc))

    def render(self) -> str:
        """Multi-line diagnostic for the terminal."""
        lines = [f"❌ Database query failed ({self.category.value})", f"   Error: {self}", "", "Suggestions:"]
        lines.extend(f"  - {hint}" for hint in self.hints)
        return "\n".join(lines)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SupatoolError",
    "ConfigurationError",
    "ModelValidationError",
    "ConnectionErrorCategory",
    "DatabaseConnectionError",
    "DatabaseQueryError",
    "POOLER_SETUP_STEPS",
    "classify_connection_error",
]
