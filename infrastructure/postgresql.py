# ============================================================================
# POSTGRESQL CONNECTION INFRASTRUCTURE
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Infrastructure - PostgreSQL connection handling
# PURPOSE: Connection string preparation, masking and SSL fallback probing
# CREATED: 17 OCT 2026
# ============================================================================
"""
PostgreSQL Connection Infrastructure

Supabase connection strings copied from the dashboard often carry
passwords with reserved characters, no sslmode, and a session pooler
host that some networks cannot negotiate SCRAM through. This module:

- Normalizes the connection string (scheme, password encoding, sslmode,
  application_name)
- Masks credentials for logging
- Probes a single connection, retrying without SSL and then against the
  direct host when the pooler rejects the handshake

Connection Attempt Order:
1. As configured (sslmode=require by default)
2. sslmode=disable, when the failure mentions SASL/SCRAM/certificates
3. Direct host (pooler.supabase.com:5432 -> supabase.co:5432), when SASL
   errors persist
"""

from typing import List, Optional
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit, urlunsplit

import psycopg
from psycopg import AsyncConnection

from core.config.defaults import IntrospectionDefaults
from core.errors import ConfigurationError, DatabaseConnectionError
from core.logging import ComponentType, get_logger

logger = get_logger(__name__, ComponentType.INFRASTRUCTURE)

POOLER_HOST_SUFFIX = "pooler.supabase.com:5432"
DIRECT_HOST_SUFFIX = "supabase.co:5432"


# ============================================================================
# CONNECTION STRING HANDLING
# ============================================================================

def prepare_connection_string(
    raw: Optional[str],
    application_name: str = IntrospectionDefaults.application_name,
) -> str:
    """
    Normalize a connection URI for psycopg.

    Args:
        raw: Connection string as configured
        application_name: Value for application_name when not already set

    Returns:
        postgresql:// URI with a re-encoded password, sslmode and
        application_name

    Raises:
        ConfigurationError: If the string is empty or not a postgresql:// URI
    """
    if not raw:
        raise ConfigurationError(
            "Connection string is not set. Use --connection, "
            "SUPABASE_CONNECTION_STRING or DATABASE_URL.",
            setting="connection_string",
        )

    conninfo = raw.strip()
    if conninfo.startswith("postgres://"):
        conninfo = "postgresql://" + conninfo[len("postgres://"):]
    if not conninfo.startswith("postgresql://"):
        raise ConfigurationError(
            "Invalid connection string. It must start with postgresql://",
            setting="connection_string",
        )

    parts = urlsplit(conninfo)
    if not parts.hostname:
        raise ConfigurationError("Connection string has no host", setting="connection_string")

    netloc = parts.hostname
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    if parts.username:
        credentials = parts.username
        if parts.password is not None:
            credentials += ":" + quote(unquote(parts.password), safe="")
        netloc = f"{credentials}@{netloc}"

    params = dict(parse_qsl(parts.query, keep_blank_values=True))
    params.setdefault("sslmode", "require")
    params.setdefault("application_name", application_name)

    return urlunsplit(("postgresql", netloc, parts.path, urlencode(params), ""))


def set_query_param(conninfo: str, key: str, value: str) -> str:
    """Return conninfo with one query parameter replaced or added."""
    parts = urlsplit(conninfo)
    params = dict(parse_qsl(parts.query, keep_blank_values=True))
    params[key] = value
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(params), parts.fragment))


def mask_connection_string(conninfo: str) -> str:
    """
    Connection target without credentials, for logging.

    Returns host:port/database.
    """
    parts = urlsplit(conninfo)
    host = parts.hostname or "?"
    port = f":{parts.port}" if parts.port else ""
    return f"{host}{port}{parts.path}"


def connection_host(conninfo: str) -> Optional[str]:
    return urlsplit(conninfo).hostname


# ============================================================================
# CONNECTION PROBING
# ============================================================================

def _mentions(exc: BaseException, *needles: str) -> bool:
    message = str(exc)
    return any(needle in message for needle in needles)


def fallback_candidates(conninfo: str) -> List[str]:
    """
    Connection strings tried in order by probe_connection.
    """
    no_ssl = set_query_param(conninfo, "sslmode", "disable")
    candidates = [conninfo, no_ssl]
    if POOLER_HOST_SUFFIX in no_ssl:
        candidates.append(no_ssl.replace(POOLER_HOST_SUFFIX, DIRECT_HOST_SUFFIX))
    return candidates


async def _try_connect(conninfo: str, timeout: int) -> None:
    conn = await AsyncConnection.connect(conninfo, connect_timeout=timeout, autocommit=True)
    try:
        cur = await conn.execute("SELECT version()")
        row = await cur.fetchone()
        logger.debug(f"Server version: {row[0] if row else 'unknown'}")
    finally:
        await conn.close()


async def probe_connection(
    conninfo: str,
    defaults: Optional[IntrospectionDefaults] = None,
) -> str:
    """
    Find a connection string the server accepts.

    Args:
        conninfo: Prepared connection string
        defaults: Introspection defaults (connect timeout)

    Returns:
        The connection string that connected successfully

    Raises:
        DatabaseConnectionError: If every attempt fails
    """
    defaults = defaults or IntrospectionDefaults.from_env()
    timeout = defaults.connect_timeout_seconds
    host = connection_host(conninfo)
    candidates = fallback_candidates(conninfo)

    logger.info(f"Connecting to {mask_connection_string(conninfo)}")
    try:
        await _try_connect(candidates[0], timeout)
        return candidates[0]
    except psycopg.OperationalError as e:
        if not _mentions(e, "SASL", "SCRAM", "certificate", "SELF_SIGNED_CERT", "SSL"):
            raise DatabaseConnectionError.from_exception(e, host=host) from e
        logger.warning(f"SSL connection failed, retrying with sslmode=disable: {e}")

    try:
        await _try_connect(candidates[1], timeout)
        logger.info("Connected with sslmode=disable")
        return candidates[1]
    except psycopg.OperationalError as e:
        if len(candidates) < 3 or not _mentions(e, "SASL", "SCRAM"):
            raise DatabaseConnectionError.from_exception(e, host=host) from e
        logger.warning("SASL error persists on the session pooler, retrying direct host")

    try:
        await _try_connect(candidates[2], timeout)
        logger.info("Connected via direct host")
        return candidates[2]
    except psycopg.OperationalError as e:
        raise DatabaseConnectionError.from_exception(e, host=connection_host(candidates[2])) from e


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "prepare_connection_string",
    "set_query_param",
    "mask_connection_string",
    "connection_host",
    "fallback_candidates",
    "probe_connection",
]
