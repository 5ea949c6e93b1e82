# ============================================================================
# VERSION - SUPATOOL
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# ============================================================================
"""
Version information for supatool.

This is the single source of truth for the package version.
Updated manually for each release.
"""
# Version format: major.minor.patch
__version__ = "0.3.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-17"

EPOCH = 1
CODENAME = "Schema Sync"
