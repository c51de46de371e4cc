"""
Constants for MDB_LITE.

This module contains all shared constants used across the codebase to avoid
magic numbers and improve maintainability.
"""

from typing import Final

# ============================================================================
# CONNECTION CONSTANTS
# ============================================================================

DEFAULT_SOCKET_TIMEOUT_MS: Final[int] = 24 * 60 * 60 * 1000  # 24 hours
"""Default socket timeout in milliseconds."""

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 10000
"""Default server selection timeout in milliseconds (dial timeout)."""

DEFAULT_APP_NAME: Final[str] = "mdb-lite"
"""Application name reported to the server in the connection handshake."""

PING_COMMAND: Final[str] = "ping"
"""Admin command used for liveness checks."""

# ============================================================================
# IDENTIFIER CONSTANTS
# ============================================================================

OBJECT_ID_BYTES: Final[int] = 12
"""Length of a raw ObjectId in bytes."""

OBJECT_ID_HEX_LENGTH: Final[int] = OBJECT_ID_BYTES * 2
"""Length of the hexadecimal form of an ObjectId."""

# ============================================================================
# QUERY OPTION CONSTANTS
# ============================================================================

SORT_OPTION: Final[str] = "Sort"
LIMIT_OPTION: Final[str] = "Limit"
SKIP_OPTION: Final[str] = "Skip"

DESCENDING_PREFIX: Final[str] = "-"
ASCENDING_PREFIX: Final[str] = "+"

# ============================================================================
# METRICS CONSTANTS
# ============================================================================

OPERATION_PREFIX: Final[str] = "mongo"
"""Prefix for operation names recorded in the metrics collector."""

DEFAULT_MAX_METRICS: Final[int] = 10000
"""Maximum number of metric series kept before evicting the oldest."""
