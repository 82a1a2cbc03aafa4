"""
Constants for MDB_GATEWAY.

This module contains the shared constants used across the gateway so that
deadlines, collation rules and naming limits live in one place.
"""

from typing import Final

# ============================================================================
# OPERATION DEADLINES (seconds)
# ============================================================================

DEFAULT_CONNECT_TIMEOUT: Final[float] = 10.0
"""Deadline for establishing connectivity to the store."""

DEFAULT_PING_TIMEOUT: Final[float] = 2.0
"""Deadline for the liveness probe."""

DEFAULT_INSERT_ONE_TIMEOUT: Final[float] = 5.0
"""Deadline for inserting a single document."""

DEFAULT_INSERT_MANY_TIMEOUT: Final[float] = 20.0
"""Deadline for inserting a batch of documents."""

DEFAULT_FIND_ONE_TIMEOUT: Final[float] = 5.0
"""Deadline for fetching a single document."""

DEFAULT_FIND_MANY_TIMEOUT: Final[float] = 30.0
"""Deadline for fetching (and fully iterating) a filtered result set."""

DEFAULT_FIND_ALL_TIMEOUT: Final[float] = 30.0
"""Deadline for fetching every document of a collection."""

DEFAULT_DELETE_ONE_TIMEOUT: Final[float] = 2.0
"""Deadline for deleting a single document."""

DEFAULT_DELETE_MANY_TIMEOUT: Final[float] = 2.0
"""Deadline for deleting every matching document."""

# ============================================================================
# CONNECTION POOL DEFAULTS
# ============================================================================

DEFAULT_MAX_POOL_SIZE: Final[int] = 50
"""Default maximum MongoDB connection pool size."""

DEFAULT_MIN_POOL_SIZE: Final[int] = 0
"""Default minimum MongoDB connection pool size."""

DEFAULT_MAX_IDLE_TIME_MS: Final[int] = 45000
"""Default maximum idle time before closing connections (milliseconds)."""

DEFAULT_APP_NAME: Final[str] = "MDB_GATEWAY"
"""Application name reported to the server on handshake."""

# ============================================================================
# DELETE COLLATION
# ============================================================================

DELETE_COLLATION_LOCALE: Final[str] = "en_US"
"""Locale used for string comparison in delete filters."""

DELETE_COLLATION_STRENGTH: Final[int] = 1
"""ICU primary strength: compares base letters only (ignores case and accents)."""

# ============================================================================
# VALIDATION CONSTANTS
# ============================================================================

MAX_COLLECTION_NAME_LENGTH: Final[int] = 255
"""Maximum length for MongoDB collection names."""

MIN_COLLECTION_NAME_LENGTH: Final[int] = 1
"""Minimum length for MongoDB collection names."""

RESERVED_COLLECTION_PREFIXES: Final[tuple[str, ...]] = ("system.",)
"""Collection name prefixes reserved by the server."""

REDACTED_PASSWORD: Final[str] = "****"
"""Replacement for credentials when a URI is logged or attached to an error."""
