"""
Database gateway layer.

Timeout-scoped, error-normalizing operations over MongoDB collections.
"""

from .abstraction import CollectionGateway
from .addressing import CollectionTarget, resolve_collection, validate_collection_name
from .deadlines import is_timeout, run_operation, server_time_limit_ms
from .deletes import CASE_INSENSITIVE_COLLATION, delete_many, delete_one
from .reads import find_all, find_many, find_one
from .writes import insert_many, insert_one

__all__ = [
    # Write gateway
    "insert_one",
    "insert_many",
    # Read gateway
    "find_one",
    "find_many",
    "find_all",
    # Delete gateway
    "delete_one",
    "delete_many",
    "CASE_INSENSITIVE_COLLATION",
    # Addressing
    "CollectionTarget",
    "resolve_collection",
    "validate_collection_name",
    # Deadlines
    "run_operation",
    "is_timeout",
    "server_time_limit_ms",
    # Object facade
    "CollectionGateway",
]
