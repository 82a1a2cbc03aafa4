"""
Core gateway components: the Store Handle and the document value model.
"""

from .connection import ConnectionManager, StoreHandle, connect, disconnect, ping
from .types import (
    Document,
    Filter,
    Identifier,
    UnsupportedValueError,
    ValueKind,
    classify_value,
    validate_document,
)

__all__ = [
    # Connection
    "ConnectionManager",
    "StoreHandle",
    "connect",
    "disconnect",
    "ping",
    # Value model
    "Document",
    "Filter",
    "Identifier",
    "ValueKind",
    "UnsupportedValueError",
    "classify_value",
    "validate_document",
]
