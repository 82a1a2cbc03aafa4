"""
Document value model for MDB_GATEWAY.

Documents are plain mappings of field name to value. The values a document
may hold form a closed set of kinds; ``classify_value`` maps a Python/BSON
value to its kind and ``validate_document`` rejects anything outside the
set before it reaches the driver.

This module is part of MDB_GATEWAY.
"""

import datetime
import uuid
from collections.abc import Mapping, Sequence
from decimal import Decimal
from enum import Enum
from typing import Any, TypeAlias

from bson import Binary, Decimal128, Int64, ObjectId, Timestamp

Document: TypeAlias = Mapping[str, Any]
"""A single record, inbound or outbound."""

Filter: TypeAlias = Mapping[str, Any]
"""Match predicates evaluated by the store."""

Identifier: TypeAlias = Any
"""A store-assigned ``_id``; normally ``bson.ObjectId``."""


class ValueKind(str, Enum):
    """Kinds of value a document field may hold."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    DOCUMENT = "document"
    IDENTIFIER = "identifier"
    DATETIME = "datetime"
    BINARY = "binary"


_NUMBER_TYPES = (int, float, Decimal, Decimal128, Int64)
_DATETIME_TYPES = (datetime.datetime, Timestamp)
_BINARY_TYPES = (bytes, Binary, uuid.UUID)


class UnsupportedValueError(TypeError):
    """Raised when a document holds a value outside ``ValueKind``."""

    def __init__(self, path: str, value: Any) -> None:
        super().__init__(
            f"Unsupported value of type {type(value).__name__} at '{path}'"
        )
        self.path = path
        self.value = value


def classify_value(value: Any) -> ValueKind | None:
    """
    Return the kind of a single value, or None if it is not supported.

    ``bool`` is checked before numbers because it subclasses ``int``; ``str``
    and ``bytes`` are checked before arrays because they are sequences.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, _NUMBER_TYPES):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, ObjectId):
        return ValueKind.IDENTIFIER
    if isinstance(value, _DATETIME_TYPES):
        return ValueKind.DATETIME
    if isinstance(value, _BINARY_TYPES):
        return ValueKind.BINARY
    if isinstance(value, Mapping):
        return ValueKind.DOCUMENT
    if isinstance(value, Sequence):
        return ValueKind.ARRAY
    return None


def validate_document(document: Any, path: str = "") -> None:
    """
    Check recursively that a document only holds supported values.

    Args:
        document: Mapping to validate
        path: Dotted path prefix used in error messages

    Raises:
        UnsupportedValueError: On the first unsupported value found
    """
    if not isinstance(document, Mapping):
        raise UnsupportedValueError(path or "<document>", document)

    for key, value in document.items():
        field_path = f"{path}.{key}" if path else str(key)
        if not isinstance(key, str):
            raise UnsupportedValueError(field_path, key)
        _validate_value(value, field_path)


def _validate_value(value: Any, path: str) -> None:
    kind = classify_value(value)
    if kind is None:
        raise UnsupportedValueError(path, value)
    if kind is ValueKind.DOCUMENT:
        validate_document(value, path)
    elif kind is ValueKind.ARRAY:
        for idx, item in enumerate(value):
            _validate_value(item, f"{path}.{idx}")
