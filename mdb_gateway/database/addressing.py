"""
Collection addressing for gateway operations.

Every gateway function takes the collection to operate on in one of three
forms:

- an ``AsyncIOMotorCollection`` (already resolved)
- an ``AsyncIOMotorDatabase`` plus ``collection_name``
- a ``StoreHandle`` plus ``collection_name`` (or its default collection)

``resolve_collection`` normalizes all three into a ``CollectionTarget``.
"""

from dataclasses import dataclass
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

from ..config import OperationDeadlines
from ..constants import (
    MAX_COLLECTION_NAME_LENGTH,
    MIN_COLLECTION_NAME_LENGTH,
    RESERVED_COLLECTION_PREFIXES,
)
from ..core.connection import StoreHandle
from ..exceptions import ConfigurationError

_DEFAULT_DEADLINES = OperationDeadlines()


@dataclass(frozen=True)
class CollectionTarget:
    """A resolved collection together with the deadlines that apply to it."""

    collection: AsyncIOMotorCollection
    name: str
    deadlines: OperationDeadlines

    def deadline_for(self, operation: str, override: float | None = None) -> float:
        """
        Pick the deadline for an operation.

        Raises:
            ConfigurationError: If the override is not a positive number
        """
        if override is None:
            return self.deadlines.for_operation(operation)
        if isinstance(override, bool) or not isinstance(override, (int, float)) or override <= 0:
            raise ConfigurationError(
                f"Timeout for '{operation}' must be a positive number of seconds",
                config_key="timeout",
                config_value=override,
            )
        return float(override)


def validate_collection_name(name: Any) -> str:
    """
    Validate a collection name.

    Raises:
        ConfigurationError: If the name is empty, too long, contains ``$`` or
                            a null byte, or uses a reserved prefix
    """
    if not isinstance(name, str):
        raise ConfigurationError(
            "Collection name must be a string",
            config_key="collection_name",
            config_value=repr(name),
        )
    if not MIN_COLLECTION_NAME_LENGTH <= len(name) <= MAX_COLLECTION_NAME_LENGTH:
        raise ConfigurationError(
            f"Collection name must be between {MIN_COLLECTION_NAME_LENGTH} and "
            f"{MAX_COLLECTION_NAME_LENGTH} characters",
            config_key="collection_name",
            config_value=name,
        )
    if "$" in name or "\x00" in name:
        raise ConfigurationError(
            "Collection name must not contain '$' or null characters",
            config_key="collection_name",
            config_value=name,
        )
    if name.startswith(RESERVED_COLLECTION_PREFIXES):
        raise ConfigurationError(
            f"Collection name '{name}' uses a reserved prefix",
            config_key="collection_name",
            config_value=name,
        )
    return name


def resolve_collection(target: Any, collection_name: str | None = None) -> CollectionTarget:
    """
    Normalize the supported addressing forms into a ``CollectionTarget``.

    Args:
        target: StoreHandle, AsyncIOMotorDatabase or AsyncIOMotorCollection
        collection_name: Collection to resolve on a handle or database

    Raises:
        ConfigurationError: If the target type is unsupported, a name is
                            missing or invalid, or a resolved collection is
                            given a conflicting name
    """
    if isinstance(target, StoreHandle):
        collection = target.get_collection(collection_name)
        return CollectionTarget(collection, collection.name, target.deadlines)

    if isinstance(target, AsyncIOMotorDatabase):
        if collection_name is None:
            raise ConfigurationError(
                "collection_name is required when addressing a database",
                config_key="collection_name",
            )
        validate_collection_name(collection_name)
        return CollectionTarget(target[collection_name], collection_name, _DEFAULT_DEADLINES)

    if isinstance(target, AsyncIOMotorCollection):
        if collection_name is not None and collection_name != target.name:
            raise ConfigurationError(
                f"Collection '{target.name}' cannot be re-addressed as '{collection_name}'",
                config_key="collection_name",
                config_value=collection_name,
            )
        return CollectionTarget(target, target.name, _DEFAULT_DEADLINES)

    raise ConfigurationError(
        f"Unsupported collection target: {type(target).__name__}",
        config_key="collection",
        config_value=type(target).__name__,
    )
