"""
Collection Gateway

Binds one collection to the seven gateway operations so call sites can
hold a single object instead of repeating the addressing arguments.

This module is part of MDB_GATEWAY.

Usage:
    from mdb_gateway import connect

    async with await connect(uri, "shop") as store:
        orders = store.gateway("orders")
        order_id = await orders.insert_one({"sku": "A-1", "qty": 2})
        order = await orders.find_one({"_id": order_id})
        removed = await orders.delete_many({"status": "CANCELLED"})
"""

from collections.abc import Iterable
from typing import Any

from ..core.types import Document, Filter, Identifier
from . import deletes, reads, writes
from .addressing import resolve_collection


class CollectionGateway:
    """
    Gateway operations bound to one collection.

    The target is anything ``resolve_collection`` accepts; it is resolved
    once, on construction, so addressing mistakes surface immediately.

    Example:
        users = CollectionGateway(store, collection_name="users")
        user_id = await users.insert_one({"name": "Bob"})
        await users.delete_one({"name": "bob"})  # case-insensitive
    """

    def __init__(self, target: Any, collection_name: str | None = None):
        """
        Initialize a gateway for one collection.

        Args:
            target: StoreHandle, AsyncIOMotorDatabase or AsyncIOMotorCollection
            collection_name: Collection to resolve on a handle or database

        Raises:
            ConfigurationError: If the collection cannot be addressed
        """
        self._target = resolve_collection(target, collection_name)

    def __repr__(self) -> str:
        return f"<CollectionGateway {self.name!r}>"

    @property
    def name(self) -> str:
        """Name of the bound collection."""
        return self._target.name

    @property
    def collection(self):
        """The underlying AsyncIOMotorCollection."""
        return self._target.collection

    def _deadline(self, operation: str, timeout: float | None) -> float:
        return self._target.deadline_for(operation, timeout)

    async def insert_one(self, document: Document, timeout: float | None = None) -> Identifier:
        """Insert a single document; see ``writes.insert_one``."""
        return await writes.insert_one(
            self._target.collection, document, timeout=self._deadline("insert_one", timeout)
        )

    async def insert_many(
        self, documents: Iterable[Document], timeout: float | None = None
    ) -> list[Identifier]:
        """Insert documents unordered; see ``writes.insert_many``."""
        return await writes.insert_many(
            self._target.collection, documents, timeout=self._deadline("insert_many", timeout)
        )

    async def find_one(
        self, filter: Filter | None = None, timeout: float | None = None
    ) -> dict[str, Any]:
        """Fetch one matching document; see ``reads.find_one``."""
        return await reads.find_one(
            self._target.collection, filter, timeout=self._deadline("find_one", timeout)
        )

    async def find_many(
        self, filter: Filter | None = None, timeout: float | None = None
    ) -> list[dict[str, Any]]:
        """Fetch every matching document; see ``reads.find_many``."""
        return await reads.find_many(
            self._target.collection, filter, timeout=self._deadline("find_many", timeout)
        )

    async def find_all(self, timeout: float | None = None) -> list[dict[str, Any]]:
        """Fetch the whole collection; see ``reads.find_all``."""
        return await reads.find_all(
            self._target.collection, timeout=self._deadline("find_all", timeout)
        )

    async def delete_one(self, filter: Filter, timeout: float | None = None) -> int:
        """Delete one matching document; see ``deletes.delete_one``."""
        return await deletes.delete_one(
            self._target.collection, filter, timeout=self._deadline("delete_one", timeout)
        )

    async def delete_many(self, filter: Filter, timeout: float | None = None) -> int:
        """Delete every matching document; see ``deletes.delete_many``."""
        return await deletes.delete_many(
            self._target.collection, filter, timeout=self._deadline("delete_many", timeout)
        )
