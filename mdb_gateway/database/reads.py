"""
Read gateway: fetch one document, every document, or every document
matching a filter.

Results are detached copies (plain ``dict``/``list``) of what the driver
decoded. Multi-document reads iterate the cursor to completion in store
order. If iteration fails part-way, the documents decoded so far are
discarded and only the ``ReadError`` is raised; its context records how
many had been decoded.
"""

import logging
from typing import Any

from ..core.types import Filter
from ..exceptions import NotFoundError, ReadError
from ..utils import detach_document
from .addressing import CollectionTarget, resolve_collection
from .deadlines import run_operation, server_time_limit_ms

logger = logging.getLogger(__name__)


def _read_error(target: CollectionTarget, operation: str, filter: Filter, **context: Any):
    def on_error(reason: str, timed_out: bool, cause: BaseException) -> ReadError:
        return ReadError(
            f"An error occurred while running {operation} on '{target.name}': {reason}",
            operation=operation,
            collection=target.name,
            filter=filter,
            timed_out=timed_out,
            context={key: value() for key, value in context.items()},
        )

    return on_error


async def find_one(
    collection: Any,
    filter: Filter | None = None,
    *,
    collection_name: str | None = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """
    Fetch the first document matching a filter.

    Args:
        collection: Collection, database or StoreHandle (see ``addressing``)
        filter: Match predicates; None matches any document
        collection_name: Collection to resolve on a database or handle
        timeout: Optional deadline override (default 5s)

    Returns:
        The matching document

    Raises:
        NotFoundError: If no document matches
        ReadError: If the query or decoding fails or the deadline elapses
    """
    target = resolve_collection(collection, collection_name)
    filter = filter if filter is not None else {}
    deadline = target.deadline_for("find_one", timeout)

    doc = await run_operation(
        "find_one",
        target,
        lambda: target.collection.find_one(filter, max_time_ms=server_time_limit_ms(deadline)),
        _read_error(target, "find_one", filter),
        deadline,
        filter=filter,
    )
    if doc is None:
        logger.debug(f"find_one on '{target.name}' matched no document")
        raise NotFoundError(
            f"Could not find a document in '{target.name}' matching the filter",
            operation="find_one",
            collection=target.name,
            filter=filter,
        )
    return detach_document(doc)


async def _collect(
    target: CollectionTarget, filter: Filter, operation: str, timeout: float | None
) -> list[dict[str, Any]]:
    deadline = target.deadline_for(operation, timeout)
    decoded: list[dict[str, Any]] = []

    async def iterate() -> list[dict[str, Any]]:
        cursor = target.collection.find(filter, max_time_ms=server_time_limit_ms(deadline))
        try:
            async for raw in cursor:
                decoded.append(detach_document(raw))
        finally:
            await cursor.close()
        return decoded

    return await run_operation(
        operation,
        target,
        iterate,
        _read_error(target, operation, filter, decoded_count=lambda: len(decoded)),
        deadline,
        filter=filter,
    )


async def find_many(
    collection: Any,
    filter: Filter | None = None,
    *,
    collection_name: str | None = None,
    timeout: float | None = None,
) -> list[dict[str, Any]]:
    """
    Fetch every document matching a filter.

    The whole result set is materialized in memory; batches fetched from
    the server are concatenated in the order the store returns them.

    Args:
        collection: Collection, database or StoreHandle (see ``addressing``)
        filter: Match predicates; None matches every document
        collection_name: Collection to resolve on a database or handle
        timeout: Optional deadline override (default 30s)

    Returns:
        Matching documents in store order (empty if none match)

    Raises:
        ReadError: If the query, cursor iteration or decoding fails, or the
                   deadline elapses
    """
    target = resolve_collection(collection, collection_name)
    return await _collect(target, filter if filter is not None else {}, "find_many", timeout)


async def find_all(
    collection: Any,
    *,
    collection_name: str | None = None,
    timeout: float | None = None,
) -> list[dict[str, Any]]:
    """
    Fetch every document of a collection.

    Equivalent to ``find_many`` with an empty filter, under its own deadline
    (default 30s).

    Raises:
        ReadError: If the query, cursor iteration or decoding fails, or the
                   deadline elapses
    """
    target = resolve_collection(collection, collection_name)
    return await _collect(target, {}, "find_all", timeout)
