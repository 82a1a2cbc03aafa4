"""
Delete gateway: remove one or every document matching a filter.

String comparisons in delete filters use an ``en_US`` primary-strength
collation, so ``{"name": "Bob"}`` also matches ``"bob"``. Matching nothing
is not an error: the returned count is simply 0.
"""

from typing import Any

from pymongo.collation import Collation

from ..constants import DELETE_COLLATION_LOCALE, DELETE_COLLATION_STRENGTH
from ..core.types import Filter
from ..exceptions import DeleteError
from .addressing import CollectionTarget, resolve_collection
from .deadlines import run_operation

CASE_INSENSITIVE_COLLATION = Collation(
    locale=DELETE_COLLATION_LOCALE,
    strength=DELETE_COLLATION_STRENGTH,
    caseLevel=False,
)


async def _delete(
    target: CollectionTarget, filter: Filter, operation: str, timeout: float | None
) -> int:
    method = getattr(target.collection, operation)

    def on_error(reason: str, timed_out: bool, cause: BaseException) -> DeleteError:
        return DeleteError(
            f"Could not delete from '{target.name}': {reason}",
            operation=operation,
            collection=target.name,
            filter=filter,
            timed_out=timed_out,
        )

    result = await run_operation(
        operation,
        target,
        lambda: method(filter, collation=CASE_INSENSITIVE_COLLATION),
        on_error,
        timeout,
        filter=filter,
    )
    return result.deleted_count


async def delete_one(
    collection: Any,
    filter: Filter,
    *,
    collection_name: str | None = None,
    timeout: float | None = None,
) -> int:
    """
    Delete the first document matching a filter.

    Args:
        collection: Collection, database or StoreHandle (see ``addressing``)
        filter: Match predicates (strings compared case-insensitively)
        collection_name: Collection to resolve on a database or handle
        timeout: Optional deadline override (default 2s)

    Returns:
        Number of documents deleted (0 or 1); the caller decides whether 0
        matters

    Raises:
        DeleteError: If the delete fails at the transport or protocol level
                     or the deadline elapses
    """
    target = resolve_collection(collection, collection_name)
    return await _delete(target, filter, "delete_one", timeout)


async def delete_many(
    collection: Any,
    filter: Filter,
    *,
    collection_name: str | None = None,
    timeout: float | None = None,
) -> int:
    """
    Delete every document matching a filter in one request.

    Same collation and deadline policy as ``delete_one`` (default 2s).

    Returns:
        Number of documents deleted

    Raises:
        DeleteError: If the delete fails at the transport or protocol level
                     or the deadline elapses
    """
    target = resolve_collection(collection, collection_name)
    return await _delete(target, filter, "delete_many", timeout)
