"""
Write gateway: insert one or many documents.

Inbound documents are validated against the document value model and
copied before they reach the driver, so the caller's mapping never gains
an ``_id``; the generated identifiers are returned instead.
"""

import copy
from collections.abc import Iterable, Mapping
from typing import Any

from pymongo.errors import BulkWriteError

from ..core.types import Document, Identifier, UnsupportedValueError, validate_document
from ..exceptions import WriteError
from .addressing import CollectionTarget, resolve_collection
from .deadlines import run_operation


def _prepare(document: Any, target: CollectionTarget, operation: str, index: int | None = None):
    """Validate one inbound document and return the copy handed to the driver."""
    try:
        validate_document(document)
    except UnsupportedValueError as e:
        context = {"field": e.path}
        if index is not None:
            context["document_index"] = index
        raise WriteError(
            f"Could not insert document into '{target.name}': {e}",
            operation=operation,
            collection=target.name,
            context=context,
        ) from e
    return copy.copy(document)


async def insert_one(
    collection: Any,
    document: Document,
    *,
    collection_name: str | None = None,
    timeout: float | None = None,
) -> Identifier:
    """
    Insert a single document.

    Args:
        collection: Collection, database or StoreHandle (see ``addressing``)
        document: Document to insert
        collection_name: Collection to resolve on a database or handle
        timeout: Optional deadline override (default 5s)

    Returns:
        The identifier the store assigned

    Raises:
        WriteError: If the store rejects the document (duplicate key,
                    validation), the transport fails or the deadline elapses
    """
    target = resolve_collection(collection, collection_name)
    payload = _prepare(document, target, "insert_one")

    def on_error(reason: str, timed_out: bool, cause: BaseException) -> WriteError:
        details = getattr(cause, "details", None)
        if not isinstance(details, Mapping) or details.get("code") is None:
            details = None
        return WriteError(
            f"Could not insert document into '{target.name}': {reason}",
            operation="insert_one",
            collection=target.name,
            write_errors=[details] if details else None,
            timed_out=timed_out,
        )

    result = await run_operation(
        "insert_one",
        target,
        lambda: target.collection.insert_one(payload),
        on_error,
        timeout,
    )
    return result.inserted_id


async def insert_many(
    collection: Any,
    documents: Iterable[Document],
    *,
    collection_name: str | None = None,
    timeout: float | None = None,
) -> list[Identifier]:
    """
    Insert several documents in one unordered request.

    The store attempts every document even when some of them fail. When it
    reports per-document failures, the raised ``WriteError`` still lists the
    identifiers of the documents that were stored in ``inserted_ids``.

    Args:
        collection: Collection, database or StoreHandle (see ``addressing``)
        documents: Documents to insert
        collection_name: Collection to resolve on a database or handle
        timeout: Optional deadline override (default 20s)

    Returns:
        Identifiers in input order

    Raises:
        WriteError: If the call fails, the deadline elapses, or any document
                    is rejected
    """
    target = resolve_collection(collection, collection_name)
    payloads = [
        _prepare(document, target, "insert_many", index=idx)
        for idx, document in enumerate(documents)
    ]
    if not payloads:
        return []

    def on_error(reason: str, timed_out: bool, cause: BaseException) -> WriteError:
        inserted_ids: list[Identifier] = []
        write_errors: list[Mapping[str, Any]] = []
        if isinstance(cause, BulkWriteError):
            write_errors = list(cause.details.get("writeErrors", []))
            failed = {err.get("index") for err in write_errors}
            inserted_ids = [
                payload["_id"]
                for idx, payload in enumerate(payloads)
                if idx not in failed and "_id" in payload
            ]
        return WriteError(
            f"Could not insert {len(payloads)} documents into '{target.name}': {reason}",
            operation="insert_many",
            collection=target.name,
            inserted_ids=inserted_ids,
            write_errors=write_errors,
            timed_out=timed_out,
        )

    result = await run_operation(
        "insert_many",
        target,
        lambda: target.collection.insert_many(payloads, ordered=False),
        on_error,
        timeout,
        document_count=len(payloads),
    )
    return list(result.inserted_ids)
