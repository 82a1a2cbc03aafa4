"""
Custom exceptions for MDB_GATEWAY.

Every failure coming back from the store is wrapped in one of these types,
together with enough context (operation, collection, filter) to diagnose
it without the server logs. ``NotFoundError`` is a sibling of ``ReadError``,
not a subclass, so "no match" and "query failed" never share a handler.
"""

from typing import Any, Dict, List, Mapping, Optional


def _with_filter(context: Optional[Dict[str, Any]], filter: Any) -> Dict[str, Any]:
    """Copy ``context`` and add a snapshot of the filter, if one was given."""
    context = dict(context or {})
    if filter is not None:
        context["filter"] = dict(filter) if isinstance(filter, Mapping) else filter
    return context


class GatewayError(RuntimeError):
    """
    Base exception for MDB_GATEWAY errors.

    Attributes:
        message: Error message
        operation: Gateway operation that failed (e.g. ``insert_one``)
        collection: Target collection name (if any)
        context: Dictionary with additional context
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            operation: Gateway operation that failed
            collection: Target collection name
            context: Optional dictionary with additional context information
        """
        context = dict(context or {})
        if operation:
            context.setdefault("operation", operation)
        if collection:
            context.setdefault("collection", collection)
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.collection = collection
        self.context = context

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class StoreConnectionError(GatewayError):
    """
    Raised when connectivity to the store cannot be established or verified.

    Attributes:
        mongo_uri: Connection URI with credentials redacted (if available)
        db_name: Database name (if available)
    """

    def __init__(
        self,
        message: str,
        mongo_uri: Optional[str] = None,
        db_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = dict(context or {})
        if mongo_uri:
            context["mongo_uri"] = mongo_uri
        if db_name:
            context["db_name"] = db_name
        super().__init__(message, operation="connect", context=context)
        self.mongo_uri = mongo_uri
        self.db_name = db_name


class _TimeoutAwareError(GatewayError):
    """Gateway error that may have been caused by an elapsed deadline."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        timed_out: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = dict(context or {})
        if timed_out:
            context["timed_out"] = True
        super().__init__(message, operation=operation, collection=collection, context=context)
        self.timed_out = timed_out


class WriteError(_TimeoutAwareError):
    """
    Raised when an insert fails at the store.

    Attributes:
        inserted_ids: Identifiers the store assigned before the failure
                      (only populated for unordered bulk inserts)
        write_errors: Per-document errors reported by the store
        timed_out: Whether the deadline elapsed
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        inserted_ids: Optional[List[Any]] = None,
        write_errors: Optional[List[Mapping[str, Any]]] = None,
        timed_out: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = dict(context or {})
        if write_errors:
            context["write_error_count"] = len(write_errors)
        if inserted_ids:
            context["inserted_count"] = len(inserted_ids)
        super().__init__(
            message,
            operation=operation,
            collection=collection,
            timed_out=timed_out,
            context=context,
        )
        self.inserted_ids = list(inserted_ids or [])
        self.write_errors = list(write_errors or [])


class _FilteredError(_TimeoutAwareError):
    """Store error raised by an operation that takes a filter."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        filter: Optional[Mapping[str, Any]] = None,
        timed_out: bool = False,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            operation=operation,
            collection=collection,
            timed_out=timed_out,
            context=_with_filter(context, filter),
        )
        self.filter = filter


class ReadError(_FilteredError):
    """
    Raised when a query or the decoding of its results fails.

    Attributes:
        filter: Filter the query was issued with
        timed_out: Whether the deadline elapsed
    """


class NotFoundError(GatewayError):
    """
    Raised when a single-document lookup matches nothing.

    Not a ``ReadError``: an empty match is an expected outcome, so
    ``except ReadError`` never swallows it.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        filter: Optional[Mapping[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            operation=operation,
            collection=collection,
            context=_with_filter(context, filter),
        )
        self.filter = filter


class DeleteError(_FilteredError):
    """
    Raised when a delete fails at the transport or protocol level.

    A delete that matches zero documents is not an error.
    """


class ConfigurationError(GatewayError):
    """
    Raised when configuration or collection addressing is invalid.

    ``config_key`` names the offending setting and ``config_value`` holds
    what it was set to, when known.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        extra = {"config_key": config_key} if config_key else {}
        if config_value is not None:
            extra["config_value"] = config_value
        super().__init__(message, context={**(context or {}), **extra})
        self.config_key = config_key
        self.config_value = config_value
