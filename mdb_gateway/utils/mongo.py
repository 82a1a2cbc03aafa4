"""
MongoDB utility functions for MDB_GATEWAY.

Helpers for copying documents out of driver results and for keeping
credentials out of logs and error messages.
"""

import copy
import re
from collections.abc import Mapping
from typing import Any

from ..constants import REDACTED_PASSWORD

# scheme://user:password@ -> capture everything up to the password
_URI_CREDENTIALS = re.compile(r"^(?P<prefix>[a-zA-Z][a-zA-Z0-9+.-]*://[^:/@?]+:)[^@/?]*@")


def detach_document(doc: Mapping[str, Any]) -> dict[str, Any]:
    """
    Return an independent plain-dict copy of a document read from the store.

    Nested mappings (``SON``, ``RawBSONDocument``) become ``dict`` and nested
    sequences become ``list``, so callers can mutate the result freely.

    Args:
        doc: Document as returned by the driver

    Returns:
        Deep copy of the document
    """
    return {key: _detach_value(value) for key, value in doc.items()}


def _detach_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return detach_document(value)
    if isinstance(value, (list, tuple)):
        return [_detach_value(item) for item in value]
    return copy.deepcopy(value)


def redact_uri(uri: str) -> str:
    """
    Mask the password in a connection URI.

    Example:
        ```python
        redact_uri("mongodb://admin:secret@db:27017/app?authSource=app")
        # 'mongodb://admin:****@db:27017/app?authSource=app'
        ```
    """
    return _URI_CREDENTIALS.sub(rf"\g<prefix>{REDACTED_PASSWORD}@", uri, count=1)
