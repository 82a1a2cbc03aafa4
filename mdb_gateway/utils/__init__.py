"""
Utility functions and helpers for MDB_GATEWAY.
"""

from .mongo import detach_document, redact_uri

__all__ = ["detach_document", "redact_uri"]
