"""
MDB_GATEWAY - MongoDB Gateway

A small async data-access layer over MongoDB: one explicit Store Handle,
seven timeout-scoped collection operations, and a uniform error taxonomy.
"""

# Configuration
from .config import GatewayConfig, OperationDeadlines
# Connection
from .core import ConnectionManager, StoreHandle, connect, disconnect, ping
# Gateway operations
from .database import (CollectionGateway, delete_many, delete_one, find_all,
                       find_many, find_one, insert_many, insert_one)
# Errors
from .exceptions import (ConfigurationError, DeleteError, GatewayError,
                         NotFoundError, ReadError, StoreConnectionError,
                         WriteError)

__version__ = "0.1.0"

__all__ = [
    # Connection
    "connect",
    "ping",
    "disconnect",
    "StoreHandle",
    "ConnectionManager",
    # Operations
    "insert_one",
    "insert_many",
    "find_one",
    "find_many",
    "find_all",
    "delete_one",
    "delete_many",
    "CollectionGateway",
    # Config
    "GatewayConfig",
    "OperationDeadlines",
    # Errors
    "GatewayError",
    "StoreConnectionError",
    "WriteError",
    "ReadError",
    "NotFoundError",
    "DeleteError",
    "ConfigurationError",
]
