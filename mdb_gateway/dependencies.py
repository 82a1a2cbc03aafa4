"""
FastAPI Dependencies for MDB Gateway

Provides:
1. store_lifespan - connects on startup and disconnects on shutdown
2. get_store - the request's Store Handle
3. get_collection_gateway - a CollectionGateway bound to one collection

Usage:
    from fastapi import Depends, FastAPI
    from mdb_gateway import CollectionGateway, GatewayConfig
    from mdb_gateway.dependencies import get_collection_gateway, store_lifespan

    app = FastAPI(lifespan=store_lifespan(GatewayConfig.from_env()))

    @app.get("/users")
    async def list_users(users: CollectionGateway = Depends(get_collection_gateway("users"))):
        return await users.find_all()
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import HTTPException, Request

from .config import GatewayConfig
from .core.connection import StoreHandle, connect, disconnect
from .database.abstraction import CollectionGateway
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

STORE_STATE_KEY = "store"


def store_lifespan(config: GatewayConfig, default_collection: str | None = None):
    """
    Build a FastAPI ``lifespan`` that owns one Store Handle.

    The handle is stored on ``app.state.store`` for the app's lifetime.

    Raises (on startup):
        ConfigurationError: If the config lacks a URI or database name
        StoreConnectionError: If the store is unreachable
    """
    config.validate_connection()

    @asynccontextmanager
    async def lifespan(app: Any) -> AsyncIterator[None]:
        handle = await connect(
            config.mongo_uri,
            config.db_name,
            config=config,
            default_collection=default_collection,
        )
        setattr(app.state, STORE_STATE_KEY, handle)
        logger.info(f"Store handle for '{config.db_name}' attached to app state")
        try:
            yield
        finally:
            setattr(app.state, STORE_STATE_KEY, None)
            await disconnect(handle)

    return lifespan


async def get_store(request: Request) -> StoreHandle:
    """Get the Store Handle from app state."""
    store = getattr(request.app.state, STORE_STATE_KEY, None)
    if store is None:
        raise HTTPException(503, "Store not initialized")
    if store.closed:
        raise HTTPException(503, "Store connection closed")
    return store


def get_collection_gateway(name: str) -> Callable[..., Any]:
    """Dependency that binds the gateway operations to one collection."""

    async def _get_gateway(request: Request) -> CollectionGateway:
        store = await get_store(request)
        try:
            return store.gateway(name)
        except ConfigurationError as e:
            raise HTTPException(500, f"Invalid collection '{name}': {e}") from e

    return _get_gateway


__all__ = [
    "store_lifespan",
    "get_store",
    "get_collection_gateway",
]
