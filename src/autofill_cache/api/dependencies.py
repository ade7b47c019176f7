"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from autofill_cache.config import settings
from autofill_cache.handlers import CacheHandler
from autofill_cache.services import CacheMaintenance, CacheStore, ConfigManager
from autofill_cache.utils.keys import KeyGenerator

_logger = logging.getLogger(__name__)


def get_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CacheHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. CacheStore (configured blob store backend) - app.state.cache_store
    2. ConfigManager and KeyGenerator
    3. CacheHandler (HTTP endpoints) - app.state.cache_handler
    4. CacheMaintenance (periodic optimize) - app.state.maintenance

    A CacheStore already present in app.state (e.g. set by tests) is reused.

    Args:
        app: The FastAPI application instance

    Yields:
        None
    """
    cache_store = getattr(app.state, "cache_store", None) or CacheStore.create()
    config_manager = ConfigManager(cache_store)
    key_generator = KeyGenerator(settings.cache_key_algorithm)
    maintenance = CacheMaintenance(cache_store)

    app.state.cache_store = cache_store
    app.state.config_manager = config_manager
    app.state.cache_handler = CacheHandler(
        cache_store=cache_store,
        config_manager=config_manager,
        key_generator=key_generator,
    )
    app.state.maintenance = maintenance

    maintenance.start()
    configuration = await cache_store.get_configuration()
    _logger.info(
        "Cache initialized: backend=%s max_entries=%d ttl_ms=%d",
        settings.storage_backend,
        configuration.max_entries,
        configuration.ttl_ms,
    )

    yield

    await maintenance.stop()
    del app.state.cache_handler
    del app.state.config_manager
    del app.state.maintenance
    del app.state.cache_store
    _logger.info("Cache shut down")


# Type alias for cleaner dependency injection
HandlerDep = Annotated[CacheHandler, Depends(get_handler)]
