"""Service initialization and dependency injection.

The store and cache live on ``app.state``. They are created when the
application starts and cleared when it shuts down.
"""

import logging

from fastapi import Depends, FastAPI, Request

from users_api.config import Settings
from users_api.services.list_cache import ListCache
from users_api.services.user_handlers import UserHandlers
from users_api.services.user_store import UserStore

logger = logging.getLogger(__name__)


def init_services(app: FastAPI, settings: Settings) -> None:
    """Create the user store and list cache for an application.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    app.state.user_store = UserStore()
    app.state.list_cache = ListCache(ttl_seconds=settings.list_cache_ttl_seconds)
    logger.info("Initialized UserStore and ListCache (ttl=%ss)", settings.list_cache_ttl_seconds)


def shutdown_services(app: FastAPI) -> None:
    """Tear down the services created by init_services."""
    store: UserStore | None = getattr(app.state, "user_store", None)
    cache: ListCache | None = getattr(app.state, "list_cache", None)
    if cache is not None:
        cache.invalidate()
    if store is not None:
        logger.info("Discarding %d users", store.count())
        store.clear()
    app.state.user_store = None
    app.state.list_cache = None


def get_user_store(request: Request) -> UserStore:
    """Get the user store of the running application.

    Raises:
        RuntimeError: If the application has not been started
    """
    store = getattr(request.app.state, "user_store", None)
    if store is None:
        raise RuntimeError("UserStore is not initialized")
    return store


def get_list_cache(request: Request) -> ListCache:
    """Get the list cache of the running application.

    Raises:
        RuntimeError: If the application has not been started
    """
    cache = getattr(request.app.state, "list_cache", None)
    if cache is None:
        raise RuntimeError("ListCache is not initialized")
    return cache


def get_user_handlers(
    store: UserStore = Depends(get_user_store),
    cache: ListCache = Depends(get_list_cache),
) -> UserHandlers:
    """Get user handlers bound to the application's store and cache."""
    return UserHandlers(store, cache)
