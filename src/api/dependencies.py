"""FastAPI dependency injection factories for the grid service.

The service and its config cache are process-wide: one cache of config
snapshots is shared by every request. Tests replace ``get_grid_service`` via
``app.dependency_overrides``.
"""

from functools import lru_cache

from src.config.settings import ObjectStoreBackend, Settings, get_settings
from src.grid.config_cache import ConfigCache
from src.grid.config_source import BaseLocationResolver, StoreConfigSource
from src.grid.paths import select_resolution_mode
from src.grid.service import GridService
from src.storage.object_store import GCSObjectStore, LocalObjectStore, ObjectStore


def build_object_store(settings: Settings) -> ObjectStore:
    if settings.OBJECT_STORE_BACKEND == ObjectStoreBackend.GCS:
        return GCSObjectStore(
            base_url=settings.GCS_BASE_URL,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
        )
    return LocalObjectStore(storage_root=settings.OBJECT_STORAGE_PATH)


def build_grid_service(settings: Settings) -> GridService:
    store = build_object_store(settings)
    locations = BaseLocationResolver(settings.DEFAULT_CONFIG_PATH)
    cache = ConfigCache(
        StoreConfigSource(store, locations),
        ttl_seconds=settings.CONFIG_TTL_SECONDS,
        serve_stale=settings.SERVE_STALE_CONFIG,
    )
    return GridService(
        config_cache=cache,
        store=store,
        locations=locations,
        resolution_mode=select_resolution_mode(
            settings.GRID_PATH_PREFIX, settings.TAB_PATH_PREFIX,
        ),
        timeout_seconds=settings.REQUEST_TIMEOUT_SECONDS,
    )


@lru_cache(maxsize=1)
def get_grid_service() -> GridService:
    return build_grid_service(get_settings())
