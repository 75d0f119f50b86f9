"""Config source contract and the store-backed JSON implementation.

A scope names a location prefix; its configuration document lives at
``{scope}/config``. Requests without a scope use the default config path.
"""

import logging
from abc import ABC, abstractmethod

from pydantic import ValidationError

from src.grid.errors import ConfigUnavailableError, InvalidReferenceError
from src.grid.paths import ObjectPath
from src.models.config import Configuration
from src.storage.object_store import ObjectStore, ObjectStoreError

logger = logging.getLogger(__name__)

CONFIG_OBJECT_NAME = "config"


class BaseLocationResolver:
    """Map a scope to the config location that grids resolve against."""

    def __init__(self, default_config_path: str, config_object_name: str = CONFIG_OBJECT_NAME) -> None:
        self._default = default_config_path
        self._object_name = config_object_name

    def __call__(self, scope: str) -> str:
        """Return the scope's config location.

        Raises:
            InvalidReferenceError: If the location is not a valid object path.
        """
        location = self._default if not scope else f"{scope.rstrip('/')}/{self._object_name}"
        ObjectPath.parse(location)
        return location


class ConfigSource(ABC):
    """Loads the dashboard configuration of a scope."""

    @abstractmethod
    async def load(self, scope: str) -> Configuration:
        """Return the scope's current configuration.

        Raises:
            ConfigUnavailableError: If the configuration cannot be read.
        """
        ...


class StoreConfigSource(ConfigSource):
    """Reads the JSON configuration document from an object store."""

    def __init__(self, store: ObjectStore, locations: BaseLocationResolver) -> None:
        self._store = store
        self._locations = locations

    async def load(self, scope: str) -> Configuration:
        try:
            path = ObjectPath.parse(self._locations(scope))
        except InvalidReferenceError as exc:
            raise ConfigUnavailableError(f"Scope {scope!r}: {exc}") from exc

        try:
            payload = await self._store.get(path)
        except ObjectStoreError as exc:
            raise ConfigUnavailableError(f"Read config {path}: {exc}") from exc

        try:
            configuration = Configuration.model_validate_json(payload)
        except ValidationError as exc:
            raise ConfigUnavailableError(f"Config {path} is invalid: {exc}") from exc

        logger.info(
            "Loaded config %s with %d dashboards", path, len(configuration.dashboards),
        )
        return configuration
