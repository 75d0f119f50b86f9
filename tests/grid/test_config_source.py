"""Tests for scope-to-location mapping and the store-backed config source."""

import pytest

from src.grid.config_source import BaseLocationResolver, StoreConfigSource
from src.grid.errors import ConfigUnavailableError, InvalidReferenceError
from src.storage.object_store import InMemoryObjectStore


class TestBaseLocationResolver:
    def test_empty_scope_uses_default(self) -> None:
        resolver = BaseLocationResolver("gs://testgrid/config")
        assert resolver("") == "gs://testgrid/config"

    def test_scope_is_a_location_prefix(self) -> None:
        resolver = BaseLocationResolver("gs://testgrid/config")
        assert resolver("gs://other/path/") == "gs://other/path/config"

    def test_invalid_scope(self) -> None:
        resolver = BaseLocationResolver("gs://testgrid/config")
        with pytest.raises(InvalidReferenceError):
            resolver("not-a-location")


class TestStoreConfigSource:
    @pytest.mark.anyio
    async def test_loads_default_scope(self, store: InMemoryObjectStore) -> None:
        source = StoreConfigSource(store, BaseLocationResolver("gs://testgrid/config"))
        configuration = await source.load("")
        assert [d.name for d in configuration.dashboards] == ["My Dash", "Other"]

    @pytest.mark.anyio
    async def test_loads_scoped_config(self, store: InMemoryObjectStore) -> None:
        store.put("gs://team/dashboards/config", b'{"dashboards": [{"name": "Team"}]}')
        source = StoreConfigSource(store, BaseLocationResolver("gs://testgrid/config"))
        configuration = await source.load("gs://team/dashboards")
        assert configuration.dashboards[0].name == "Team"

    @pytest.mark.anyio
    async def test_missing_config(self) -> None:
        source = StoreConfigSource(InMemoryObjectStore(), BaseLocationResolver("gs://x/config"))
        with pytest.raises(ConfigUnavailableError, match="not found"):
            await source.load("")

    @pytest.mark.anyio
    async def test_malformed_config(self) -> None:
        store = InMemoryObjectStore({"gs://x/config": b'{"dashboards": [{"name": ""}]}'})
        source = StoreConfigSource(store, BaseLocationResolver("gs://x/config"))
        with pytest.raises(ConfigUnavailableError, match="invalid"):
            await source.load("")

    @pytest.mark.anyio
    async def test_invalid_scope(self, store: InMemoryObjectStore) -> None:
        source = StoreConfigSource(store, BaseLocationResolver("gs://testgrid/config"))
        with pytest.raises(ConfigUnavailableError):
            await source.load("relative/scope")
