"""Tests for the stored grid format and grid loading."""

import zlib

import pytest

from src.grid.blob import decode_grid, encode_grid, load_grid
from src.grid.errors import GridNotFoundError, GridUnavailableError, MalformedGridError
from src.grid.paths import ObjectPath
from src.models.grid import Grid
from src.storage.object_store import InMemoryObjectStore, ObjectStore, ObjectStoreError

PATH = ObjectPath.parse("gs://testgrid/grid/group-1")


class _BrokenStore(ObjectStore):
    @property
    def name(self) -> str:
        return "broken"

    async def get(self, path: ObjectPath) -> bytes:
        raise ObjectStoreError("connection reset")


class TestDecodeGrid:
    def test_decodes_stored_grid(self, grid: Grid) -> None:
        decoded = decode_grid(encode_grid(grid))
        assert decoded.columns[0].name == "c1"
        assert decoded.rows[0].results == [1, 2]

    def test_unknown_fields_ignored(self) -> None:
        payload = zlib.compress(b'{"columns": [{"name": "c", "future": 1}], "extra": {}}')
        assert decode_grid(payload).columns[0].name == "c"

    def test_not_zlib(self) -> None:
        with pytest.raises(MalformedGridError, match="zlib"):
            decode_grid(b'{"columns": []}')

    def test_not_a_grid(self) -> None:
        with pytest.raises(MalformedGridError, match="invalid"):
            decode_grid(zlib.compress(b'{"rows": "nope"}'))


class TestLoadGrid:
    @pytest.mark.anyio
    async def test_loads(self, store: InMemoryObjectStore) -> None:
        grid = await load_grid(store, PATH)
        assert [r.name for r in grid.rows] == ["row-1"]

    @pytest.mark.anyio
    async def test_missing_object_is_not_found(self) -> None:
        with pytest.raises(GridNotFoundError):
            await load_grid(InMemoryObjectStore(), PATH)

    @pytest.mark.anyio
    async def test_empty_object_is_not_found(self) -> None:
        store = InMemoryObjectStore({str(PATH): b""})
        with pytest.raises(GridNotFoundError, match="empty"):
            await load_grid(store, PATH)

    @pytest.mark.anyio
    async def test_store_failure_is_unavailable(self) -> None:
        with pytest.raises(GridUnavailableError, match="connection reset"):
            await load_grid(_BrokenStore(), PATH)
