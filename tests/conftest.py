"""Shared pytest fixtures for the grid API test suite.

Provides:
- anyio_backend: run async tests on asyncio
- configuration: a small dashboard configuration
- store: in-memory object store holding that configuration and one grid
"""

import pytest

from src.grid.blob import encode_grid
from src.models.config import Configuration
from src.models.grid import Column, Grid, Row
from src.storage.object_store import InMemoryObjectStore

CONFIG_PATH = "gs://testgrid/config"
GROUP_GRID_PATH = "gs://testgrid/grid/group-1"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def configuration() -> Configuration:
    return Configuration.model_validate({
        "dashboards": [
            {
                "name": "My Dash",
                "dashboard_tab": [
                    {"name": "Tab1", "test_group_name": "group-1"},
                    {"name": "Unit Tests", "test_group_name": "group-2"},
                    {"name": "Orphan"},
                ],
            },
            {"name": "Other", "dashboard_tab": []},
        ],
    })


@pytest.fixture
def grid() -> Grid:
    return Grid(
        columns=[Column(name="c1", build="b1", started=1500, extra=["x"], hotlist_ids="h1")],
        rows=[
            Row(
                name="row-1",
                results=[1, 2],
                cell_ids=["a", "b"],
                messages=["m1", "m2"],
                icons=["i1", "i2"],
                issues=["123"],
            ),
        ],
    )


@pytest.fixture
def store(configuration: Configuration, grid: Grid) -> InMemoryObjectStore:
    mem = InMemoryObjectStore()
    mem.put(CONFIG_PATH, configuration.model_dump_json().encode("utf-8"))
    mem.put(GROUP_GRID_PATH, encode_grid(grid))
    return mem
