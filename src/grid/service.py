"""Grid service: resolve a dashboard tab, load its grid, project responses.

Pipeline per request:
1. config snapshot for the scope (ConfigCache)
2. canonical identity (NameIndex)
3. object path (PathResolutionMode against the scope's config location)
4. grid blob (ObjectStore + zlib/JSON decode)
5. header or row projection

Every operation runs under the service-wide request deadline.
"""

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from typing import TypeVar
from urllib.parse import quote, urlencode

from src.grid.blob import load_grid
from src.grid.codec import decode_rle
from src.grid.config_cache import ConfigCache
from src.grid.errors import MalformedGridError, RequestTimeoutError
from src.grid.names import normalize
from src.grid.paths import PathResolutionMode
from src.models.api import (
    Cell,
    GetDashboardResponse,
    Header,
    ListDashboardsResponse,
    ListDashboardTabsResponse,
    ListHeadersResponse,
    ListRowsResponse,
    Resource,
    RowRecord,
    Timestamp,
)
from src.models.grid import Column, Grid, Row
from src.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

API_PREFIX = "/api/v1"

_NANOS_PER_MILLI = 1_000_000
_NANOS_PER_SECOND = 1_000_000_000


# ---------------------------------------------------------------------------
# Projections
# ---------------------------------------------------------------------------


def millis_to_timestamp(millis: float) -> Timestamp:
    """Convert epoch milliseconds to seconds and non-negative nanos.

    Integer floor division keeps nanos in [0, 1e9) for negative inputs.
    Sub-millisecond fractions round to the nearest nanosecond.
    """
    if not math.isfinite(millis):
        raise MalformedGridError(f"Column start time {millis!r} is not finite.")
    whole = math.floor(millis)
    fraction_nanos = round((millis - whole) * _NANOS_PER_MILLI)
    seconds, rem_millis = divmod(whole, 1000)
    nanos = rem_millis * _NANOS_PER_MILLI + fraction_nanos
    if nanos >= _NANOS_PER_SECOND:
        seconds += 1
        nanos -= _NANOS_PER_SECOND
    return Timestamp(seconds=seconds, nanos=nanos)


def header_from_column(column: Column) -> Header:
    return Header(
        name=column.name,
        build=column.build,
        started=millis_to_timestamp(column.started),
        extra=list(column.extra),
        hotlist_ids=column.hotlist_ids,
    )


def row_record_from_row(row: Row) -> RowRecord:
    """Decode a row's results and zip them with its per-cell arrays.

    Raises:
        MalformedGridError: If the encoding is invalid or the decoded results,
            cell ids, messages and icons differ in length.
    """
    try:
        results = decode_rle(row.results)
    except MalformedGridError as exc:
        raise MalformedGridError(f"Row {row.name!r}: {exc}") from exc

    if not len(results) == len(row.cell_ids) == len(row.messages) == len(row.icons):
        msg = (
            f"Row {row.name!r} has {len(results)} results but {len(row.cell_ids)} "
            f"cell ids, {len(row.messages)} messages and {len(row.icons)} icons."
        )
        raise MalformedGridError(msg)

    cells = [
        Cell(result=result, cell_id=cell_id, message=message, icon=icon)
        for result, cell_id, message, icon in zip(
            results, row.cell_ids, row.messages, row.icons, strict=True,
        )
    ]
    return RowRecord(
        name=row.name,
        cells=cells,
        issues=list(row.issues),
        alert=row.alert_info,
    )


def _segment(name: str) -> str:
    return quote(normalize(name), safe="")


def _dashboard_path(dashboard: str) -> str:
    return f"{API_PREFIX}/dashboards/{_segment(dashboard)}"


def _link(path: str, scope: str) -> str:
    if scope:
        return f"{path}?{urlencode({'scope': scope})}"
    return path


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class GridService:
    """Serves decoded grid views for dashboard tabs."""

    def __init__(
        self,
        *,
        config_cache: ConfigCache,
        store: ObjectStore,
        locations: Callable[[str], str],
        resolution_mode: PathResolutionMode,
        timeout_seconds: float,
    ) -> None:
        self._config_cache = config_cache
        self._store = store
        self._locations = locations
        self._resolution_mode = resolution_mode
        self._timeout = timeout_seconds
        logger.info("Grid paths resolve with %s", resolution_mode)

    @property
    def config_cache(self) -> ConfigCache:
        return self._config_cache

    @property
    def resolution_mode(self) -> PathResolutionMode:
        return self._resolution_mode

    async def aclose(self) -> None:
        await self._store.aclose()

    async def list_dashboards(self, scope: str) -> ListDashboardsResponse:
        """Dashboards of the scope with links to their settings."""
        snapshot = await self._with_deadline(self._config_cache.get(scope), "list dashboards")
        return ListDashboardsResponse(
            dashboards=[
                Resource(name=name, link=_link(_dashboard_path(name), scope))
                for name in snapshot.index.dashboards()
            ],
        )

    async def get_dashboard(self, scope: str, dashboard: str) -> GetDashboardResponse:
        """Display settings of one dashboard."""
        snapshot = await self._with_deadline(self._config_cache.get(scope), "get dashboard")
        config = snapshot.index.dashboard(dashboard)
        return GetDashboardResponse(
            notifications=list(config.notifications),
            default_tab=config.default_tab,
            suppress_failing_tabs=config.downplay_failing_tabs,
            highlight_today=config.highlight_today,
        )

    async def list_dashboard_tabs(self, scope: str, dashboard: str) -> ListDashboardTabsResponse:
        """Tabs of one dashboard with links to their headers."""
        snapshot = await self._with_deadline(self._config_cache.get(scope), "list dashboard tabs")
        dashboard_path = _dashboard_path(dashboard)
        return ListDashboardTabsResponse(
            dashboard_tabs=[
                Resource(
                    name=tab,
                    link=_link(f"{dashboard_path}/tabs/{_segment(tab)}/headers", scope),
                )
                for tab in snapshot.index.tabs(dashboard)
            ],
        )

    async def list_headers(self, scope: str, dashboard: str, tab: str) -> ListHeadersResponse:
        """Column headers of a dashboard tab's grid."""
        grid = await self._with_deadline(self._load(scope, dashboard, tab), "list headers")
        return ListHeadersResponse(headers=[header_from_column(c) for c in grid.columns])

    async def list_rows(self, scope: str, dashboard: str, tab: str) -> ListRowsResponse:
        """Rows of a dashboard tab's grid with decoded cells."""
        grid = await self._with_deadline(self._load(scope, dashboard, tab), "list rows")
        return ListRowsResponse(rows=[row_record_from_row(r) for r in grid.rows])

    async def _load(self, scope: str, dashboard: str, tab: str) -> Grid:
        snapshot = await self._config_cache.get(scope)
        identity = snapshot.index.lookup(dashboard, tab)
        path = self._resolution_mode.resolve(self._locations(scope), identity)
        logger.debug(
            "Resolved %r/%r in scope %r to %s", dashboard, tab, scope, path,
        )
        return await load_grid(self._store, path)

    async def _with_deadline(self, operation: Awaitable[T], name: str) -> T:
        try:
            async with asyncio.timeout(self._timeout):
                return await operation
        except TimeoutError as exc:
            msg = f"{name} exceeded the {self._timeout}s deadline."
            raise RequestTimeoutError(msg) from exc
