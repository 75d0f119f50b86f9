"""FastAPI grid endpoints.

GET /api/v1/dashboards                                  — list dashboards
GET /api/v1/dashboards/{dashboard}                      — dashboard settings
GET /api/v1/dashboards/{dashboard}/tabs                 — list dashboard tabs
GET /api/v1/dashboards/{dashboard}/tabs/{tab}/headers   — grid column headers
GET /api/v1/dashboards/{dashboard}/tabs/{tab}/rows      — grid rows and cells

Every endpoint takes an optional ``scope`` query parameter naming the config
location prefix; without it the default config is used.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from src.api.dependencies import get_grid_service
from src.grid.errors import GridServiceError, NotFoundError, RequestTimeoutError
from src.grid.service import API_PREFIX, GridService
from src.models.api import (
    GetDashboardResponse,
    ListDashboardsResponse,
    ListDashboardTabsResponse,
    ListHeadersResponse,
    ListRowsResponse,
)

router = APIRouter(prefix=API_PREFIX, tags=["grid"])

logger = structlog.get_logger(__name__)

_SCOPE_DESCRIPTION = "Config location prefix, e.g. gs://bucket/path."


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_http(exc: GridServiceError, not_found_detail: str, **context: str) -> HTTPException:
    """Map a grid error onto an HTTP status.

    Not-found errors of every tier share one 404 detail; the specific tier is
    only logged.
    """
    log = logger.bind(error_type=type(exc).__name__, **context)
    if isinstance(exc, NotFoundError):
        log.info("grid_lookup_not_found", reason=str(exc))
        return HTTPException(status_code=404, detail=not_found_detail)
    if isinstance(exc, RequestTimeoutError):
        log.warning("grid_request_timeout", reason=str(exc))
        return HTTPException(status_code=504, detail=str(exc))
    log.error("grid_request_failed", reason=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def _tab_not_found(dashboard: str, tab: str) -> str:
    return f"Dashboard {dashboard!r} or tab {tab!r} not found."


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/dashboards", response_model=ListDashboardsResponse)
async def list_dashboards(
    scope: str = Query(default="", description=_SCOPE_DESCRIPTION),
    service: GridService = Depends(get_grid_service),
) -> ListDashboardsResponse:
    """List the dashboards configured in a scope."""
    try:
        return await service.list_dashboards(scope)
    except GridServiceError as exc:
        raise _to_http(exc, "Config not found.", scope=scope) from exc


@router.get("/dashboards/{dashboard}", response_model=GetDashboardResponse)
async def get_dashboard(
    dashboard: str,
    scope: str = Query(default="", description=_SCOPE_DESCRIPTION),
    service: GridService = Depends(get_grid_service),
) -> GetDashboardResponse:
    """Return the display settings of a dashboard."""
    try:
        return await service.get_dashboard(scope, dashboard)
    except GridServiceError as exc:
        raise _to_http(
            exc, f"Dashboard {dashboard!r} not found.", scope=scope, dashboard=dashboard,
        ) from exc


@router.get("/dashboards/{dashboard}/tabs", response_model=ListDashboardTabsResponse)
async def list_dashboard_tabs(
    dashboard: str,
    scope: str = Query(default="", description=_SCOPE_DESCRIPTION),
    service: GridService = Depends(get_grid_service),
) -> ListDashboardTabsResponse:
    """List the tabs of a dashboard."""
    try:
        return await service.list_dashboard_tabs(scope, dashboard)
    except GridServiceError as exc:
        raise _to_http(
            exc, f"Dashboard {dashboard!r} not found.", scope=scope, dashboard=dashboard,
        ) from exc


@router.get(
    "/dashboards/{dashboard}/tabs/{tab}/headers",
    response_model=ListHeadersResponse,
)
async def list_headers(
    dashboard: str,
    tab: str,
    scope: str = Query(default="", description=_SCOPE_DESCRIPTION),
    service: GridService = Depends(get_grid_service),
) -> ListHeadersResponse:
    """Return the column headers of a dashboard tab's grid."""
    try:
        return await service.list_headers(scope, dashboard, tab)
    except GridServiceError as exc:
        raise _to_http(
            exc, _tab_not_found(dashboard, tab), scope=scope, dashboard=dashboard, tab=tab,
        ) from exc


@router.get(
    "/dashboards/{dashboard}/tabs/{tab}/rows",
    response_model=ListRowsResponse,
)
async def list_rows(
    dashboard: str,
    tab: str,
    scope: str = Query(default="", description=_SCOPE_DESCRIPTION),
    service: GridService = Depends(get_grid_service),
) -> ListRowsResponse:
    """Return the rows of a dashboard tab's grid with decoded cells."""
    try:
        return await service.list_rows(scope, dashboard, tab)
    except GridServiceError as exc:
        raise _to_http(
            exc, _tab_not_found(dashboard, tab), scope=scope, dashboard=dashboard, tab=tab,
        ) from exc
