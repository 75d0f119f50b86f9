"""Response records returned by the grid API."""

from pydantic import Field

from src.models.common import GridBase
from src.models.config import Notification
from src.models.grid import AlertInfo


class Timestamp(GridBase):
    """Seconds and nanoseconds since the epoch; nanos is always in [0, 1e9)."""

    seconds: int
    nanos: int = Field(..., ge=0, lt=1_000_000_000)


class Header(GridBase):
    name: str
    build: str
    started: Timestamp
    extra: list[str] = Field(default_factory=list)
    hotlist_ids: str = ""


class Cell(GridBase):
    result: int
    cell_id: str
    message: str
    icon: str


class RowRecord(GridBase):
    name: str
    cells: list[Cell] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)
    alert: AlertInfo | None = None


class Resource(GridBase):
    """A named REST resource and the link that serves it."""

    name: str
    link: str


class ListHeadersResponse(GridBase):
    headers: list[Header] = Field(default_factory=list)


class ListRowsResponse(GridBase):
    rows: list[RowRecord] = Field(default_factory=list)


class ListDashboardsResponse(GridBase):
    dashboards: list[Resource] = Field(default_factory=list)


class ListDashboardTabsResponse(GridBase):
    dashboard_tabs: list[Resource] = Field(default_factory=list)


class GetDashboardResponse(GridBase):
    """Dashboard-level display settings."""

    notifications: list[Notification] = Field(default_factory=list)
    default_tab: str = ""
    suppress_failing_tabs: bool = False
    highlight_today: bool = False
