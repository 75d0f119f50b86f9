"""Stored grid model: one decoded grid blob for a tab or test group.

Row results are run-length encoded as flattened (value, count) pairs. The
cell_ids, messages and icons of a row are aligned to the decoded results.
"""

from pydantic import Field

from src.models.common import GridBase


class Column(GridBase):
    """One build/run of the grid."""

    model_config = {"extra": "ignore"}

    name: str = Field(default="")
    build: str = Field(default="")
    started: float = Field(
        default=0.0,
        description="Start time in milliseconds since the epoch.",
    )
    extra: list[str] = Field(default_factory=list)
    hotlist_ids: str = Field(default="")


class AlertInfo(GridBase):
    """Alerting state attached to a failing row."""

    model_config = {"extra": "ignore"}

    fail_count: int = Field(default=0, ge=0)
    fail_build_id: str = Field(default="")
    fail_time: str | None = Field(default=None, description="RFC 3339 timestamp.")
    fail_test_id: str = Field(default="")
    latest_fail_build_id: str = Field(default="")
    failure_message: str = Field(default="")
    build_link: str = Field(default="")
    hotlist_ids: list[str] = Field(default_factory=list)
    email_addresses: list[str] = Field(default_factory=list)
    properties: dict[str, str] = Field(default_factory=dict)


class Row(GridBase):
    """One test case of the grid."""

    model_config = {"extra": "ignore"}

    name: str = Field(default="")
    id: str = Field(default="")
    results: list[int] = Field(
        default_factory=list,
        description="Run-length encoded results: value, count, value, count...",
    )
    cell_ids: list[str] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)
    icons: list[str] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)
    alert_info: AlertInfo | None = Field(default=None)


class Grid(GridBase):
    """Columns and rows of a stored grid."""

    model_config = {"extra": "ignore"}

    columns: list[Column] = Field(default_factory=list)
    rows: list[Row] = Field(default_factory=list)
