"""Dashboard configuration model: the consumed side of the config source.

Only the fields the grid API resolves against are modelled; unknown keys in
the stored document are ignored.
"""

from pydantic import Field

from src.models.common import GridBase


class Notification(GridBase):
    """A message shown on every tab of a dashboard."""

    model_config = {"extra": "ignore", "frozen": True}

    summary: str = Field(default="")
    context_link: str = Field(default="")


class DashboardTab(GridBase):
    """A dashboard tab and the test group whose results it displays."""

    model_config = {"extra": "ignore", "frozen": True}

    name: str = Field(..., min_length=1)
    test_group_name: str = Field(default="")
    description: str = Field(default="")


class Dashboard(GridBase):
    """A dashboard with its tabs in display order."""

    model_config = {"extra": "ignore", "frozen": True}

    name: str = Field(..., min_length=1)
    dashboard_tab: tuple[DashboardTab, ...] = Field(default=())
    notifications: tuple[Notification, ...] = Field(default=())
    default_tab: str = Field(default="")
    downplay_failing_tabs: bool = Field(default=False)
    highlight_today: bool = Field(default=False)


class Configuration(GridBase):
    """Top-level configuration document for one scope."""

    model_config = {"extra": "ignore", "frozen": True}

    dashboards: tuple[Dashboard, ...] = Field(default=())
