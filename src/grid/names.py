"""Dashboard and tab name resolution.

User-supplied dashboard and tab names are matched against the configuration
after normalization, so "My Dash" and "  my   dash " name the same dashboard.
A NameIndex is built once per config snapshot and never mutated.
"""

import unicodedata
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from src.grid.errors import (
    ConfigUnavailableError,
    DashboardNotFoundError,
    TabNotFoundError,
    TestGroupNotFoundError,
)
from src.models.config import Configuration, Dashboard


def normalize(name: str) -> str:
    """Normalize a display name into its lookup key.

    Applies NFKC, case-folds, trims, and collapses internal whitespace runs
    to one space.
    """
    return " ".join(unicodedata.normalize("NFKC", name).casefold().split())


@dataclass(frozen=True)
class Identity:
    """Canonical dashboard, tab and backing test group of a request."""

    dashboard_name: str = ""
    tab_name: str = ""
    test_group_name: str = ""


class NameIndex:
    """Normalized lookup from display names to canonical identities."""

    def __init__(
        self,
        dashboards: Mapping[str, Dashboard],
        dashboard_keys: Mapping[str, str],
        tab_keys: Mapping[str, Mapping[str, str]],
    ) -> None:
        self._dashboards = dashboards
        self._dashboard_keys = dashboard_keys
        self._tab_keys = tab_keys

    @classmethod
    def build(cls, configuration: Configuration) -> "NameIndex":
        """Index a configuration.

        Raises:
            ConfigUnavailableError: If two dashboards, or two tabs of one
                dashboard, normalize to the same key.
        """
        dashboards: dict[str, Dashboard] = {}
        dashboard_keys: dict[str, str] = {}
        tab_keys: dict[str, Mapping[str, str]] = {}

        for dashboard in configuration.dashboards:
            key = normalize(dashboard.name)
            if key in dashboard_keys:
                msg = (
                    f"Dashboards {dashboard_keys[key]!r} and {dashboard.name!r} "
                    f"share the normalized name {key!r}."
                )
                raise ConfigUnavailableError(msg)
            dashboard_keys[key] = dashboard.name
            dashboards[dashboard.name] = dashboard

            tabs: dict[str, str] = {}
            for tab in dashboard.dashboard_tab:
                tab_key = normalize(tab.name)
                if tab_key in tabs:
                    msg = (
                        f"Dashboard {dashboard.name!r} has tabs {tabs[tab_key]!r} "
                        f"and {tab.name!r} sharing the normalized name {tab_key!r}."
                    )
                    raise ConfigUnavailableError(msg)
                tabs[tab_key] = tab.name
            tab_keys[key] = MappingProxyType(tabs)

        return cls(
            dashboards=MappingProxyType(dashboards),
            dashboard_keys=MappingProxyType(dashboard_keys),
            tab_keys=MappingProxyType(tab_keys),
        )

    def lookup(self, dashboard: str, tab: str) -> Identity:
        """Resolve display names to the canonical identity.

        A tab with an empty test group still resolves; GroupPathResolution
        rejects it when building the path.

        Raises:
            DashboardNotFoundError: No dashboard matches; identity is empty.
            TabNotFoundError: The dashboard has no matching tab; identity
                carries the dashboard.
            TestGroupNotFoundError: The tab key is indexed but the scan of
                the dashboard's tabs misses it; identity carries dashboard
                and tab.
        """
        dashboard_key = normalize(dashboard)
        tab_key = normalize(tab)

        dashboard_name = self._dashboard_keys.get(dashboard_key)
        if dashboard_name is None:
            raise DashboardNotFoundError(
                f"Dashboard {dashboard_key!r} not found.", Identity(),
            )

        tab_name = self._tab_keys.get(dashboard_key, {}).get(tab_key)
        if tab_name is None:
            raise TabNotFoundError(
                f"Tab {tab_key!r} not found.",
                Identity(dashboard_name=dashboard_name),
            )

        for candidate in self._dashboards[dashboard_name].dashboard_tab:
            if candidate.name == tab_name:
                return Identity(
                    dashboard_name=dashboard_name,
                    tab_name=tab_name,
                    test_group_name=candidate.test_group_name,
                )

        raise TestGroupNotFoundError(
            f"Test group for tab {tab_name!r} not found.",
            Identity(dashboard_name=dashboard_name, tab_name=tab_name),
        )

    def dashboards(self) -> list[str]:
        """Canonical dashboard names in config order."""
        return list(self._dashboards)

    def dashboard(self, dashboard: str) -> Dashboard:
        """The configured dashboard matching a display name.

        Raises:
            DashboardNotFoundError: No dashboard matches.
        """
        dashboard_key = normalize(dashboard)
        dashboard_name = self._dashboard_keys.get(dashboard_key)
        if dashboard_name is None:
            raise DashboardNotFoundError(
                f"Dashboard {dashboard_key!r} not found.", Identity(),
            )
        return self._dashboards[dashboard_name]

    def tabs(self, dashboard: str) -> list[str]:
        """Canonical tab names of a dashboard in display order."""
        return [tab.name for tab in self.dashboard(dashboard).dashboard_tab]
