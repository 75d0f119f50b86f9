"""Tests for grid object-path construction and resolution modes."""

import pytest

from src.grid import errors
from src.grid.errors import InvalidReferenceError
from src.grid.names import Identity
from src.grid.paths import (
    GroupPathResolution,
    ObjectPath,
    TabPathResolution,
    resolve_tab_path,
    resolve_test_group_path,
    select_resolution_mode,
)

IDENTITY = Identity(dashboard_name="My Dash", tab_name="Tab1", test_group_name="group-1")


class TestObjectPath:
    def test_parse_and_render(self) -> None:
        path = ObjectPath.parse("gs://bucket/some/config")
        assert path == ObjectPath(scheme="gs", bucket="bucket", name="some/config")
        assert str(path) == "gs://bucket/some/config"

    @pytest.mark.parametrize(
        "location",
        ["", "bucket/config", "gs:///config", "/abs/config", "gs://bucket/config?x=1"],
    )
    def test_parse_rejects_malformed(self, location: str) -> None:
        with pytest.raises(InvalidReferenceError):
            ObjectPath.parse(location)

    def test_resolve_replaces_last_segment(self) -> None:
        base = ObjectPath.parse("gs://bucket/path/config")
        assert str(base.resolve("grid/foo")) == "gs://bucket/path/grid/foo"

    def test_resolve_rooted_reference(self) -> None:
        base = ObjectPath.parse("gs://bucket/path/config")
        assert str(base.resolve("/grid/foo")) == "gs://bucket/grid/foo"

    def test_resolve_dot_segments(self) -> None:
        base = ObjectPath.parse("gs://bucket/a/b/config")
        assert str(base.resolve("../grid/./foo")) == "gs://bucket/a/grid/foo"

    def test_resolve_rejects_escape(self) -> None:
        base = ObjectPath.parse("gs://bucket/config")
        with pytest.raises(InvalidReferenceError, match="escapes"):
            base.resolve("../other/grid")

    @pytest.mark.parametrize("reference", ["", "/", "gs://other/grid", "grid/.."])
    def test_resolve_rejects_bad_reference(self, reference: str) -> None:
        base = ObjectPath.parse("gs://bucket/config")
        with pytest.raises(InvalidReferenceError):
            base.resolve(reference)


class TestResolveFunctions:
    def test_test_group_path(self) -> None:
        path = resolve_test_group_path("gs://bucket/config", "grid", "group-1")
        assert str(path) == "gs://bucket/grid/group-1"

    def test_test_group_path_without_prefix(self) -> None:
        path = resolve_test_group_path("gs://bucket/config", "", "group-1")
        assert str(path) == "gs://bucket/group-1"

    def test_tab_path(self) -> None:
        path = resolve_tab_path("gs://bucket/dir/config", "tabs/", "My Dash", "Tab1")
        assert str(path) == "gs://bucket/dir/tabs/My Dash/Tab1"

    def test_pure_function_of_inputs(self) -> None:
        first = resolve_tab_path("gs://bucket/config", "tabs", "d", "t")
        second = resolve_tab_path("gs://bucket/config", "tabs", "d", "t")
        assert first == second

    def test_bad_base_location(self) -> None:
        with pytest.raises(InvalidReferenceError):
            resolve_test_group_path("not a location", "grid", "group-1")
        with pytest.raises(InvalidReferenceError):
            resolve_tab_path("not a location", "tabs", "d", "t")

    def test_empty_names(self) -> None:
        with pytest.raises(InvalidReferenceError):
            resolve_test_group_path("gs://bucket/config", "grid", "")
        with pytest.raises(InvalidReferenceError):
            resolve_tab_path("gs://bucket/config", "tabs", "d", "")


class TestResolutionMode:
    def test_tab_prefix_selects_tab_paths(self) -> None:
        mode = select_resolution_mode("grid", "tabs")
        assert mode == TabPathResolution(tab_path_prefix="tabs")
        assert str(mode.resolve("gs://bucket/config", IDENTITY)) == "gs://bucket/tabs/My Dash/Tab1"

    @pytest.mark.parametrize("tab_prefix", ["", None, "/"])
    def test_missing_tab_prefix_falls_back_to_group_paths(self, tab_prefix: str | None) -> None:
        mode = select_resolution_mode("grid", tab_prefix)
        assert mode == GroupPathResolution(group_path_prefix="grid")
        assert str(mode.resolve("gs://bucket/config", IDENTITY)) == "gs://bucket/grid/group-1"

    def test_group_mode_without_test_group(self) -> None:
        mode = GroupPathResolution(group_path_prefix="grid")
        orphan = Identity(dashboard_name="My Dash", tab_name="Orphan")
        with pytest.raises(errors.TestGroupNotFoundError) as info:
            mode.resolve("gs://bucket/config", orphan)
        assert info.value.identity == orphan

    def test_tab_mode_without_test_group(self) -> None:
        mode = TabPathResolution(tab_path_prefix="tabs")
        orphan = Identity(dashboard_name="My Dash", tab_name="Orphan")
        assert str(mode.resolve("gs://bucket/config", orphan)) == "gs://bucket/tabs/My Dash/Orphan"

    def test_group_mode_ignores_tab_identity(self) -> None:
        mode = GroupPathResolution(group_path_prefix="grid")
        other = Identity(dashboard_name="X", tab_name="Y", test_group_name="group-1")
        assert mode.resolve("gs://b/config", IDENTITY) == mode.resolve("gs://b/config", other)
