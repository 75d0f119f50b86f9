"""Object-store paths of stored grids.

Grids live next to the scope's config object. Relative references resolve
against the config location the way a relative URL resolves against its base:
the last segment of the base is replaced.

    gs://bucket/config + grid/my-group     -> gs://bucket/grid/my-group
    gs://bucket/config + tabs/dash/my-tab  -> gs://bucket/tabs/dash/my-tab

Two resolution modes exist. TabPathResolution reads grids written per
dashboard tab; GroupPathResolution reads the per-test-group grids and is kept
for deployments that configure no tab path prefix.
"""

from dataclasses import dataclass
from urllib.parse import urlsplit

from src.grid.errors import InvalidReferenceError, TestGroupNotFoundError
from src.grid.names import Identity


@dataclass(frozen=True)
class ObjectPath:
    """A fully-qualified blob address: scheme://bucket/name."""

    scheme: str
    bucket: str
    name: str

    def __str__(self) -> str:
        return f"{self.scheme}://{self.bucket}/{self.name}"

    @classmethod
    def parse(cls, location: str) -> "ObjectPath":
        """Parse a location such as ``gs://bucket/path/config``.

        Raises:
            InvalidReferenceError: If the location has no scheme or bucket.
        """
        try:
            parts = urlsplit(location)
        except ValueError as exc:
            raise InvalidReferenceError(f"Unparseable location {location!r}: {exc}") from exc
        if not parts.scheme or not parts.netloc:
            raise InvalidReferenceError(f"Location {location!r} needs a scheme and a bucket.")
        if parts.query or parts.fragment:
            raise InvalidReferenceError(f"Location {location!r} must not carry a query or fragment.")
        return cls(scheme=parts.scheme, bucket=parts.netloc, name=parts.path.lstrip("/"))

    def resolve(self, reference: str) -> "ObjectPath":
        """Resolve a relative reference against this path.

        A reference starting with "/" is rooted at the bucket. "." and ".."
        segments are applied; climbing above the bucket root is rejected.

        Raises:
            InvalidReferenceError: If the reference is empty, absolute with a
                scheme, or escapes the bucket.
        """
        if not reference.strip("/"):
            raise InvalidReferenceError(f"Empty reference resolved against {self}.")
        if "://" in reference:
            raise InvalidReferenceError(f"Reference {reference!r} must be relative.")

        if reference.startswith("/"):
            segments: list[str] = []
        else:
            segments = self.name.split("/")[:-1]

        for segment in reference.split("/"):
            if segment in ("", "."):
                continue
            if segment == "..":
                if not segments:
                    raise InvalidReferenceError(
                        f"Reference {reference!r} escapes bucket {self.bucket!r}.",
                    )
                segments.pop()
                continue
            segments.append(segment)

        if not segments:
            raise InvalidReferenceError(f"Reference {reference!r} resolves to the bucket root.")
        return ObjectPath(scheme=self.scheme, bucket=self.bucket, name="/".join(segments))


def resolve_test_group_path(
    base_location: str,
    group_path_prefix: str,
    test_group_name: str,
) -> ObjectPath:
    """Path of a test group's grid: ``group_path_prefix/test_group_name``."""
    if not test_group_name:
        raise InvalidReferenceError("Test group name must not be empty.")
    base = ObjectPath.parse(base_location)
    return base.resolve(_join(group_path_prefix, test_group_name))


def resolve_tab_path(
    base_location: str,
    tab_path_prefix: str,
    dashboard_name: str,
    tab_name: str,
) -> ObjectPath:
    """Path of a dashboard tab's grid: ``tab_path_prefix/dashboard/tab``."""
    if not dashboard_name or not tab_name:
        raise InvalidReferenceError("Dashboard and tab names must not be empty.")
    base = ObjectPath.parse(base_location)
    return base.resolve(_join(tab_path_prefix, dashboard_name, tab_name))


def _join(*parts: str) -> str:
    return "/".join(part.strip("/") for part in parts if part.strip("/"))


# ---------------------------------------------------------------------------
# Resolution modes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GroupPathResolution:
    """Compatibility mode: read the grid of the tab's backing test group."""

    group_path_prefix: str

    def resolve(self, base_location: str, identity: Identity) -> ObjectPath:
        """Raises TestGroupNotFoundError when the tab names no test group."""
        if not identity.test_group_name:
            raise TestGroupNotFoundError(
                f"Test group for tab {identity.tab_name!r} not found.", identity,
            )
        return resolve_test_group_path(
            base_location, self.group_path_prefix, identity.test_group_name,
        )


@dataclass(frozen=True)
class TabPathResolution:
    """Read the grid written for the dashboard tab itself."""

    tab_path_prefix: str

    def resolve(self, base_location: str, identity: Identity) -> ObjectPath:
        return resolve_tab_path(
            base_location, self.tab_path_prefix, identity.dashboard_name, identity.tab_name,
        )


PathResolutionMode = GroupPathResolution | TabPathResolution


def select_resolution_mode(
    grid_path_prefix: str,
    tab_path_prefix: str | None,
) -> PathResolutionMode:
    """Tab paths when a tab prefix is configured, test-group paths otherwise."""
    if tab_path_prefix and tab_path_prefix.strip("/"):
        return TabPathResolution(tab_path_prefix=tab_path_prefix)
    return GroupPathResolution(group_path_prefix=grid_path_prefix)
