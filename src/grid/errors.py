"""Error taxonomy of the grid resolution and decoding path.

Transport code maps NotFoundError to "not found", RequestTimeoutError to a
gateway timeout and every other GridServiceError to a generic failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.grid.names import Identity


class GridServiceError(Exception):
    """Base class for all grid API errors."""


class ConfigUnavailableError(GridServiceError):
    """The config source failed or returned a malformed configuration."""


class NotFoundError(GridServiceError):
    """A client-correctable lookup miss."""


class NameLookupError(NotFoundError):
    """A dashboard, tab or test group is absent from the config.

    ``identity`` holds whatever part of the identity was resolved before the
    miss.
    """

    def __init__(self, message: str, identity: Identity) -> None:
        super().__init__(message)
        self.identity = identity


class DashboardNotFoundError(NameLookupError):
    """No dashboard matches; identity is empty."""


class TabNotFoundError(NameLookupError):
    """The dashboard has no matching tab; identity carries the dashboard."""


class TestGroupNotFoundError(NameLookupError):
    """The tab has no backing test group; identity carries dashboard and tab."""


class GridNotFoundError(NotFoundError):
    """No grid blob exists at the resolved path, or it has no content."""


class InvalidReferenceError(GridServiceError):
    """An object path could not be built from the configured locations."""


class GridUnavailableError(GridServiceError):
    """The object store failed to return a grid."""


class MalformedGridError(GridServiceError):
    """Stored grid data violates its encoding or alignment invariants."""


class RequestTimeoutError(GridServiceError):
    """The request deadline expired before the operation completed."""
