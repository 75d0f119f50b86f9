"""Grid blob format: zlib-compressed JSON validated against the Grid model."""

import logging
import zlib

from pydantic import ValidationError

from src.grid.errors import GridNotFoundError, GridUnavailableError, MalformedGridError
from src.grid.paths import ObjectPath
from src.models.grid import Grid
from src.storage.object_store import ObjectNotFoundError, ObjectStore, ObjectStoreError

logger = logging.getLogger(__name__)


def decode_grid(payload: bytes) -> Grid:
    """Decompress and parse a stored grid.

    Raises:
        MalformedGridError: If the payload is not zlib data or not a grid.
    """
    try:
        raw = zlib.decompress(payload)
    except zlib.error as exc:
        raise MalformedGridError(f"Grid is not zlib compressed: {exc}") from exc
    try:
        return Grid.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedGridError(f"Grid document is invalid: {exc}") from exc


def encode_grid(grid: Grid) -> bytes:
    """Serialize a grid in the stored format."""
    return zlib.compress(grid.model_dump_json().encode("utf-8"))


async def load_grid(store: ObjectStore, path: ObjectPath) -> Grid:
    """Fetch and decode the grid at ``path``.

    Raises:
        GridNotFoundError: If the object is absent or empty.
        GridUnavailableError: If the store fails.
        MalformedGridError: If the object is not a valid grid.
    """
    try:
        payload = await store.get(path)
    except ObjectNotFoundError as exc:
        raise GridNotFoundError(f"Grid not found at {path}.") from exc
    except ObjectStoreError as exc:
        raise GridUnavailableError(f"Load grid {path}: {exc}") from exc

    if not payload:
        raise GridNotFoundError(f"Grid at {path} is empty.")

    logger.debug("Loaded %d byte grid from %s via %s", len(payload), path, store.name)
    return decode_grid(payload)
