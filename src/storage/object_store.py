"""Object store contract and backends for grid and config blobs.

Provides:
- ``ObjectStore``: the read-only blob contract the grid API consumes.
- ``InMemoryObjectStore``: dict-backed store for tests.
- ``LocalObjectStore``: directory tree with one subdirectory per bucket,
  for development.
- ``GCSObjectStore``: Google Cloud Storage objects over HTTP via httpx.

Stores do their own retrying, if any. Callers see either bytes,
ObjectNotFoundError, or ObjectStoreError.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote

import httpx

from src.grid.paths import ObjectPath

logger = logging.getLogger(__name__)


class ObjectStoreError(Exception):
    """The store could not serve a read."""


class ObjectNotFoundError(ObjectStoreError):
    """No object exists at the requested path."""


class ObjectStore(ABC):
    """Read-only key-value blob store."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable backend name for logging."""
        ...

    @abstractmethod
    async def get(self, path: ObjectPath) -> bytes:
        """Return the object's raw bytes.

        Raises:
            ObjectNotFoundError: If no object exists at ``path``.
            ObjectStoreError: On any other read failure.
        """
        ...

    async def aclose(self) -> None:
        """Release backend resources. No-op unless the backend holds any."""


class InMemoryObjectStore(ObjectStore):
    """In-memory implementation for tests."""

    def __init__(self, objects: dict[str, bytes] | None = None) -> None:
        self._objects: dict[str, bytes] = dict(objects or {})
        self.reads: list[str] = []

    @property
    def name(self) -> str:
        return "memory"

    def put(self, path: ObjectPath | str, content: bytes) -> None:
        self._objects[str(path)] = content

    async def get(self, path: ObjectPath) -> bytes:
        key = str(path)
        self.reads.append(key)
        try:
            return self._objects[key]
        except KeyError:
            raise ObjectNotFoundError(f"Object not found: {key}") from None


class LocalObjectStore(ObjectStore):
    """Filesystem-backed store rooted at a directory.

    ``gs://bucket/grid/foo`` is read from ``<root>/bucket/grid/foo``.
    """

    def __init__(self, storage_root: str) -> None:
        self._root = Path(storage_root).resolve()

    @property
    def name(self) -> str:
        return "local"

    def _locate(self, path: ObjectPath) -> Path:
        target = (self._root / path.bucket / path.name).resolve()
        if not target.is_relative_to(self._root):
            msg = f"Object path escapes storage root: {path}"
            raise ObjectStoreError(msg)
        return target

    async def get(self, path: ObjectPath) -> bytes:
        target = self._locate(path)
        try:
            return await asyncio.to_thread(target.read_bytes)
        except FileNotFoundError:
            raise ObjectNotFoundError(f"Object not found: {path}") from None
        except OSError as exc:
            raise ObjectStoreError(f"Read {path}: {exc}") from exc


class GCSObjectStore(ObjectStore):
    """Google Cloud Storage reads through the public XML endpoint.

    The httpx client is created lazily and shared across requests; call
    ``aclose`` on shutdown.
    """

    def __init__(
        self,
        base_url: str = "https://storage.googleapis.com",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    @property
    def name(self) -> str:
        return "gcs"

    def _url(self, path: ObjectPath) -> str:
        return f"{self._base_url}/{quote(path.bucket, safe='')}/{quote(path.name)}"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def get(self, path: ObjectPath) -> bytes:
        if path.scheme != "gs":
            msg = f"GCS store cannot read {path}"
            raise ObjectStoreError(msg)

        url = self._url(path)
        try:
            resp = await self._get_client().get(url)
        except httpx.HTTPError as exc:
            raise ObjectStoreError(f"GET {url}: {exc}") from exc

        if resp.status_code == 404:
            raise ObjectNotFoundError(f"Object not found: {path}")
        if resp.is_error:
            msg = f"GET {url}: HTTP {resp.status_code}"
            raise ObjectStoreError(msg)

        logger.debug("Read %d bytes from %s", len(resp.content), path)
        return resp.content

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
