"""Per-scope config snapshot cache.

Each scope holds an immutable ConfigSnapshot that a refresh replaces in a
single assignment, so readers see either the old or the new snapshot and never
a mix. At most one refresh runs per scope: it is an asyncio task shared by
every caller waiting on it. Waiters await it through ``asyncio.shield``; a
waiter that is cancelled or times out leaves the refresh running and the
in-flight marker intact for the others.

Staleness policy: a snapshot older than the TTL triggers a refresh. With
``serve_stale`` (the default) callers keep receiving the stale snapshot while
the refresh runs in the background; without it they wait. A scope with no
snapshot yet always waits.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from src.grid.config_source import ConfigSource
from src.grid.errors import ConfigUnavailableError
from src.grid.names import NameIndex
from src.models.config import Configuration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigSnapshot:
    """A scope's configuration with its name index, as of one refresh."""

    scope: str
    configuration: Configuration
    index: NameIndex
    loaded_at: float

    @classmethod
    def build(cls, scope: str, configuration: Configuration, loaded_at: float) -> ConfigSnapshot:
        return cls(
            scope=scope,
            configuration=configuration,
            index=NameIndex.build(configuration),
            loaded_at=loaded_at,
        )


class ConfigCache:
    """Cache of config snapshots keyed by scope."""

    def __init__(
        self,
        source: ConfigSource,
        *,
        ttl_seconds: float,
        serve_stale: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._ttl = ttl_seconds
        self._serve_stale = serve_stale
        self._clock = clock
        self._snapshots: dict[str, ConfigSnapshot] = {}
        self._refreshes: dict[str, asyncio.Task[ConfigSnapshot]] = {}

    async def get(self, scope: str) -> ConfigSnapshot:
        """Return the scope's snapshot, refreshing it when missing or stale.

        Raises:
            ConfigUnavailableError: If the refresh this call waited on failed.
        """
        snapshot = self._snapshots.get(scope)
        if snapshot is not None:
            if not self._is_stale(snapshot):
                return snapshot
            if self._serve_stale:
                self._start_refresh(scope)
                return snapshot

        return await asyncio.shield(self._start_refresh(scope))

    def refreshing(self, scope: str) -> bool:
        """Whether a refresh is in flight for the scope."""
        task = self._refreshes.get(scope)
        return task is not None and not task.done()

    def invalidate(self, scope: str) -> None:
        """Drop the scope's snapshot; the next get waits for a refresh."""
        self._snapshots.pop(scope, None)

    def _is_stale(self, snapshot: ConfigSnapshot) -> bool:
        return self._clock() - snapshot.loaded_at >= self._ttl

    def _start_refresh(self, scope: str) -> asyncio.Task[ConfigSnapshot]:
        # No await between the check and the insert: one task per scope.
        task = self._refreshes.get(scope)
        if task is None or task.done():
            task = asyncio.get_running_loop().create_task(
                self._refresh(scope), name=f"config-refresh[{scope}]",
            )
            task.add_done_callback(functools.partial(self._refresh_done, scope))
            self._refreshes[scope] = task
        return task

    async def _refresh(self, scope: str) -> ConfigSnapshot:
        logger.info("Refreshing config for scope %r", scope)
        try:
            configuration = await self._source.load(scope)
            snapshot = ConfigSnapshot.build(scope, configuration, self._clock())
        except ConfigUnavailableError:
            raise
        except Exception as exc:
            msg = f"Load config for scope {scope!r}: {exc}"
            raise ConfigUnavailableError(msg) from exc

        self._snapshots[scope] = snapshot
        return snapshot

    def _refresh_done(self, scope: str, task: asyncio.Task[ConfigSnapshot]) -> None:
        if self._refreshes.get(scope) is task:
            del self._refreshes[scope]
        if task.cancelled():
            logger.warning("Config refresh for scope %r was cancelled", scope)
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Config refresh for scope %r failed: %s", scope, exc)
