"""Asynchronous shortsync client.

:class:`AsyncShortsyncClient` mirrors :class:`ShortsyncClient` but every
I/O method is a coroutine.  Remote links of all domains are fetched
concurrently, and the writes of each phase run concurrently up to
``max_concurrency`` at a time.

Usage::

    import asyncio
    from shortsync import AsyncShortsyncClient

    async def main():
        async with AsyncShortsyncClient(api_key="sk_xxx") as client:
            result = await client.sync("shortlinks.yaml")
            print(result)

    asyncio.run(main())
"""

from __future__ import annotations

import os
from typing import Any

from shortsync.config import ShortsyncConfig
from shortsync.loader import load_link_config
from shortsync.models import LinkConfig, LinkDiff, SyncResult
from shortsync.observability import get_logger
from shortsync.shortio_api.links import AsyncLinkAPI
from shortsync.shortio_api.transport import AsyncShortioTransport
from shortsync.sync.executor import AsyncSyncExecutor
from shortsync.sync.planner import AsyncDiffPlanner

log = get_logger("shortsync.async_client")


class AsyncShortsyncClient:
    """Asynchronous Short.io reconciliation client.

    Parameters
    ----------
    api_key:
        Short.io secret API key.  **Required.**
    **kwargs:
        Forwarded to :class:`ShortsyncConfig`.
    """

    def __init__(self, api_key: str, **kwargs: Any) -> None:
        self._config = ShortsyncConfig(api_key=api_key, **kwargs)
        self._transport = AsyncShortioTransport(self._config)
        self._links = AsyncLinkAPI(self._transport, page_size=self._config.page_size)
        self._diff_planner = AsyncDiffPlanner(self._links)
        self._executor = AsyncSyncExecutor(self._links, self._config)

    def load(self, path: str | os.PathLike[str]) -> LinkConfig:
        """Load and validate the link file (no I/O beyond the local file)."""
        return load_link_config(path)

    async def diff(self, config: LinkConfig) -> LinkDiff:
        return await self._diff_planner.plan(config)

    async def apply(self, diff: LinkDiff, dry_run: bool = False) -> SyncResult:
        return await self._executor.execute(diff, dry_run=dry_run)

    async def sync(self, path: str | os.PathLike[str], dry_run: bool = False) -> SyncResult:
        """Run the full reconciliation (async).  See :meth:`ShortsyncClient.sync`."""
        config = self.load(path)
        diff = await self.diff(config)
        result = await self.apply(diff, dry_run=dry_run)
        log.info(
            "Sync finished",
            extra={
                "extra_fields": {
                    "op": "sync",
                    "dry_run": dry_run,
                    "created": result.created,
                    "updated": result.updated,
                    "deleted": result.deleted,
                    "errors": len(result.errors),
                }
            },
        )
        return result

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> AsyncShortsyncClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
