"""Synchronous shortsync client.

:class:`ShortsyncClient` wires the Short.io transport, the diff planner
and the sync executor together and exposes the reconciliation steps
individually as well as the full ``load -> diff -> apply`` run.

Usage::

    from shortsync import ShortsyncClient, format_summary

    with ShortsyncClient(api_key="sk_xxx") as client:
        result = client.sync("shortlinks.yaml", dry_run=True)
        print(format_summary(result, dry_run=True))
"""

from __future__ import annotations

import os
from typing import Any

from shortsync.config import ShortsyncConfig
from shortsync.loader import load_link_config
from shortsync.models import LinkConfig, LinkDiff, SyncResult
from shortsync.observability import get_logger
from shortsync.shortio_api.links import LinkAPI
from shortsync.shortio_api.transport import ShortioTransport
from shortsync.sync.executor import SyncExecutor
from shortsync.sync.planner import DiffPlanner

log = get_logger("shortsync.client")


class ShortsyncClient:
    """Synchronous Short.io reconciliation client.

    Parameters
    ----------
    api_key:
        Short.io secret API key.  **Required.**
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`ShortsyncConfig`.
    """

    def __init__(self, api_key: str, **kwargs: Any) -> None:
        self._config = ShortsyncConfig(api_key=api_key, **kwargs)
        self._transport = ShortioTransport(self._config)
        self._links = LinkAPI(self._transport, page_size=self._config.page_size)
        self._diff_planner = DiffPlanner(self._links)
        self._executor = SyncExecutor(self._links, self._config)

    def load(self, path: str | os.PathLike[str]) -> LinkConfig:
        """Load and validate the link file.  Raises :class:`ConfigError`."""
        return load_link_config(path)

    def diff(self, config: LinkConfig) -> LinkDiff:
        """Fetch the remote links of every domain in *config* and diff them."""
        return self._diff_planner.plan(config)

    def apply(self, diff: LinkDiff, dry_run: bool = False) -> SyncResult:
        """Apply *diff*; per-link failures end up in ``SyncResult.errors``."""
        return self._executor.execute(diff, dry_run=dry_run)

    def sync(self, path: str | os.PathLike[str], dry_run: bool = False) -> SyncResult:
        """Run the full reconciliation for the link file at *path*.

        A :class:`ConfigError` aborts before any API call; a failure while
        fetching remote links aborts before any change is made.
        """
        config = self.load(path)
        diff = self.diff(config)
        result = self.apply(diff, dry_run=dry_run)
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

    def close(self) -> None:
        """Close the HTTP transport."""
        self._transport.close()

    def __enter__(self) -> ShortsyncClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
