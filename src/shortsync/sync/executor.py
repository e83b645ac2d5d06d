"""Sync executor: apply a :class:`LinkDiff` to Short.io.

Operations run in three phases -- creates, then updates, then deletes.
Every entry is attempted independently: a failing call is logged and
recorded in :attr:`SyncResult.errors` as
``"Failed to <op> <domain>/<slug>: <message>"`` and the run continues.

Under ``dry_run`` no API call is made and the counts are the diff sizes.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from shortsync.config import ShortsyncConfig
from shortsync.models import LinkDiff, SyncOpType, SyncResult
from shortsync.observability import NoopMetricsHook, get_logger

from .normalize import create_payload, update_payload

log = get_logger("shortsync.executor")

_COUNTERS = {
    SyncOpType.CREATE: "created",
    SyncOpType.UPDATE: "updated",
    SyncOpType.DELETE: "deleted",
}


def _dry_run_result(diff: LinkDiff, metrics: Any) -> SyncResult:
    for op_type, size in (
        (SyncOpType.CREATE, len(diff.to_create)),
        (SyncOpType.UPDATE, len(diff.to_update)),
        (SyncOpType.DELETE, len(diff.to_delete)),
    ):
        if size:
            metrics.increment(
                "shortsync.sync_ops_total", size,
                tags={"op_type": op_type.value, "outcome": "dry_run"},
            )
    log.info(
        "Dry run, no changes applied",
        extra={"extra_fields": {"op": "execute", "dry_run": True, "total": diff.total}},
    )
    return SyncResult(
        created=len(diff.to_create),
        updated=len(diff.to_update),
        deleted=len(diff.to_delete),
    )


def _failure_message(op_type: SyncOpType, key: str, exc: Exception, metrics: Any) -> str:
    metrics.increment(
        "shortsync.sync_ops_total",
        tags={"op_type": op_type.value, "outcome": "failure"},
    )
    log.warning(
        "Link operation failed",
        extra={
            "extra_fields": {
                "op": op_type.value,
                "key": key,
                "error": str(exc),
                "error_type": type(exc).__name__,
            }
        },
    )
    return f"Failed to {op_type.value} {key}: {exc}"


def _record_success(op_type: SyncOpType, key: str, metrics: Any) -> None:
    metrics.increment(
        "shortsync.sync_ops_total",
        tags={"op_type": op_type.value, "outcome": "success"},
    )
    log.debug(
        "Link operation applied",
        extra={"extra_fields": {"op": op_type.value, "key": key}},
    )


def _tally(result: SyncResult, op_type: SyncOpType, outcomes: list[str | None]) -> None:
    """Fold per-entry outcomes (``None`` = success) into *result*, in entry order."""
    counter = _COUNTERS[op_type]
    for error in outcomes:
        if error is None:
            setattr(result, counter, getattr(result, counter) + 1)
        else:
            result.errors.append(error)


class SyncExecutor:
    """Synchronous sync executor.

    Parameters
    ----------
    link_api:
        Anything with ``create_link(payload)``, ``update_link(id, payload)``
        and ``delete_link(id)``, usually a :class:`LinkAPI`.
    config:
        Client configuration; only ``metrics`` is used.
    """

    def __init__(self, link_api: Any, config: ShortsyncConfig | None = None) -> None:
        self._api = link_api
        metrics = config.metrics if config is not None else None
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

    def execute(self, diff: LinkDiff, dry_run: bool = False) -> SyncResult:
        """Apply *diff* and return the counts and error messages.

        Parameters
        ----------
        diff:
            Output of :func:`compute_diff`.
        dry_run:
            If ``True``, make no API calls and report the diff sizes.

        Returns
        -------
        SyncResult
            Never raises for a failing entry; see ``errors``.
        """
        if dry_run:
            return _dry_run_result(diff, self._metrics)

        result = SyncResult()
        _tally(result, SyncOpType.CREATE, [
            self._attempt(SyncOpType.CREATE, link.key, self._api.create_link, create_payload(link))
            for link in diff.to_create
        ])
        _tally(result, SyncOpType.UPDATE, [
            self._attempt(
                SyncOpType.UPDATE, update.desired.key,
                self._api.update_link, update.existing.id, update_payload(update.desired),
            )
            for update in diff.to_update
        ])
        _tally(result, SyncOpType.DELETE, [
            self._attempt(SyncOpType.DELETE, remote.key, self._api.delete_link, remote.id)
            for remote in diff.to_delete
        ])
        return result

    def _attempt(
        self, op_type: SyncOpType, key: str, call: Callable[..., Any], *args: Any,
    ) -> str | None:
        """Run one API call; return an error message instead of raising."""
        try:
            call(*args)
        except Exception as exc:
            return _failure_message(op_type, key, exc, self._metrics)
        _record_success(op_type, key, self._metrics)
        return None


class AsyncSyncExecutor:
    """Asynchronous sync executor.

    Entries of one phase run concurrently, at most
    ``config.max_concurrency`` at a time; the next phase starts only when
    the current one has finished.  Errors are reported in entry order.
    """

    def __init__(self, link_api: Any, config: ShortsyncConfig | None = None) -> None:
        self._api = link_api
        config = config if config is not None else ShortsyncConfig()
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._max_concurrency = config.max_concurrency

    async def execute(self, diff: LinkDiff, dry_run: bool = False) -> SyncResult:
        """Apply *diff* (async).  See :meth:`SyncExecutor.execute`."""
        if dry_run:
            return _dry_run_result(diff, self._metrics)

        semaphore = asyncio.Semaphore(self._max_concurrency)
        result = SyncResult()
        _tally(result, SyncOpType.CREATE, await asyncio.gather(*(
            self._attempt(
                semaphore, SyncOpType.CREATE, link.key,
                self._api.create_link, create_payload(link),
            )
            for link in diff.to_create
        )))
        _tally(result, SyncOpType.UPDATE, await asyncio.gather(*(
            self._attempt(
                semaphore, SyncOpType.UPDATE, update.desired.key,
                self._api.update_link, update.existing.id, update_payload(update.desired),
            )
            for update in diff.to_update
        )))
        _tally(result, SyncOpType.DELETE, await asyncio.gather(*(
            self._attempt(
                semaphore, SyncOpType.DELETE, remote.key,
                self._api.delete_link, remote.id,
            )
            for remote in diff.to_delete
        )))
        return result

    async def _attempt(
        self,
        semaphore: asyncio.Semaphore,
        op_type: SyncOpType,
        key: str,
        call: Callable[..., Awaitable[Any]],
        *args: Any,
    ) -> str | None:
        async with semaphore:
            try:
                await call(*args)
            except Exception as exc:
                return _failure_message(op_type, key, exc, self._metrics)
        _record_success(op_type, key, self._metrics)
        return None
