"""Diff planner: compare desired links with Short.io's current links.

The planner fetches one snapshot per distinct domain of the link file,
then classifies every link:

- **create**: desired, no remote link with the same domain and slug.
- **update**: both exist but URL, title or tag set differ.
- **delete**: remote, no desired link with the same domain and slug.

Links that already match produce no operation.  Fetch failures propagate:
a diff is never computed against a partial snapshot.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any

from shortsync.flatten import flatten_links, unique_domains
from shortsync.models import FlattenedLink, LinkConfig, LinkDiff, LinkUpdate, RemoteLink
from shortsync.observability import get_logger

from .normalize import links_match

log = get_logger("shortsync.planner")


def plan_diff(
    desired: Sequence[FlattenedLink],
    snapshots: Mapping[str, Sequence[RemoteLink]],
) -> LinkDiff:
    """Compute the diff between *desired* links and remote *snapshots*.

    Pure function: identical inputs always yield an equal :class:`LinkDiff`.

    Parameters
    ----------
    desired:
        Flattened desired links, see :func:`flatten_links`.
    snapshots:
        Domain hostname to the links Short.io holds for it.  Remote links
        are matched by ``(snapshot domain, path)``.

    Returns
    -------
    LinkDiff
        Creates and updates in *desired* order, deletes in snapshot order.
    """
    remote_by_key: dict[tuple[str, str], RemoteLink] = {}
    for domain, remote_links in snapshots.items():
        for remote in remote_links:
            remote_by_key.setdefault((domain, remote.path), remote)

    diff = LinkDiff()
    desired_keys: set[tuple[str, str]] = set()

    for link in desired:
        desired_keys.add((link.domain, link.slug))
        existing = remote_by_key.get((link.domain, link.slug))
        if existing is None:
            diff.to_create.append(link)
        elif not links_match(link, existing):
            diff.to_update.append(LinkUpdate(desired=link, existing=existing))

    for domain, remote_links in snapshots.items():
        for remote in remote_links:
            if (domain, remote.path) not in desired_keys:
                diff.to_delete.append(remote)

    return diff


def _log_diff(diff: LinkDiff, domains: list[str]) -> None:
    log.info(
        "Diff computed",
        extra={
            "extra_fields": {
                "op": "compute_diff",
                "domains": domains,
                "to_create": len(diff.to_create),
                "to_update": len(diff.to_update),
                "to_delete": len(diff.to_delete),
            }
        },
    )


class DiffPlanner:
    """Synchronous diff planner.

    Parameters
    ----------
    reader:
        Anything with ``list_links(domain) -> list[RemoteLink]``, usually a
        :class:`LinkAPI`.
    """

    def __init__(self, reader: Any) -> None:
        self._reader = reader

    def plan(self, config: LinkConfig) -> LinkDiff:
        """Fetch each domain of *config* once, then diff against it."""
        desired = flatten_links(config)
        domains = unique_domains(config)
        snapshots = {domain: self._reader.list_links(domain) for domain in domains}
        diff = plan_diff(desired, snapshots)
        _log_diff(diff, domains)
        return diff


class AsyncDiffPlanner:
    """Asynchronous diff planner.

    Fetches all domains concurrently; diffing starts only once every fetch
    has completed.  If one fetch fails the others are cancelled before the
    error propagates.  *reader* must provide a coroutine ``list_links(domain)``.
    """

    def __init__(self, reader: Any) -> None:
        self._reader = reader

    async def plan(self, config: LinkConfig) -> LinkDiff:
        desired = flatten_links(config)
        domains = unique_domains(config)
        tasks = [asyncio.ensure_future(self._reader.list_links(domain)) for domain in domains]
        try:
            fetched = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        diff = plan_diff(desired, dict(zip(domains, fetched)))
        _log_diff(diff, domains)
        return diff


def compute_diff(config: LinkConfig, reader: Any) -> LinkDiff:
    """Diff *config* against the links *reader* returns.  See :class:`DiffPlanner`."""
    return DiffPlanner(reader).plan(config)


async def async_compute_diff(config: LinkConfig, reader: Any) -> LinkDiff:
    """Async variant of :func:`compute_diff`.  See :class:`AsyncDiffPlanner`."""
    return await AsyncDiffPlanner(reader).plan(config)
