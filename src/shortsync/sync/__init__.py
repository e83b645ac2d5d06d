"""Reconciliation engine: diff planning and execution.

Exports
-------
compute_diff / async_compute_diff
    Fetch remote state and diff it against a validated link file.
plan_diff
    The pure diff of desired links against already-fetched snapshots.
SyncExecutor / AsyncSyncExecutor
    Apply a diff with per-entry error isolation and dry-run support.
format_summary / format_diff
    Render a :class:`SyncResult` or planned :class:`LinkDiff` for humans.
"""

from .executor import AsyncSyncExecutor, SyncExecutor
from .normalize import links_match, normalize_tags, normalize_title
from .planner import (
    AsyncDiffPlanner,
    DiffPlanner,
    async_compute_diff,
    compute_diff,
    plan_diff,
)
from .summary import format_diff, format_summary

__all__ = [
    "AsyncDiffPlanner",
    "AsyncSyncExecutor",
    "DiffPlanner",
    "SyncExecutor",
    "async_compute_diff",
    "compute_diff",
    "format_diff",
    "format_summary",
    "links_match",
    "normalize_tags",
    "normalize_title",
    "plan_diff",
]
