"""Human-readable rendering of a :class:`SyncResult`."""

from __future__ import annotations

from shortsync.models import LinkDiff, SyncResult


def format_summary(result: SyncResult, dry_run: bool = False) -> str:
    """Render *result* as a short multi-line report.

    The ``Errors`` line only appears when at least one operation failed::

        [DRY RUN] Sync completed
          Created: 2
          Updated: 0
          Deleted: 1
    """
    header = "[DRY RUN] Sync completed" if dry_run else "Sync completed"
    lines = [
        header,
        f"  Created: {result.created}",
        f"  Updated: {result.updated}",
        f"  Deleted: {result.deleted}",
    ]
    if result.errors:
        lines.append(f"  Errors: {len(result.errors)}")
    return "\n".join(lines)


def format_diff(diff: LinkDiff) -> str:
    """Render the planned operations of *diff*, one per line.

    ``+`` creates, ``~`` updates and ``-`` deletes::

        + s.io/docs -> https://example.com/docs
        ~ s.io/home -> https://example.com (was https://old.example.com)
        - s.io/legacy
    """
    if diff.is_empty:
        return "No changes"
    lines = [f"+ {link.key} -> {link.url}" for link in diff.to_create]
    for update in diff.to_update:
        line = f"~ {update.desired.key} -> {update.desired.url}"
        if update.existing.original_url != update.desired.url:
            line += f" (was {update.existing.original_url})"
        lines.append(line)
    lines.extend(f"- {remote.key}" for remote in diff.to_delete)
    return "\n".join(lines)
