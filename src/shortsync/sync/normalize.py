"""Field normalization and API payload construction.

Short.io reports a link without title as ``None`` or ``""`` and a link
without tags as ``None`` or ``[]``; the link file omits the key.  All
equality checks go through :func:`normalize_title` / :func:`normalize_tags`
so these spellings compare equal.

Payloads deliberately differ between create and update: a create passes
``title``/``tags`` through (``None`` is simply not sent), while an update
sends ``""`` / ``[]`` so that a title or tags removed from the link file
are cleared remotely.
"""

from __future__ import annotations

from typing import Any

from shortsync.models import FlattenedLink, RemoteLink


def normalize_title(title: str | None) -> str:
    return title or ""


def normalize_tags(tags: list[str] | None) -> frozenset[str]:
    """Tags compare as a set: order and repeats are ignored."""
    return frozenset(tags or ())


def links_match(desired: FlattenedLink, existing: RemoteLink) -> bool:
    """Return ``True`` if *existing* already matches *desired*.

    Compares URL, normalized title and normalized tag set.  Domain and slug
    are assumed equal (they are how the pair was matched).
    """
    return (
        desired.url == existing.original_url
        and normalize_title(desired.title) == normalize_title(existing.title)
        and normalize_tags(desired.tags) == normalize_tags(existing.tags)
    )


def create_payload(link: FlattenedLink) -> dict[str, Any]:
    return {
        "originalURL": link.url,
        "domain": link.domain,
        "path": link.slug,
        "title": link.title,
        "tags": link.tags,
    }


def update_payload(link: FlattenedLink) -> dict[str, Any]:
    return {
        "originalURL": link.url,
        "title": link.title if link.title is not None else "",
        "tags": link.tags if link.tags is not None else [],
    }
