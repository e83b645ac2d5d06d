"""Public data models for shortsync.

This module contains the desired-state model produced by the loader, the
remote-state record returned by the API layer, and the diff / result types
exchanged between planner, executor and clients.  All types are plain
dataclasses with no behaviour beyond what is needed for structural
equality.  They are built fresh for every sync run and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SyncOpType(str, Enum):
    """Operation types emitted by the diff engine."""

    CREATE = "create"
    """A desired link with no remote counterpart."""

    UPDATE = "update"
    """A remote link whose URL, title or tags differ from the desired link."""

    DELETE = "delete"
    """A remote link with no desired counterpart."""


# ---------------------------------------------------------------------------
# Desired state
# ---------------------------------------------------------------------------

@dataclass
class LinkSpec:
    """One link as declared in the link file, keyed by its slug.

    ``title`` and ``tags`` are passed through exactly as written; ``None``
    means the key was absent.
    """

    url: str
    title: str | None = None
    tags: list[str] | None = None


@dataclass
class DesiredDocument:
    """One YAML document of the link file: a domain and its links.

    Attributes
    ----------
    domain:
        Short.io domain hostname, e.g. ``"s.example.io"``.
    links:
        Slug to :class:`LinkSpec`, in source order.
    """

    domain: str
    links: dict[str, LinkSpec] = field(default_factory=dict)


@dataclass
class LinkConfig:
    """The validated link file: one :class:`DesiredDocument` per YAML document."""

    documents: list[DesiredDocument] = field(default_factory=list)


@dataclass
class FlattenedLink:
    """A desired link with its domain attached, see :func:`flatten_links`."""

    slug: str
    url: str
    domain: str
    title: str | None = None
    tags: list[str] | None = None

    @property
    def key(self) -> str:
        return f"{self.domain}/{self.slug}"


# ---------------------------------------------------------------------------
# Actual state
# ---------------------------------------------------------------------------

@dataclass
class RemoteLink:
    """A link currently held by Short.io.

    Attributes
    ----------
    id:
        Opaque Short.io link identifier (``idString``).
    original_url:
        Destination URL (``originalURL`` on the wire).
    path:
        The slug.
    domain:
        Domain hostname the link was listed under.
    domain_id:
        Numeric Short.io domain id, when known.
    title:
        Link title; Short.io may return ``None`` or ``""``.
    tags:
        Link tags; Short.io may return ``None`` or ``[]``.
    """

    id: str
    original_url: str
    path: str
    domain: str
    domain_id: int | None = None
    title: str | None = None
    tags: list[str] | None = None

    @property
    def key(self) -> str:
        return f"{self.domain}/{self.path}"

    @classmethod
    def from_api(cls, data: dict[str, Any], domain: str = "") -> RemoteLink:
        """Build a :class:`RemoteLink` from a Short.io link JSON object.

        *domain* is the hostname the link was queried under; Short.io
        link records carry only the numeric ``DomainId``.  When empty, a
        ``domain`` field of *data* is used if present.
        """
        link_id = data.get("idString") or data.get("id")
        return cls(
            id=str(link_id) if link_id is not None else "",
            original_url=data.get("originalURL", ""),
            path=data.get("path", ""),
            domain=domain or data.get("domain", ""),
            domain_id=data.get("DomainId", data.get("domainId")),
            title=data.get("title"),
            tags=data.get("tags"),
        )


# ---------------------------------------------------------------------------
# Diff and results
# ---------------------------------------------------------------------------

@dataclass
class LinkUpdate:
    """A desired link paired with the remote link it must overwrite."""

    desired: FlattenedLink
    existing: RemoteLink


@dataclass
class LinkDiff:
    """Minimal set of operations that turns actual state into desired state.

    Attributes
    ----------
    to_create:
        Desired links missing remotely, in link-file order.
    to_update:
        Desired links whose remote counterpart differs.
    to_delete:
        Remote links absent from the link file.
    """

    to_create: list[FlattenedLink] = field(default_factory=list)
    to_update: list[LinkUpdate] = field(default_factory=list)
    to_delete: list[RemoteLink] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.to_create) + len(self.to_update) + len(self.to_delete)

    @property
    def is_empty(self) -> bool:
        return self.total == 0


@dataclass
class SyncResult:
    """Outcome of applying (or simulating) a :class:`LinkDiff`.

    Attributes
    ----------
    created:
        Number of links created.
    updated:
        Number of links updated.
    deleted:
        Number of links deleted.
    errors:
        One message per failed operation, e.g.
        ``"Failed to create s.io/abc: Client error 400 ..."``.
    """

    created: int = 0
    updated: int = 0
    deleted: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
