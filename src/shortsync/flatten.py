"""Project the nested link file model into flat link records.

The loader keeps links grouped per document (``domain -> slug -> spec``).
The diff engine and the domain enumeration only need a flat, ordered
list, so this projection is exposed on its own.
"""

from __future__ import annotations

from shortsync.models import FlattenedLink, LinkConfig


def link_key(domain: str, slug: str) -> str:
    """Return the identity key ``"<domain>/<slug>"`` of a link."""
    return f"{domain}/{slug}"


def flatten_links(config: LinkConfig) -> list[FlattenedLink]:
    """Flatten *config* into one :class:`FlattenedLink` per (document, slug).

    Order is document order, then slug order within each document.
    *config* is assumed to have been validated by :func:`load_link_config`.
    """
    return [
        FlattenedLink(
            slug=slug,
            url=spec.url,
            domain=doc.domain,
            title=spec.title,
            tags=spec.tags,
        )
        for doc in config.documents
        for slug, spec in doc.links.items()
    ]


def unique_domains(config: LinkConfig) -> list[str]:
    """Return the distinct domains referenced by *config*'s links, first-seen order.

    A document with an empty ``links`` map contributes no domain.
    """
    return list(dict.fromkeys(link.domain for link in flatten_links(config)))
