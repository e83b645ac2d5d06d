"""Load and validate the YAML link file.

The link file is a YAML stream; each document declares one domain and its
links keyed by slug::

    domain: s.example.io
    links:
      docs:
        url: https://example.com/docs
        title: Documentation
        tags: [internal]
    ---
    domain: go.example.io
    links:
      home:
        url: https://example.com

Validation stops at the first problem and raises the matching
:class:`ConfigError` subclass.  Document indices in messages are 1-based.
A key repeated inside one mapping (for instance a slug declared twice in
the same document) is a YAML parse error.
"""

from __future__ import annotations

import os
from collections.abc import Hashable, Iterator
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import yaml

from shortsync.errors import (
    ConfigEmptyError,
    ConfigNotFoundError,
    ConfigParseError,
    DocumentNotObjectError,
    DuplicateLinkError,
    EmptySlugError,
    InvalidTagsTypeError,
    InvalidTagTypeError,
    InvalidTitleTypeError,
    InvalidUrlError,
    LinkNotObjectError,
    MissingDomainError,
    MissingLinksMapError,
    MissingUrlError,
)
from shortsync.flatten import link_key
from shortsync.models import DesiredDocument, LinkConfig, LinkSpec
from shortsync.observability import get_logger

log = get_logger("shortsync.loader")


class _UniqueKeyLoader(yaml.SafeLoader):
    """Safe loader that rejects a key repeated within one mapping.

    Plain PyYAML keeps the last value, which would silently drop the first
    of two links declared with the same slug.
    """

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        keys: set[Any] = set()
        for key_node, _ in node.value:
            if key_node.tag == "tag:yaml.org,2002:merge":
                continue
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                # Reported by the base constructor.
                continue
            if key in keys:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f'found duplicate key "{key}"',
                    key_node.start_mark,
                )
            keys.add(key)
        return super().construct_mapping(node, deep=deep)


def load_link_config(path: str | os.PathLike[str]) -> LinkConfig:
    """Parse and validate the link file at *path*.

    Parameters
    ----------
    path:
        Location of a UTF-8 YAML file holding one or more documents.

    Returns
    -------
    LinkConfig
        One :class:`DesiredDocument` per YAML document, in file order.

    Raises
    ------
    ConfigNotFoundError
        *path* does not exist or is not a regular file.
    ConfigEmptyError
        The file holds no YAML documents.
    ConfigParseError
        A document is not well-formed YAML.
    ConfigError
        Any schema violation, see :func:`validate_document`.
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigNotFoundError(
            f"Config file not found: {path}",
            context={"path": str(path)},
        )

    try:
        content = config_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigParseError(
            f"Config file is not valid UTF-8: {path}",
            context={"path": str(path), "parser_message": str(exc)},
            cause=exc,
        ) from exc

    documents: list[DesiredDocument] = []
    seen: set[str] = set()
    for index, raw in _iter_documents(content):
        documents.append(validate_document(raw, index, seen))

    if not documents:
        raise ConfigEmptyError("Config file is empty", context={"path": str(path)})

    log.debug(
        "Link file loaded",
        extra={
            "extra_fields": {
                "op": "load_link_config",
                "path": str(path),
                "documents": len(documents),
                "links": len(seen),
            }
        },
    )
    return LinkConfig(documents=documents)


def _iter_documents(content: str) -> Iterator[tuple[int, Any]]:
    """Yield ``(1-based index, parsed document)`` pairs from a YAML stream."""
    stream = yaml.load_all(content, Loader=_UniqueKeyLoader)
    index = 1
    while True:
        try:
            raw = next(stream)
        except StopIteration:
            return
        except yaml.YAMLError as exc:
            raise ConfigParseError(
                f"YAML parse error in document {index}: {exc}",
                context={"document_index": index, "parser_message": str(exc)},
                cause=exc,
            ) from exc
        yield index, raw
        index += 1


def validate_document(raw: Any, document_index: int, seen: set[str]) -> DesiredDocument:
    """Validate one parsed YAML document.

    *seen* holds the ``domain/slug`` keys of every link accepted so far in
    the same file.  Keys of this document's links are added to it, so the
    same set must be passed for every document of a file.
    """
    ctx: dict[str, Any] = {"document_index": document_index}

    if not isinstance(raw, dict):
        raise DocumentNotObjectError(f"Document {document_index} must be an object", context=ctx)

    domain = raw.get("domain")
    if not isinstance(domain, str) or not domain.strip():
        raise MissingDomainError(
            f'Document {document_index} must have a non-empty "domain" string',
            context=ctx,
        )

    # A list here is the legacy ``links: [{slug: ..., url: ...}]`` format.
    links = raw.get("links")
    if not isinstance(links, dict):
        raise MissingLinksMapError(
            f'Document {document_index} must have a "links" map (use slug as key)',
            context={**ctx, "domain": domain},
        )

    validated: dict[str, LinkSpec] = {}
    for raw_slug, link in links.items():
        slug = "" if raw_slug is None else str(raw_slug)
        if not slug.strip():
            raise EmptySlugError(
                f"Document {document_index}: link slug (key) must be a non-empty string",
                context={**ctx, "domain": domain},
            )

        key = link_key(domain, slug)
        if key in seen:
            raise DuplicateLinkError(
                f"Duplicate link: {key} (document {document_index})",
                context={**ctx, "slug": slug, "key": key},
            )
        seen.add(key)

        validated[slug] = validate_link(link, slug, document_index)

    return DesiredDocument(domain=domain, links=validated)


def validate_link(link: Any, slug: str, document_index: int) -> LinkSpec:
    """Validate one entry of a document's ``links`` map."""
    prefix = f'Document {document_index}: link "{slug}"'
    ctx: dict[str, Any] = {"document_index": document_index, "slug": slug}

    if not isinstance(link, dict):
        raise LinkNotObjectError(f"{prefix} must be an object", context=ctx)

    url = link.get("url")
    if not isinstance(url, str) or not url.strip():
        raise MissingUrlError(f'{prefix} must have a non-empty "url" string', context=ctx)

    if not _is_absolute_url(url):
        raise InvalidUrlError(f"{prefix} has invalid URL: {url}", context={**ctx, "url": url})

    title = link.get("title")
    if "title" in link and not isinstance(title, str):
        raise InvalidTitleTypeError(f'{prefix} "title" must be a string', context=ctx)

    tags = link.get("tags")
    if "tags" in link:
        if not isinstance(tags, list):
            raise InvalidTagsTypeError(f'{prefix} "tags" must be a list', context=ctx)
        for tag in tags:
            if not isinstance(tag, str):
                raise InvalidTagTypeError(
                    f"{prefix} tags must all be strings",
                    context={**ctx, "tag": tag},
                )

    return LinkSpec(url=url, title=title, tags=tags)


def _is_absolute_url(url: str) -> bool:
    """Return ``True`` if *url* has both a scheme and a host."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)
