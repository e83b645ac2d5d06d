"""shortsync: reconcile a YAML link file with Short.io.

Public re-exports
-----------------

* **Clients:** :class:`ShortsyncClient`, :class:`AsyncShortsyncClient`
* **Configuration:** :class:`ShortsyncConfig`
* **Link file:** :func:`load_link_config`, :func:`flatten_links`
* **Reconciliation:** :func:`compute_diff`, :class:`SyncExecutor`,
  :func:`format_summary`
* **Errors:** Every :class:`ShortsyncError` subclass and :class:`ErrorCode`
* **Models:** All dataclasses and enums

Usage::

    from shortsync import ShortsyncClient, format_summary

    with ShortsyncClient(api_key="sk_xxx") as client:
        result = client.sync("shortlinks.yaml", dry_run=True)
        print(format_summary(result, dry_run=True))
"""

from __future__ import annotations

from shortsync.async_client import AsyncShortsyncClient

# ── Clients ────────────────────────────────────────────────────────────
from shortsync.client import ShortsyncClient

# ── Configuration ───────────────────────────────────────────────────────
from shortsync.config import ShortsyncConfig

# ── Errors ──────────────────────────────────────────────────────────────
from shortsync.errors import (
    ConfigEmptyError,
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    DocumentNotObjectError,
    DuplicateLinkError,
    EmptySlugError,
    ErrorCode,
    InvalidTagsTypeError,
    InvalidTagTypeError,
    InvalidTitleTypeError,
    InvalidUrlError,
    LinkNotObjectError,
    MissingDomainError,
    MissingLinksMapError,
    MissingUrlError,
    ShortioAuthError,
    ShortioNetworkError,
    ShortioNotFoundError,
    ShortioPermissionError,
    ShortioRateLimitError,
    ShortioRetryExhaustedError,
    ShortioValidationError,
    ShortsyncError,
)

# ── Link file ───────────────────────────────────────────────────────────
from shortsync.flatten import flatten_links, link_key, unique_domains
from shortsync.loader import load_link_config

# ── Models ──────────────────────────────────────────────────────────────
from shortsync.models import (
    DesiredDocument,
    FlattenedLink,
    LinkConfig,
    LinkDiff,
    LinkSpec,
    LinkUpdate,
    RemoteLink,
    SyncOpType,
    SyncResult,
)

# ── Reconciliation ──────────────────────────────────────────────────────
from shortsync.sync import (
    AsyncSyncExecutor,
    SyncExecutor,
    async_compute_diff,
    compute_diff,
    format_diff,
    format_summary,
    plan_diff,
)

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Clients
    "ShortsyncClient",
    "AsyncShortsyncClient",
    # Configuration
    "ShortsyncConfig",
    # Link file
    "load_link_config",
    "flatten_links",
    "link_key",
    "unique_domains",
    # Reconciliation
    "compute_diff",
    "async_compute_diff",
    "plan_diff",
    "SyncExecutor",
    "AsyncSyncExecutor",
    "format_summary",
    "format_diff",
    # Error base + code enum
    "ShortsyncError",
    "ErrorCode",
    # Link file errors
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigEmptyError",
    "ConfigParseError",
    "DocumentNotObjectError",
    "MissingDomainError",
    "MissingLinksMapError",
    "EmptySlugError",
    "DuplicateLinkError",
    "LinkNotObjectError",
    "MissingUrlError",
    "InvalidUrlError",
    "InvalidTitleTypeError",
    "InvalidTagsTypeError",
    "InvalidTagTypeError",
    # API / transport errors
    "ShortioValidationError",
    "ShortioAuthError",
    "ShortioPermissionError",
    "ShortioNotFoundError",
    "ShortioRateLimitError",
    "ShortioRetryExhaustedError",
    "ShortioNetworkError",
    # Models
    "LinkSpec",
    "DesiredDocument",
    "LinkConfig",
    "FlattenedLink",
    "RemoteLink",
    "LinkUpdate",
    "LinkDiff",
    "SyncResult",
    "SyncOpType",
]
