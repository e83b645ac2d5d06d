"""shortsync.shortio_api -- Short.io API transport and endpoint wrappers.

This sub-package provides:

* :mod:`.rate_limit` -- Token bucket rate limiters (sync and async).
* :mod:`.retries` -- Retry policy: which failures to retry, and backoff.
* :mod:`.transport` -- HTTP transport with auth, retries, and rate limiting.
* :mod:`.links` -- Link and domain endpoint wrappers.
"""

from __future__ import annotations

from .links import AsyncLinkAPI, LinkAPI
from .rate_limit import AsyncTokenBucket, TokenBucket
from .retries import RetryPolicy
from .transport import AsyncShortioTransport, ShortioTransport

__all__ = [
    "AsyncLinkAPI",
    "AsyncShortioTransport",
    "AsyncTokenBucket",
    "LinkAPI",
    "RetryPolicy",
    "ShortioTransport",
    "TokenBucket",
]
