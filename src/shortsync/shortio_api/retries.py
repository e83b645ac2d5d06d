"""When to retry a Short.io request, and how long to wait first.

Short.io answers ``429`` when the per-account request rate is exceeded
and occasionally ``5xx`` during deploys; both are retried, as are
connection failures and timeouts.  Every other ``4xx`` is final.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

import httpx

from shortsync.config import ShortsyncConfig

RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry limits and backoff shape for one transport.

    Attempts are numbered from 0.  The delay before attempt ``n + 1`` is
    ``base_delay * 2**n`` capped at ``max_delay``, unless the server sent
    ``Retry-After``.  With ``jitter`` the delay is scaled to a random
    50-100 % of its value.
    """

    max_attempts: int = 5
    base_delay: float = 1.0
    max_delay: float = 60.0
    jitter: bool = True

    @classmethod
    def from_config(cls, config: ShortsyncConfig) -> RetryPolicy:
        return cls(
            max_attempts=config.retry_max_attempts,
            base_delay=config.retry_base_delay,
            max_delay=config.retry_max_delay,
            jitter=config.retry_jitter,
        )

    def should_retry(
        self,
        attempt: int,
        status_code: int | None = None,
        exception: Exception | None = None,
    ) -> bool:
        """Return ``True`` if a failed *attempt* may be followed by another.

        Pass the response *status_code*, or the *exception* raised when no
        response arrived.
        """
        if attempt + 1 >= self.max_attempts:
            return False
        if exception is not None:
            return isinstance(exception, RETRYABLE_EXCEPTIONS)
        return status_code in RETRYABLE_STATUSES

    def backoff(self, attempt: int, retry_after: float | None = None) -> float:
        """Seconds to sleep after failed *attempt*."""
        if retry_after is not None:
            delay = retry_after
        else:
            delay = min(self.base_delay * (2 ** attempt), self.max_delay)
        if self.jitter:
            delay *= 0.5 + random.random() * 0.5
        return delay
