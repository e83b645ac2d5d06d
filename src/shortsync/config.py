"""Client configuration for shortsync.

:class:`ShortsyncConfig` is a plain dataclass that captures every tuneable
knob of the Short.io transport and the sync executors.  Instances are
passed to both :class:`ShortsyncClient` and :class:`AsyncShortsyncClient`.

The link file itself (domains, slugs, URLs) is *not* configured here; see
:mod:`shortsync.loader`.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

DEFAULT_BASE_URL = "https://api.short.io"

API_KEY_ENV_VAR = "SHORTIO_API_KEY"
"""Environment variable the CLI reads when ``--api-key`` is not given."""


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class ShortsyncConfig:
    """Complete configuration for a shortsync client.

    Every parameter has a sensible default so that the only *required*
    value is ``api_key``.

    Parameters
    ----------
    api_key:
        Short.io secret API key.  **Required.**  Never logged.
    base_url:
        API root URL.  Override for proxy or testing environments.
    retry_max_attempts:
        Maximum number of attempts per request for retryable HTTP errors.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Scale backoff intervals randomly to 50-100 % of their value.
    rate_limit_rps:
        Target requests per second for client-side pacing (token bucket).
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    max_concurrency:
        Upper bound on in-flight write requests per phase (async client
        only).
    page_size:
        Links requested per page when listing a domain.  Short.io caps
        this at 150.
    metrics:
        Optional :class:`MetricsHook` implementation.
    debug_dump_payload:
        Write the (redacted) API request/response to *stderr*.
    """

    # ── Core ────────────────────────────────────────────────────────────
    api_key: str = ""

    base_url: str = DEFAULT_BASE_URL

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 5

    retry_base_delay: float = 1.0

    retry_max_delay: float = 60.0

    retry_jitter: bool = True

    rate_limit_rps: float = 5.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Sync ────────────────────────────────────────────────────────────
    max_concurrency: int = 4

    page_size: int = 150

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API key, or target localhost for testing."
            )

        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {self.max_concurrency}")
        if not 1 <= self.page_size <= 150:
            raise ValueError(f"page_size must be between 1 and 150, got {self.page_size}")

    def __repr__(self) -> str:
        """Mask the API key to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "api_key":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"api_key='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"ShortsyncConfig({', '.join(parts)})"
