"""Sync and async HTTP transports for the Short.io API.

Each transport handles the full request lifecycle:

1. Acquire a token-bucket slot (wait if needed).
2. Send the HTTP request with the API key header.
3. On ``2xx`` -- return the parsed JSON response.
4. On ``429`` -- honour ``Retry-After``, sleep, and retry.
5. On ``5xx`` / timeout / connection error -- exponential backoff and retry.
   Any other ``httpx.TransportError`` raises :class:`ShortioNetworkError`
   at once.
6. On non-retryable ``4xx`` -- raise the matching typed error immediately.
7. On max attempts exceeded -- raise :class:`ShortioRetryExhaustedError`
   (or :class:`ShortioRateLimitError` when the last answer was a 429).
"""

from __future__ import annotations

import asyncio
import json as _json
import sys
import time
from dataclasses import dataclass
from typing import Any

import httpx

from shortsync.config import ShortsyncConfig
from shortsync.errors import (
    ShortioAuthError,
    ShortioNetworkError,
    ShortioNotFoundError,
    ShortioPermissionError,
    ShortioRateLimitError,
    ShortioRetryExhaustedError,
    ShortioValidationError,
)
from shortsync.observability import NoopMetricsHook, get_logger
from shortsync.utils.redact import redact

from .rate_limit import AsyncTokenBucket, TokenBucket
from .retries import RETRYABLE_STATUSES, RetryPolicy

log = get_logger("shortsync.transport")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_retry_after(response: httpx.Response) -> float | None:
    """Extract the ``Retry-After`` header value as a float, or ``None``."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


def _error_message(response: httpx.Response) -> tuple[str, Any]:
    """Return ``(message, parsed body)`` for an error response."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or response.text[:500]
    else:
        message = response.text[:500]
    return str(message), body


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the typed error for a 4xx code that must not be retried."""
    status = response.status_code
    message, body = _error_message(response)

    if status == 401:
        raise ShortioAuthError(
            message=f"Authentication failed on {method} {path}: {message}",
            context={"status_code": status},
        )
    if status == 403:
        raise ShortioPermissionError(
            message=f"Permission denied on {method} {path}: {message}",
            context={"status_code": status, "operation": f"{method} {path}"},
        )
    if status == 404:
        raise ShortioNotFoundError(
            message=f"Resource not found on {method} {path}: {message}",
            context={"status_code": status, "path": path},
        )
    if status == 400:
        raise ShortioValidationError(
            message=f"Validation error on {method} {path}: {message}",
            context={"status_code": status, "body": body},
        )
    raise ShortioValidationError(
        message=f"Client error {status} on {method} {path}: {message}",
        context={"status_code": status, "body": body},
    )


def _dump_payload(
    config: ShortsyncConfig,
    method: str,
    response: httpx.Response,
    payload: Any,
) -> None:
    """Write a redacted dump of the request/response to stderr if enabled."""
    if not config.debug_dump_payload:
        return
    try:
        resp_body = response.json()
    except ValueError:
        resp_body = response.text[:1000]
    dump: dict[str, Any] = {
        "method": method,
        "url": str(response.url),
        "response_status": response.status_code,
        "response_body": resp_body,
    }
    if payload is not None:
        dump["request_body"] = payload
    print(
        _json.dumps(redact(dump, config.api_key), indent=2, default=str),
        file=sys.stderr,
    )


@dataclass
class _Outcome:
    """What to do after one attempt: return ``value``, retry after ``delay``, or stop."""

    done: bool = False
    value: Any = None
    delay: float | None = None


def _handle_response(
    policy: RetryPolicy,
    metrics: Any,
    method: str,
    path: str,
    response: httpx.Response,
    attempt: int,
    elapsed_ms: float,
) -> _Outcome:
    """Classify one HTTP response.  Shared by the sync and async transports."""
    status = response.status_code
    tags = {"method": method, "path": path, "status": str(status)}
    metrics.increment("shortsync.requests_total", tags=tags)
    metrics.timing("shortsync.request_duration_ms", elapsed_ms, tags=tags)

    if 200 <= status < 300:
        # DELETE answers with an empty body.
        if status == 204 or not response.content:
            return _Outcome(done=True, value={})
        return _Outcome(done=True, value=response.json())

    if status not in RETRYABLE_STATUSES:
        _raise_for_status(response, method, path)

    if not policy.should_retry(attempt, status_code=status):
        return _Outcome()

    retry_after: float | None = None
    reason = "server_error"
    if status == 429:
        retry_after = _parse_retry_after(response)
        reason = "rate_limited"
        metrics.increment(
            "shortsync.rate_limited_total",
            tags={"method": method, "path": path},
        )
        log.warning(
            "Rate limited by Short.io API",
            extra={
                "extra_fields": {
                    "op": "request",
                    "method": method,
                    "path": path,
                    "retry_after": retry_after,
                    "attempt": attempt + 1,
                }
            },
        )

    metrics.increment(
        "shortsync.retries_total",
        tags={"method": method, "path": path, "reason": reason},
    )
    return _Outcome(delay=policy.backoff(attempt, retry_after))


def _handle_network_exception(
    policy: RetryPolicy,
    metrics: Any,
    method: str,
    path: str,
    exc: Exception,
    attempt: int,
) -> float:
    """Return the backoff delay for a transport error.

    Raises :class:`ShortioNetworkError` when the error is not retryable or
    no attempts are left.
    """
    metrics.increment(
        "shortsync.requests_total",
        tags={"method": method, "path": path, "status": "error"},
    )
    log.warning(
        "Request network error",
        extra={
            "extra_fields": {
                "op": "request",
                "method": method,
                "path": path,
                "attempt": attempt + 1,
                "error": str(exc),
            }
        },
    )
    if policy.should_retry(attempt, exception=exc):
        metrics.increment(
            "shortsync.retries_total",
            tags={"method": method, "path": path, "reason": "network_error"},
        )
        return policy.backoff(attempt)
    raise ShortioNetworkError(
        message=f"Network error on {method} {path}: {exc}",
        context={"url": path, "attempt": attempt + 1},
        cause=exc,
    ) from exc


def _raise_exhausted(
    attempts: int, method: str, path: str, last_status: int | None,
) -> None:
    ctx: dict[str, Any] = {"attempts": attempts, "last_status_code": last_status}
    if last_status == 429:
        raise ShortioRateLimitError(
            message=f"Rate limit still exceeded after {attempts} attempts for {method} {path}",
            context={**ctx, "attempt": attempts},
        )
    raise ShortioRetryExhaustedError(
        message=(
            f"All {attempts} attempts exhausted for {method} {path} "
            f"(last status: {last_status})"
        ),
        context=ctx,
    )


def _client_kwargs(config: ShortsyncConfig) -> dict[str, Any]:
    return {
        "base_url": config.base_url,
        "headers": {
            "Authorization": config.api_key,
            "Accept": "application/json",
            "Content-Type": "application/json",
        },
        "timeout": httpx.Timeout(config.timeout_seconds),
        "proxy": config.http_proxy,
    }


# ---------------------------------------------------------------------------
# Sync transport
# ---------------------------------------------------------------------------

class ShortioTransport:
    """Synchronous HTTP transport with auth, retry, and rate limiting.

    Parameters
    ----------
    config:
        A :class:`ShortsyncConfig` controlling all transport behaviour.
    client:
        Optional pre-built :class:`httpx.Client` (tests pass one backed by
        :class:`httpx.MockTransport`).
    """

    def __init__(
        self, config: ShortsyncConfig, client: httpx.Client | None = None,
    ) -> None:
        self._config = config
        self._retry = RetryPolicy.from_config(config)
        self._bucket = TokenBucket(rate_rps=config.rate_limit_rps, burst=10)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = client or httpx.Client(**_client_kwargs(config))

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Execute an HTTP request against the Short.io API.

        Parameters
        ----------
        method:
            HTTP method (``GET``, ``POST``, ``DELETE``).
        path:
            API path relative to ``base_url`` (e.g. ``/api/domains``).
        **kwargs:
            Forwarded to :meth:`httpx.Client.request` (``json=``,
            ``params=``, ...).

        Returns
        -------
        Any
            Parsed JSON body; ``{}`` for empty responses.

        Raises
        ------
        ShortioAuthError
            On 401 responses.
        ShortioPermissionError
            On 403 responses.
        ShortioNotFoundError
            On 404 responses.
        ShortioValidationError
            On 400 and other non-retryable 4xx responses.
        ShortioRateLimitError
            When the final attempt was still rate limited.
        ShortioRetryExhaustedError
            When all attempts hit 5xx responses.
        ShortioNetworkError
            On transport-level failures after exhausting retries.
        """
        last_status: int | None = None

        for attempt in range(self._retry.max_attempts):
            wait = self._bucket.acquire()
            if wait > 0:
                self._metrics.timing(
                    "shortsync.rate_limit_wait_ms",
                    wait * 1000,
                    tags={"method": method, "path": path},
                )

            t0 = time.monotonic()
            try:
                response = self._client.request(method, path, **kwargs)
            except httpx.TransportError as exc:
                last_status = None
                time.sleep(_handle_network_exception(
                    self._retry, self._metrics, method, path, exc, attempt,
                ))
                continue
            elapsed_ms = (time.monotonic() - t0) * 1000

            last_status = response.status_code
            _dump_payload(self._config, method, response, kwargs.get("json"))
            outcome = _handle_response(
                self._retry, self._metrics, method, path, response, attempt, elapsed_ms,
            )
            if outcome.done:
                return outcome.value
            if outcome.delay is None:
                break
            time.sleep(outcome.delay)

        _raise_exhausted(self._retry.max_attempts, method, path, last_status)

    def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> ShortioTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncShortioTransport:
    """Asynchronous HTTP transport with auth, retry, and rate limiting.

    Mirrors :class:`ShortioTransport` but uses ``httpx.AsyncClient`` and
    ``asyncio.sleep`` for non-blocking I/O.
    """

    def __init__(
        self, config: ShortsyncConfig, client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._retry = RetryPolicy.from_config(config)
        self._bucket = AsyncTokenBucket(rate_rps=config.rate_limit_rps, burst=10)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = client or httpx.AsyncClient(**_client_kwargs(config))

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Execute an HTTP request against the Short.io API (async).

        See :meth:`ShortioTransport.request`; the semantics are identical.
        """
        last_status: int | None = None

        for attempt in range(self._retry.max_attempts):
            wait = await self._bucket.acquire()
            if wait > 0:
                self._metrics.timing(
                    "shortsync.rate_limit_wait_ms",
                    wait * 1000,
                    tags={"method": method, "path": path},
                )

            t0 = time.monotonic()
            try:
                response = await self._client.request(method, path, **kwargs)
            except httpx.TransportError as exc:
                last_status = None
                await asyncio.sleep(_handle_network_exception(
                    self._retry, self._metrics, method, path, exc, attempt,
                ))
                continue
            elapsed_ms = (time.monotonic() - t0) * 1000

            last_status = response.status_code
            _dump_payload(self._config, method, response, kwargs.get("json"))
            outcome = _handle_response(
                self._retry, self._metrics, method, path, response, attempt, elapsed_ms,
            )
            if outcome.done:
                return outcome.value
            if outcome.delay is None:
                break
            await asyncio.sleep(outcome.delay)

        _raise_exhausted(self._retry.max_attempts, method, path, last_status)

    async def close(self) -> None:
        """Close the underlying async HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncShortioTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
