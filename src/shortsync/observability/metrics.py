"""Metrics hook protocol and no-op default implementation.

shortsync emits counters and timings for API requests, retries and sync
operations.  By default a :class:`NoopMetricsHook` is used.  Supply any
object satisfying :class:`MetricsHook` via ``ShortsyncConfig.metrics`` to
route them to StatsD, Prometheus, Datadog, etc.

Emitted metric names:

* ``shortsync.requests_total``        -- counter
* ``shortsync.retries_total``         -- counter
* ``shortsync.rate_limited_total``    -- counter
* ``shortsync.request_duration_ms``   -- timing
* ``shortsync.rate_limit_wait_ms``    -- timing
* ``shortsync.sync_ops_total``        -- counter, tags ``op_type``/``outcome``
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    *tags* is an optional ``str -> str`` dict; backends translate it into
    whatever labelling mechanism they support.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric by *value*."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that silently discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
