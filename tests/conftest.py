"""Shared test fixtures for the shortsync test suite."""

from __future__ import annotations

import itertools
from pathlib import Path
from typing import Any, Callable

import pytest

from shortsync.config import ShortsyncConfig
from shortsync.models import RemoteLink


@pytest.fixture
def config() -> ShortsyncConfig:
    """Configuration tuned for fast, deterministic tests."""
    return ShortsyncConfig(
        api_key="test_key_1234",
        retry_max_attempts=3,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter=False,
        rate_limit_rps=10_000.0,
    )


@pytest.fixture
def write_links(tmp_path: Path) -> Callable[[str], Path]:
    """Write YAML text to a link file under ``tmp_path`` and return its path."""

    def _write(content: str) -> Path:
        path = tmp_path / "shortlinks.yaml"
        path.write_text(content, encoding="utf-8")
        return path

    return _write


class FakeShortio:
    """In-memory stand-in for :class:`LinkAPI`, keyed by domain.

    Mutations are applied to the stored state so a second diff sees the
    result of the first sync.
    """

    def __init__(self, links: list[RemoteLink] | None = None) -> None:
        self._ids = itertools.count(1000)
        self.links: dict[str, RemoteLink] = {}
        for link in links or []:
            self.links[link.id] = link
        self.list_calls: list[str] = []

    def list_links(self, domain: str) -> list[RemoteLink]:
        self.list_calls.append(domain)
        return [link for link in self.links.values() if link.domain == domain]

    def create_link(self, payload: dict[str, Any]) -> RemoteLink:
        link = RemoteLink(
            id=str(next(self._ids)),
            original_url=payload["originalURL"],
            path=payload["path"],
            domain=payload["domain"],
            title=payload.get("title"),
            tags=payload.get("tags"),
        )
        self.links[link.id] = link
        return link

    def update_link(self, link_id: str, payload: dict[str, Any]) -> RemoteLink:
        link = self.links[link_id]
        link.original_url = payload["originalURL"]
        link.title = payload["title"]
        link.tags = payload["tags"]
        return link

    def delete_link(self, link_id: str) -> None:
        del self.links[link_id]


@pytest.fixture
def fake_shortio() -> type[FakeShortio]:
    return FakeShortio
