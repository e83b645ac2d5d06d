"""Tests for LinkAPI / AsyncLinkAPI against a mocked transport."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, call

import pytest

from shortsync.errors import ShortioNotFoundError
from shortsync.models import RemoteLink
from shortsync.shortio_api.links import AsyncLinkAPI, LinkAPI, _list_params, _wire_payload

DOMAINS = [
    {"id": 11, "hostname": "first.io"},
    {"id": 22, "hostname": "second.io"},
]


def _link_json(path: str, link_id: str = "abc", url: str = "https://e.com", **extra) -> dict:
    return {"idString": link_id, "path": path, "originalURL": url, "DomainId": 11, **extra}


def _routing_transport(pages: list[dict]) -> MagicMock:
    """Mock transport: ``/api/domains`` returns DOMAINS, ``/api/links`` replays *pages*."""
    queue = list(pages)
    transport = MagicMock()

    def request(method, path, **kwargs):
        if path == "/api/domains":
            return DOMAINS
        if path == "/api/links":
            return queue.pop(0)
        return {}

    transport.request.side_effect = request
    return transport


# =========================================================================
# Helpers
# =========================================================================


class TestHelpers:
    def test_list_params_first_page(self):
        assert _list_params(11, 150, None) == {"domain_id": 11, "limit": 150}

    def test_list_params_with_token(self):
        assert _list_params(11, 50, "tok") == {"domain_id": 11, "limit": 50, "pageToken": "tok"}

    def test_wire_payload_drops_none(self):
        assert _wire_payload({"originalURL": "https://a.com", "title": None, "tags": None}) == {
            "originalURL": "https://a.com",
        }

    def test_wire_payload_keeps_empty_values(self):
        payload = {"originalURL": "https://a.com", "title": "", "tags": []}
        assert _wire_payload(payload) == payload


# =========================================================================
# Domain lookup
# =========================================================================


class TestGetDomainId:
    def test_resolves_hostname(self):
        api = LinkAPI(_routing_transport([]))
        assert api.get_domain_id("second.io") == 22

    def test_cached_across_domains(self):
        transport = _routing_transport([])
        api = LinkAPI(transport)
        api.get_domain_id("first.io")
        api.get_domain_id("second.io")
        api.get_domain_id("first.io")
        assert transport.request.call_count == 1

    def test_unknown_domain(self):
        api = LinkAPI(_routing_transport([]))
        with pytest.raises(ShortioNotFoundError, match="Domain not found in Short.io account: nope.io") as exc_info:
            api.get_domain_id("nope.io")
        assert exc_info.value.context["domain"] == "nope.io"

    def test_malformed_domains_response(self):
        transport = MagicMock()
        transport.request.return_value = {"unexpected": True}
        with pytest.raises(ShortioNotFoundError):
            LinkAPI(transport).get_domain_id("first.io")


# =========================================================================
# Listing
# =========================================================================


class TestListLinks:
    def test_single_page(self):
        transport = _routing_transport([
            {"links": [_link_json("a", "1", title="A", tags=["t"])]},
        ])
        links = LinkAPI(transport).list_links("first.io")

        assert links == [
            RemoteLink(
                id="1", original_url="https://e.com", path="a", domain="first.io",
                domain_id=11, title="A", tags=["t"],
            ),
        ]
        transport.request.assert_any_call(
            "GET", "/api/links", params={"domain_id": 11, "limit": 150},
        )

    def test_follows_next_page_token(self):
        transport = _routing_transport([
            {"links": [_link_json("a", "1")], "nextPageToken": "p2"},
            {"links": [_link_json("b", "2")], "nextPageToken": "p3"},
            {"links": [_link_json("c", "3")]},
        ])
        links = LinkAPI(transport, page_size=1).list_links("first.io")

        assert [link.path for link in links] == ["a", "b", "c"]
        assert transport.request.call_args_list[1:] == [
            call("GET", "/api/links", params={"domain_id": 11, "limit": 1}),
            call("GET", "/api/links", params={"domain_id": 11, "limit": 1, "pageToken": "p2"}),
            call("GET", "/api/links", params={"domain_id": 11, "limit": 1, "pageToken": "p3"}),
        ]

    def test_empty_page_stops_even_with_token(self):
        transport = _routing_transport([{"links": [], "nextPageToken": "loop"}])
        assert LinkAPI(transport).list_links("first.io") == []

    def test_domain_attached_to_every_link(self):
        transport = _routing_transport([{"links": [_link_json("a"), _link_json("b", "2")]}])
        links = LinkAPI(transport).list_links("first.io")
        assert {link.key for link in links} == {"first.io/a", "first.io/b"}


# =========================================================================
# Mutations
# =========================================================================


class TestMutations:
    def test_create_posts_wire_payload(self):
        transport = MagicMock()
        transport.request.return_value = _link_json("new", "n1")
        created = LinkAPI(transport).create_link({
            "originalURL": "https://e.com", "domain": "first.io", "path": "new",
            "title": None, "tags": None,
        })

        transport.request.assert_called_once_with(
            "POST", "/links",
            json={"originalURL": "https://e.com", "domain": "first.io", "path": "new"},
        )
        assert created.id == "n1"
        assert created.domain == "first.io"

    def test_update_posts_to_link_id(self):
        transport = MagicMock()
        transport.request.return_value = _link_json("x", "id-1")
        LinkAPI(transport).update_link(
            "id-1", {"originalURL": "https://e.com", "title": "", "tags": []},
        )
        transport.request.assert_called_once_with(
            "POST", "/links/id-1",
            json={"originalURL": "https://e.com", "title": "", "tags": []},
        )

    def test_delete(self):
        transport = MagicMock()
        transport.request.return_value = {}
        assert LinkAPI(transport).delete_link("id-1") is None
        transport.request.assert_called_once_with("DELETE", "/links/id-1")


# =========================================================================
# Async wrapper
# =========================================================================


class TestAsyncLinkAPI:
    @pytest.mark.asyncio
    async def test_list_links_paginates(self):
        sync_transport = _routing_transport([
            {"links": [_link_json("a", "1")], "nextPageToken": "p2"},
            {"links": [_link_json("b", "2")]},
        ])
        transport = MagicMock()
        transport.request = AsyncMock(side_effect=sync_transport.request.side_effect)

        links = await AsyncLinkAPI(transport).list_links("first.io")

        assert [link.path for link in links] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_concurrent_lookups_share_one_domains_request(self):
        paths: list[str] = []

        async def request(method, path, **kwargs):
            paths.append(path)
            # Yield so both lookups overlap.
            await asyncio.sleep(0)
            if path == "/api/domains":
                return DOMAINS
            return {"links": []}

        transport = MagicMock()
        transport.request = request
        api = AsyncLinkAPI(transport)

        await asyncio.gather(api.list_links("first.io"), api.list_links("second.io"))

        assert paths.count("/api/domains") == 1
        assert paths.count("/api/links") == 2

    @pytest.mark.asyncio
    async def test_unknown_domain(self):
        transport = MagicMock()
        transport.request = AsyncMock(return_value=DOMAINS)
        with pytest.raises(ShortioNotFoundError):
            await AsyncLinkAPI(transport).get_domain_id("missing.io")

    @pytest.mark.asyncio
    async def test_create_update_delete(self):
        transport = MagicMock()
        transport.request = AsyncMock(return_value=_link_json("a", "7"))
        api = AsyncLinkAPI(transport)

        created = await api.create_link({"originalURL": "https://e.com", "domain": "first.io", "path": "a"})
        await api.update_link("7", {"originalURL": "https://f.com", "title": "", "tags": []})
        await api.delete_link("7")

        assert created.id == "7"
        assert [c.args[:2] for c in transport.request.await_args_list] == [
            ("POST", "/links"), ("POST", "/links/7"), ("DELETE", "/links/7"),
        ]
