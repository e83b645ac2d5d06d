"""Link API wrappers for the Short.io API.

Provides :class:`LinkAPI` (sync) and :class:`AsyncLinkAPI` (async) thin
wrappers around the Short.io link and domain endpoints.  Both delegate all
HTTP concerns (auth, retries, rate limiting) to the underlying transport.

Endpoints used:

* ``GET /api/domains`` -- resolve a hostname to its numeric domain id.
* ``GET /api/links`` -- list a domain's links, paginated by
  ``nextPageToken``.
* ``POST /links`` -- create a link.
* ``POST /links/{id}`` -- update a link.
* ``DELETE /links/{id}`` -- delete a link.
"""

from __future__ import annotations

import asyncio
from typing import Any

from shortsync.errors import ShortioNotFoundError
from shortsync.models import RemoteLink

from .transport import AsyncShortioTransport, ShortioTransport


def _index_domains(domains: Any) -> dict[str, int]:
    """Map hostname to domain id from a ``GET /api/domains`` response."""
    if not isinstance(domains, list):
        return {}
    return {
        entry["hostname"]: int(entry["id"])
        for entry in domains
        if "hostname" in entry and "id" in entry
    }


def _domain_not_found(hostname: str) -> ShortioNotFoundError:
    return ShortioNotFoundError(
        message=f"Domain not found in Short.io account: {hostname}",
        context={"domain": hostname},
    )


def _list_params(domain_id: int, page_size: int, page_token: str | None) -> dict[str, Any]:
    params: dict[str, Any] = {"domain_id": domain_id, "limit": page_size}
    if page_token:
        params["pageToken"] = page_token
    return params


def _wire_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Drop ``None`` values; Short.io leaves omitted fields untouched."""
    return {key: value for key, value in payload.items() if value is not None}


class LinkAPI:
    """Synchronous wrapper for the Short.io link endpoints.

    Parameters
    ----------
    transport:
        A configured :class:`ShortioTransport` instance.
    page_size:
        Links requested per ``GET /api/links`` page (max 150).
    """

    def __init__(self, transport: ShortioTransport, page_size: int = 150) -> None:
        self._transport = transport
        self._page_size = page_size
        self._domain_ids: dict[str, int] = {}

    def get_domain_id(self, domain: str) -> int:
        """Return the numeric Short.io id of *domain*, cached per instance.

        Raises
        ------
        ShortioNotFoundError
            If the account has no domain with this hostname.
        """
        if domain not in self._domain_ids:
            domains = self._transport.request("GET", "/api/domains")
            self._domain_ids.update(_index_domains(domains))
        if domain not in self._domain_ids:
            raise _domain_not_found(domain)
        return self._domain_ids[domain]

    def list_links(self, domain: str) -> list[RemoteLink]:
        """Return every link Short.io holds for *domain*, following pagination."""
        domain_id = self.get_domain_id(domain)
        links: list[RemoteLink] = []
        page_token: str | None = None
        while True:
            data = self._transport.request(
                "GET", "/api/links",
                params=_list_params(domain_id, self._page_size, page_token),
            )
            page = data.get("links", [])
            links.extend(RemoteLink.from_api(item, domain) for item in page)
            page_token = data.get("nextPageToken")
            if not page_token or not page:
                return links

    def create_link(self, payload: dict[str, Any]) -> RemoteLink:
        """Create a link.

        Parameters
        ----------
        payload:
            ``{"originalURL", "domain", "path", "title", "tags"}``;
            ``None`` values are not sent.
        """
        data = self._transport.request("POST", "/links", json=_wire_payload(payload))
        return RemoteLink.from_api(data, payload.get("domain", ""))

    def update_link(self, link_id: str, payload: dict[str, Any]) -> RemoteLink:
        """Update link *link_id* with ``{"originalURL", "title", "tags"}``."""
        data = self._transport.request(
            "POST", f"/links/{link_id}", json=_wire_payload(payload),
        )
        return RemoteLink.from_api(data)

    def delete_link(self, link_id: str) -> None:
        """Delete link *link_id*."""
        self._transport.request("DELETE", f"/links/{link_id}")


class AsyncLinkAPI:
    """Asynchronous wrapper for the Short.io link endpoints.

    Mirrors :class:`LinkAPI` but all methods are coroutines.
    """

    def __init__(self, transport: AsyncShortioTransport, page_size: int = 150) -> None:
        self._transport = transport
        self._page_size = page_size
        self._domain_ids: dict[str, int] = {}
        self._domain_lock = asyncio.Lock()

    async def get_domain_id(self, domain: str) -> int:
        """Return the numeric Short.io id of *domain* (async).

        Concurrent callers share a single ``GET /api/domains`` request.
        """
        async with self._domain_lock:
            if domain not in self._domain_ids:
                domains = await self._transport.request("GET", "/api/domains")
                self._domain_ids.update(_index_domains(domains))
        if domain not in self._domain_ids:
            raise _domain_not_found(domain)
        return self._domain_ids[domain]

    async def list_links(self, domain: str) -> list[RemoteLink]:
        """Return every link Short.io holds for *domain* (async)."""
        domain_id = await self.get_domain_id(domain)
        links: list[RemoteLink] = []
        page_token: str | None = None
        while True:
            data = await self._transport.request(
                "GET", "/api/links",
                params=_list_params(domain_id, self._page_size, page_token),
            )
            page = data.get("links", [])
            links.extend(RemoteLink.from_api(item, domain) for item in page)
            page_token = data.get("nextPageToken")
            if not page_token or not page:
                return links

    async def create_link(self, payload: dict[str, Any]) -> RemoteLink:
        data = await self._transport.request("POST", "/links", json=_wire_payload(payload))
        return RemoteLink.from_api(data, payload.get("domain", ""))

    async def update_link(self, link_id: str, payload: dict[str, Any]) -> RemoteLink:
        data = await self._transport.request(
            "POST", f"/links/{link_id}", json=_wire_payload(payload),
        )
        return RemoteLink.from_api(data)

    async def delete_link(self, link_id: str) -> None:
        await self._transport.request("DELETE", f"/links/{link_id}")
