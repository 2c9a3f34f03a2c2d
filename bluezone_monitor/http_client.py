"""Shared async HTTP client and the bounded GET used by every poller."""

from __future__ import annotations

import asyncio

import httpx


def create_client(timeout: float, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Build the client shared by both pollers."""
    return httpx.AsyncClient(
        timeout=timeout,
        transport=transport,
        headers={"Accept": "application/json"},
        follow_redirects=True,
    )


async def fetch(client: httpx.AsyncClient, url: str, timeout: float) -> httpx.Response:
    """GET ``url`` and return whatever response arrives.

    Transport failures surface as ``httpx.HTTPError``. ``timeout`` is a hard
    deadline for the whole exchange (httpx's own timeouts are per phase), and
    raises ``asyncio.TimeoutError`` when it elapses.
    """
    return await asyncio.wait_for(client.get(url, timeout=timeout), timeout=timeout)
