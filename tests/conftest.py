"""Shared test fixtures for the Blue Zone monitor."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import httpx
import pytest

from bluezone_monitor.config import Settings
from bluezone_monitor.models import ServiceEndpoint

Behavior = Callable[[httpx.Request], Any]


def order_payload(order_id: int, status: str = "PENDING", amount: float = 42.5) -> dict:
    """One order in the order service's wire format."""
    return {
        "id": order_id,
        "customerId": f"cust-{order_id}",
        "status": status,
        "totalAmount": amount,
        "createdAt": "2026-10-01T12:00:00Z",
        "updatedAt": "2026-10-01T12:05:00Z",
    }


class FakeServices:
    """Scriptable backend for ``httpx.MockTransport``.

    Each URL maps to a queue of behaviors; the last one repeats forever.
    """

    def __init__(self) -> None:
        self._routes: dict[str, list[Behavior]] = {}
        self.calls: list[str] = []

    # -- behaviors ----------------------------------------------------------

    @staticmethod
    def ok(json: Any = None, status_code: int = 200) -> Behavior:
        def behavior(request: httpx.Request) -> httpx.Response:
            if json is None:
                return httpx.Response(status_code)
            return httpx.Response(status_code, json=json)

        return behavior

    @staticmethod
    def status(status_code: int) -> Behavior:
        return lambda request: httpx.Response(status_code, text="error")

    @staticmethod
    def raw(body: bytes, content_type: str = "application/json") -> Behavior:
        return lambda request: httpx.Response(200, content=body, headers={"content-type": content_type})

    @staticmethod
    def refused() -> Behavior:
        def behavior(request: httpx.Request):
            raise httpx.ConnectError("Connection refused", request=request)

        return behavior

    @staticmethod
    def timed_out() -> Behavior:
        def behavior(request: httpx.Request):
            raise httpx.ReadTimeout("timed out", request=request)

        return behavior

    @staticmethod
    def hang(seconds: float, then: Behavior | None = None) -> Behavior:
        async def behavior(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(seconds)
            return (then or FakeServices.ok())(request)

        return behavior

    @staticmethod
    def gated(event: asyncio.Event, then: Behavior) -> Behavior:
        async def behavior(request: httpx.Request) -> httpx.Response:
            await event.wait()
            return then(request)

        return behavior

    # -- wiring -------------------------------------------------------------

    def route(self, url: str, *behaviors: Behavior) -> None:
        self._routes[url] = list(behaviors)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append(url)
        queue = self._routes.get(url)
        if not queue:
            raise httpx.ConnectError(f"no route for {url}", request=request)
        behavior = queue.pop(0) if len(queue) > 1 else queue[0]
        result = behavior(request)
        if asyncio.iscoroutine(result):
            result = await result
        return result

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)


@pytest.fixture
def fake_services() -> FakeServices:
    return FakeServices()


@pytest.fixture
def endpoints() -> list[ServiceEndpoint]:
    return [
        ServiceEndpoint(key="orderService", name="Order Service", url="http://orders.test:8081/actuator/health"),
        ServiceEndpoint(key="paymentService", name="Payment Service", url="http://payments.test:8082/actuator/health"),
        ServiceEndpoint(
            key="inventoryService", name="Inventory Service", url="http://inventory.test:8083/actuator/health"
        ),
        ServiceEndpoint(
            key="notificationService", name="Notification Service", url="http://notify.test:8084/actuator/health"
        ),
    ]


@pytest.fixture
def test_settings(endpoints) -> Settings:
    """Settings pointing at the fake hosts, with short timings."""
    return Settings(
        order_feed_url="http://orders.test:8081/api/orders",
        order_poll_interval=0.5,
        health_poll_interval=0.5,
        request_timeout=0.2,
        services=endpoints,
    )
