"""Health probes for the configured services and their aggregation.

Classification:
- no response at all (refused, DNS, timeout, any transport error) -> down
- response with a non-2xx status -> unhealthy
- 2xx whose actuator body reports a configured down indicator (none by
  default), or whose JSON body can't be parsed -> unhealthy
- any other 2xx -> healthy
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Iterable, Sequence

import httpx

from bluezone_monitor.http_client import fetch
from bluezone_monitor.models import HealthSnapshot, HealthStatus, ServiceEndpoint
from bluezone_monitor.snapshot import SnapshotCell

logger = logging.getLogger(__name__)


def classify_response(response: httpx.Response, down_indicators: Iterable[str] = ()) -> HealthStatus:
    """Map a completed probe response to healthy or unhealthy."""
    if not response.is_success:
        return HealthStatus.UNHEALTHY
    if not response.content:
        return HealthStatus.HEALTHY

    content_type = response.headers.get("content-type", "")
    if "json" not in content_type:
        return HealthStatus.HEALTHY
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Malformed JSON health body (HTTP %d)", response.status_code)
        return HealthStatus.UNHEALTHY

    if isinstance(body, dict) and isinstance(body.get("status"), str):
        if body["status"].upper() in {d.upper() for d in down_indicators}:
            return HealthStatus.UNHEALTHY
    return HealthStatus.HEALTHY


class ServiceHealthAggregator:
    """Probes every configured endpoint concurrently and publishes one map.

    The published map always has exactly one entry per configured key. It
    starts as all-``unknown`` and is only replaced once every probe of a
    cycle has resolved.
    """

    name = "service_health"

    def __init__(
        self,
        endpoints: Sequence[ServiceEndpoint],
        client: httpx.AsyncClient,
        timeout: float,
        down_indicators: Iterable[str] = (),
    ) -> None:
        self.endpoints = tuple(endpoints)
        self.timeout = timeout
        self.down_indicators = tuple(down_indicators)
        self._client = client
        self._cell: SnapshotCell[HealthSnapshot] = SnapshotCell(
            self.name, HealthSnapshot.initial(e.key for e in self.endpoints)
        )

    @property
    def snapshot(self) -> HealthSnapshot:
        return self._cell.get()

    @property
    def statuses(self) -> dict[str, HealthStatus]:
        """Copy of the latest endpoint key -> status map."""
        return dict(self._cell.get().statuses)

    async def probe(self, endpoint: ServiceEndpoint) -> HealthStatus:
        """Probe one endpoint. Never raises."""
        try:
            response = await fetch(self._client, endpoint.url, self.timeout)
        except Exception as exc:
            logger.warning("Probe %s (%s) got no response: %s: %s", endpoint.key, endpoint.url, type(exc).__name__, exc)
            return HealthStatus.DOWN

        try:
            status = classify_response(response, self.down_indicators)
        except Exception:
            logger.exception("Probe %s: could not classify response", endpoint.key)
            return HealthStatus.UNHEALTHY
        if status is HealthStatus.UNHEALTHY:
            logger.warning("Probe %s answered HTTP %d, marking unhealthy", endpoint.key, response.status_code)
        return status

    async def poll(self) -> bool:
        """Run one cycle. Returns True if its map was published."""
        cycle = self._cell.next_cycle()
        results = await asyncio.gather(
            *(self.probe(endpoint) for endpoint in self.endpoints),
            return_exceptions=True,
        )

        statuses: dict[str, HealthStatus] = {}
        for endpoint, result in zip(self.endpoints, results):
            if isinstance(result, HealthStatus):
                statuses[endpoint.key] = result
            else:
                # probe() contains its own errors; anything here is a bug, not a service state
                logger.error("Probe %s raised %r, marking down", endpoint.key, result)
                statuses[endpoint.key] = HealthStatus.DOWN

        snapshot = HealthSnapshot(statuses=statuses, cycle=cycle, checked_at=datetime.now(timezone.utc))
        published = self._cell.publish(cycle, snapshot)
        if published:
            logger.info("Service health cycle %d: %s", cycle, {k: v.value for k, v in statuses.items()})
        return published
