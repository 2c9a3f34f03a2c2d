"""Wires the HTTP client, both pollers and the scheduler together."""

from __future__ import annotations

import logging

import httpx

from bluezone_monitor.config import Settings
from bluezone_monitor.health import ServiceHealthAggregator
from bluezone_monitor.http_client import create_client
from bluezone_monitor.orders import OrderFeedPoller
from bluezone_monitor.scheduler import PollingScheduler

logger = logging.getLogger(__name__)


class DashboardMonitor:
    """Owns the order feed poller and the service health aggregator.

    The two pollers share an HTTP client and nothing else. Readers go
    through ``orders`` / ``health``; nothing here blocks on polling.
    """

    def __init__(self, config: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self._client = create_client(config.request_timeout, transport=transport)
        self.orders = OrderFeedPoller(config.order_feed_url, self._client, config.request_timeout)
        self.health = ServiceHealthAggregator(
            config.services,
            self._client,
            config.request_timeout,
            down_indicators=config.down_indicators,
        )
        self.scheduler = PollingScheduler(max_overlapping_polls=config.max_overlapping_polls)
        self.scheduler.register(self.orders, config.order_poll_interval)
        self.scheduler.register(self.health, config.health_poll_interval)

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        """Start polling; the first cycle of each poller runs immediately."""
        logger.info(
            "Starting dashboard monitor: %s + %d services",
            self.config.order_feed_url,
            len(self.config.services),
        )
        self.scheduler.start()

    async def stop(self) -> None:
        """Cancel both timers and drop in-flight fetches."""
        await self.scheduler.stop()
        if not self._client.is_closed:
            await self._client.aclose()
        logger.info("Dashboard monitor stopped")
