"""Order feed poller: republishes the full order list every cycle."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx
from pydantic import ValidationError

from bluezone_monitor.errors import MalformedPayloadError, UnexpectedStatusError
from bluezone_monitor.http_client import fetch
from bluezone_monitor.models import ORDER_LIST, Order, OrderSnapshot
from bluezone_monitor.snapshot import SnapshotCell

logger = logging.getLogger(__name__)


class OrderFeedPoller:
    """Keeps the freshest known order list from a single order endpoint.

    A failed cycle (transport error, timeout, non-2xx, bad body) leaves the
    previous snapshot in place. Nothing is retried before the next cycle.
    """

    name = "order_feed"

    def __init__(self, url: str, client: httpx.AsyncClient, timeout: float) -> None:
        self.url = url
        self.timeout = timeout
        self._client = client
        self._cell: SnapshotCell[OrderSnapshot] = SnapshotCell(self.name, OrderSnapshot())
        # failed cycles newer than the published snapshot
        self._failed_cycles: set[int] = set()

    @property
    def snapshot(self) -> OrderSnapshot:
        """Latest published snapshot; never blocks on an in-flight cycle."""
        return self._cell.get()

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._cell.get().orders

    @property
    def consecutive_failures(self) -> int:
        """Failed cycles newer than the published snapshot."""
        return len(self._failed_cycles)

    async def fetch_orders(self) -> tuple[Order, ...]:
        """One request against the feed; raises on any kind of failure."""
        response = await fetch(self._client, self.url, self.timeout)
        if not response.is_success:
            raise UnexpectedStatusError(self.url, response.status_code)
        try:
            return tuple(ORDER_LIST.validate_json(response.content))
        except ValidationError as exc:
            raise MalformedPayloadError(self.url, f"{exc.error_count()} validation error(s)") from exc

    async def poll(self) -> bool:
        """Run one cycle. Returns True if a new snapshot was published."""
        cycle = self._cell.next_cycle()
        try:
            orders = await self.fetch_orders()
        except Exception as exc:
            if cycle > self._cell.cycle:
                self._failed_cycles.add(cycle)
            logger.warning(
                "Order feed cycle %d failed (%d in a row), keeping previous snapshot: %s: %s",
                cycle,
                self.consecutive_failures,
                type(exc).__name__,
                exc,
            )
            return False

        snapshot = OrderSnapshot(orders=orders, cycle=cycle, fetched_at=datetime.now(timezone.utc))
        published = self._cell.publish(cycle, snapshot)
        if published:
            self._failed_cycles = {c for c in self._failed_cycles if c > cycle}
            logger.debug("Order feed cycle %d published %d orders", cycle, len(orders))
        return published
