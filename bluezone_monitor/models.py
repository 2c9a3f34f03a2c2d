"""Order, endpoint and snapshot models for the dashboard core.

Wire records (orders, endpoint configuration) are pydantic models so they
can be validated straight from JSON. Snapshots are frozen dataclasses: they
are built by the pollers, never parsed, and must not change once published.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer


class OrderStatus(str, Enum):
    """Order lifecycle states as reported by the order service."""

    PENDING = "PENDING"
    INVENTORY_CHECKED = "INVENTORY_CHECKED"
    PAYMENT_PROCESSED = "PAYMENT_PROCESSED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class HealthStatus(str, Enum):
    """Per-endpoint health as seen by the last completed probe."""

    HEALTHY = "healthy"  # reachable, 2xx
    UNHEALTHY = "unhealthy"  # reachable, reports failure
    DOWN = "down"  # no response at all
    UNKNOWN = "unknown"  # no cycle has completed yet


class Order(BaseModel):
    """One order record from ``GET /api/orders``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    customer_id: str = Field(alias="customerId")
    # Lifecycle status is resolved upstream; unknown names pass through as-is.
    status: OrderStatus | str = Field(union_mode="left_to_right")
    total_amount: Decimal = Field(alias="totalAmount", ge=0)
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @field_serializer("total_amount")
    def _amount_as_number(self, value: Decimal) -> float:
        return float(value)


ORDER_LIST = TypeAdapter(list[Order])


class ServiceEndpoint(BaseModel):
    """Static configuration for one health-probed service."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    name: str
    url: str

    @property
    def port(self) -> int | None:
        return urlsplit(self.url).port


@dataclass(frozen=True)
class OrderSnapshot:
    """The order list published by one successful feed cycle."""

    orders: tuple[Order, ...] = ()
    cycle: int = 0
    fetched_at: datetime | None = None

    def count_by_status(self) -> dict[str, int]:
        counts = Counter(_status_name(order.status) for order in self.orders)
        return dict(counts)

    def filter(
        self,
        status: str | None = None,
        customer_id: str | None = None,
    ) -> list[Order]:
        """Return the orders matching every given filter, in feed order."""
        selected = []
        for order in self.orders:
            if status is not None and _status_name(order.status) != status:
                continue
            if customer_id is not None and order.customer_id != customer_id:
                continue
            selected.append(order)
        return selected


@dataclass(frozen=True)
class HealthSnapshot:
    """Endpoint key -> status for every configured endpoint, from one cycle."""

    statuses: Mapping[str, HealthStatus] = field(default_factory=dict)
    cycle: int = 0
    checked_at: datetime | None = None

    def __post_init__(self) -> None:
        # Read-only view over a private copy; callers can't mutate a published map.
        object.__setattr__(self, "statuses", MappingProxyType(dict(self.statuses)))

    @classmethod
    def initial(cls, keys: Iterable[str]) -> HealthSnapshot:
        return cls(statuses={key: HealthStatus.UNKNOWN for key in keys})

    @property
    def overall(self) -> str:
        """Roll the map up to "unknown", "healthy", "down" or "degraded"."""
        values = set(self.statuses.values())
        if not values or HealthStatus.UNKNOWN in values:
            return "unknown"
        if values == {HealthStatus.HEALTHY}:
            return "healthy"
        if values == {HealthStatus.DOWN}:
            return "down"
        return "degraded"


def _status_name(status: OrderStatus | str) -> str:
    return status.value if isinstance(status, OrderStatus) else status
