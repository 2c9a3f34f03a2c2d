"""Blue Zone monitor configuration."""

from __future__ import annotations

import logging

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from bluezone_monitor.models import ServiceEndpoint

logger = logging.getLogger(__name__)

DEFAULT_SERVICES: list[ServiceEndpoint] = [
    ServiceEndpoint(key="orderService", name="Order Service", url="http://localhost:8081/actuator/health"),
    ServiceEndpoint(key="paymentService", name="Payment Service", url="http://localhost:8082/actuator/health"),
    ServiceEndpoint(key="inventoryService", name="Inventory Service", url="http://localhost:8083/actuator/health"),
    ServiceEndpoint(
        key="notificationService", name="Notification Service", url="http://localhost:8084/actuator/health"
    ),
]


class Settings(BaseSettings):
    """Environment-driven settings, fixed at process start."""

    order_feed_url: str = "http://localhost:8081/api/orders"
    order_poll_interval: float = Field(default=5.0, gt=0)  # seconds
    health_poll_interval: float = Field(default=10.0, gt=0)
    # Hard deadline for every fetch and probe; must be shorter than both intervals.
    request_timeout: float = Field(default=3.0, gt=0)
    max_overlapping_polls: int = Field(default=2, ge=1)

    services: list[ServiceEndpoint] = Field(default_factory=lambda: list(DEFAULT_SERVICES), min_length=1)
    # Spring actuator "status" values that mark a 2xx health response as unhealthy;
    # empty keeps every 2xx healthy. Set e.g. ["DOWN", "OUT_OF_SERVICE"] to opt in.
    down_indicators: list[str] = []

    cors_origins: list[str] = ["http://localhost:3000"]
    host: str = "0.0.0.0"
    port: int = 8090
    log_level: str = "INFO"

    model_config = {"env_prefix": "BLUEZONE_", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_consistency(self) -> Settings:
        shortest = min(self.order_poll_interval, self.health_poll_interval)
        if self.request_timeout >= shortest:
            raise ValueError(
                f"request_timeout ({self.request_timeout}s) must be shorter than "
                f"the shortest poll interval ({shortest}s)"
            )
        keys = [service.key for service in self.services]
        duplicates = sorted({key for key in keys if keys.count(key) > 1})
        if duplicates:
            raise ValueError(f"duplicate service keys: {', '.join(duplicates)}")
        return self


settings = Settings()
logger.info(
    "Monitor config: order_feed=%s, services=%d, intervals=%.1fs/%.1fs, timeout=%.1fs",
    settings.order_feed_url,
    len(settings.services),
    settings.order_poll_interval,
    settings.health_poll_interval,
    settings.request_timeout,
)
