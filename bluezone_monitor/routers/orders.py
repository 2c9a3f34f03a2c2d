"""Order snapshot read routes."""

from __future__ import annotations

from fastapi import APIRouter, Query, Request

router = APIRouter(prefix="/api/dashboard", tags=["orders"])


@router.get("/orders")
async def list_orders(
    request: Request,
    status: str | None = Query(default=None),
    customer_id: str | None = Query(default=None),
):
    """Latest order list, optionally filtered by status and customer."""
    poller = request.app.state.monitor.orders
    snapshot = poller.snapshot
    orders = snapshot.filter(status=status, customer_id=customer_id)
    return {
        "cycle": snapshot.cycle,
        "fetched_at": snapshot.fetched_at.isoformat() if snapshot.fetched_at else None,
        "consecutive_failures": poller.consecutive_failures,
        "count": len(orders),
        "by_status": snapshot.count_by_status(),
        "orders": [order.model_dump(mode="json", by_alias=True) for order in orders],
    }
