"""Service health read routes."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(prefix="/api/dashboard", tags=["services"])


@router.get("/services")
async def service_statuses(request: Request):
    """Latest status of every configured service, in configuration order."""
    aggregator = request.app.state.monitor.health
    snapshot = aggregator.snapshot
    return {
        "cycle": snapshot.cycle,
        "checked_at": snapshot.checked_at.isoformat() if snapshot.checked_at else None,
        "overall": snapshot.overall,
        "services": [
            {
                "key": endpoint.key,
                "name": endpoint.name,
                "url": endpoint.url,
                "port": endpoint.port,
                "status": snapshot.statuses[endpoint.key].value,
            }
            for endpoint in aggregator.endpoints
        ],
    }


@router.get("/jobs")
async def polling_jobs(request: Request):
    """Registered polling jobs and their next run."""
    return {"jobs": request.app.state.monitor.scheduler.jobs()}
