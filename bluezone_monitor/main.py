"""Blue Zone monitor backend: FastAPI read surface over the pollers."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bluezone_monitor import __version__
from bluezone_monitor.config import settings
from bluezone_monitor.monitor import DashboardMonitor
from bluezone_monitor.routers import orders, services

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


def create_app(monitor: DashboardMonitor | None = None, start_polling: bool = True) -> FastAPI:
    """Build the app around ``monitor`` (a fresh one from settings by default)."""
    monitor = monitor or DashboardMonitor(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run the pollers for the lifetime of the app."""
        if start_polling:
            monitor.start()
        yield
        if start_polling:
            await monitor.stop()

    app = FastAPI(
        title="Blue Zone Monitor",
        description="Order pipeline and service health dashboard backend",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.monitor = monitor

    app.add_middleware(
        CORSMiddleware,
        allow_origins=monitor.config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(orders.router)
    app.include_router(services.router)

    @app.get("/")
    async def root():
        return {"service": "bluezone-monitor", "version": __version__}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
