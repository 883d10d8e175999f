"""
Main HTTP server for the Laptop Tracker.

Serves the device aggregation API, the health check and the dashboard.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from laptop_tracker import __version__
from laptop_tracker.core.config import AppConfig, get_config
from laptop_tracker.inventory.service import DeviceInventoryService, build_service

from .dashboard import STATIC_DIR, DashboardState
from .dashboard import router as dashboard_router
from .devices_api import router as devices_router

logger = logging.getLogger(__name__)


def _device_feeds(service: DeviceInventoryService) -> dict:
    return {
        "mac": lambda: {"devices": [d.model_dump() for d in service.mac_devices()]},
        "windows": lambda: {"devices": [d.model_dump() for d in service.windows_devices()]},
    }


def create_app(
    config: Optional[AppConfig] = None,
    service: Optional[DeviceInventoryService] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Application configuration (default: global config)
        service: Inventory service (default: built from config)

    Returns:
        FastAPI app
    """
    config = config or get_config()
    service = service or build_service(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        logger.info("Closing vendor clients")
        app.state.service.close()

    app = FastAPI(
        title="Laptop Tracker API",
        description="Kandji and Intune device age tracking",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.service = service
    app.state.dashboard = DashboardState(_device_feeds(service))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(devices_router)
    app.include_router(dashboard_router)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "kandji_url": request.app.state.config.kandji.devices_url,
        }

    return app


def _mask(token: str) -> str:
    return f"{token[:8]}..." if token else "(not set)"


def main():
    """Main entry point for HTTP server."""
    config = get_config()

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info("=" * 60)
    logger.info("Laptop Tracker - API Server")
    logger.info("=" * 60)
    logger.info(f"Host: {config.api_host}")
    logger.info(f"Port: {config.api_port}")
    logger.info(f"Proxying requests to: {config.kandji.devices_url}")
    logger.info(f"Using token: {_mask(config.kandji.api_token)}")
    logger.info(f"Intune integration: {'enabled' if config.intune.integration_enabled else 'disabled'}")
    logger.info(f"Teams notifications: {'enabled' if config.teams.active else 'disabled'}")
    logger.info("=" * 60)
    logger.info("Available endpoints:")
    logger.info("   GET /api/devices - Fetch devices from Kandji")
    logger.info("   GET /api/windows-devices - Fetch Windows devices from Intune")
    logger.info("   GET /health - Health check")
    logger.info(f"Dashboard: http://{config.api_host}:{config.api_port}/")
    logger.info("=" * 60)

    uvicorn.run(
        create_app(config),
        host=config.api_host,
        port=config.api_port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
