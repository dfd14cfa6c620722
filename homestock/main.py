"""FastAPI application entry point."""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import OperationalError

from homestock.api import (
    activity,
    auth,
    consumables,
    households,
    locations,
    non_consumables,
    onboarding,
    shopping,
    websocket,
)
from homestock.config import get_settings
from homestock.exceptions import InventoryError, TransientInfrastructureError
from homestock.services.realtime import RealtimeService

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("homestock")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the process-wide realtime fan-out for the app's lifetime."""
    app.state.realtime = RealtimeService()
    yield
    await app.state.realtime.cleanup()


app = FastAPI(
    title="HomeStock API",
    description="Shared household inventory with realtime updates",
    version="0.1.0",
    lifespan=lifespan,
)

if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(InventoryError)
async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(OperationalError)
async def database_unavailable_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error(f"Database unavailable during {request.method} {request.url.path}: {exc}")
    error = TransientInfrastructureError()
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


app.include_router(auth.router)
app.include_router(households.router)
app.include_router(locations.router)
app.include_router(consumables.router)
app.include_router(non_consumables.router)
app.include_router(shopping.router)
app.include_router(activity.router)
app.include_router(onboarding.router)
app.include_router(websocket.router)

if settings.photo_base_url.startswith("/"):
    app.mount(
        settings.photo_base_url,
        StaticFiles(directory=settings.photo_storage_dir, check_dir=False),
        name="photos",
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
