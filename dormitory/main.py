"""Dormitory billing FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from dormitory.api.errors import register_error_handlers
from dormitory.api.routes import analytics, attendance, bills, occupants, payments, periods
from dormitory.config import settings
from dormitory.models import Base
from dormitory.services import engine
from dormitory.services.logging import setup_server_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    load_dotenv()
    setup_server_logging()
    # Startup: tables are created only if missing; migrations live in alembic
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized")
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title=settings.api_title,
    description="Dormitory administration: shared electricity bills, attendance and payments",
    version=settings.api_version,
    lifespan=lifespan,
)

register_error_handlers(app)

# Include routers
app.include_router(occupants.router)
app.include_router(periods.router)
app.include_router(bills.router)
app.include_router(payments.router)
app.include_router(attendance.router)
app.include_router(analytics.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    logger.debug("Health check called")
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
