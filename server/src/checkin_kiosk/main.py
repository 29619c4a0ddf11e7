#!/usr/bin/env python3
"""Check-in Kiosk - attendee lookup and check-in API"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

from checkin_kiosk.config import config
from checkin_kiosk.logging_config import get_logger, setup_logging
from checkin_kiosk.models.database import engine
from checkin_kiosk.routers.checkin import router as checkin_router
from checkin_kiosk.routers.health import health

# Configure logging (INFO -> stdout, WARNING/ERROR -> stderr)
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the attendees table on startup when serving from SQL"""
    logger.info(f"Starting Check-in Kiosk (store: {config['attendee_store']})")
    if config["attendee_store"] == "sql":
        SQLModel.metadata.create_all(engine)
    yield
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Check-in Kiosk",
    description="Attendee lookup by phone number and one-way check-in for event kiosks",
    version="1.0.0",
    lifespan=lifespan,
)

allowed_origins = [
    origin.strip() for origin in config["allowed_origins"].split(",") if origin.strip()
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health)
app.include_router(checkin_router)


if __name__ == "__main__":
    port = config.get("port")
    logger.info(f"Starting Check-in Kiosk on 0.0.0.0:{port}")
    logger.info("Kiosk API available at /api")
    logger.info("Health check available at /health")

    try:
        uvicorn.run(
            app, host="0.0.0.0", port=port, log_level=config["log_level"].lower()
        )
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        raise
