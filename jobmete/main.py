"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from jobmete.core.config import settings
from jobmete.errors import AppError, app_error_handler, unhandled_error_handler, validation_error_handler
from jobmete.routers import auth, companies, events, health, trends
from jobmete.services.ai_analysis_service import get_analysis_client

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    On startup the Gemini client is built once, so a missing API key stops
    the server before it accepts requests.
    """
    configure_logging()
    logger.info("Starting %s...", settings.APP_NAME)
    get_analysis_client()

    yield

    logger.info("Shutting down %s...", settings.APP_NAME)


# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Backend API for job-hunting company analysis and trend summaries",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)


# Include routers (API endpoints)
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(companies.router)
app.include_router(events.router)
app.include_router(trends.router)
