"""
Studizen Backend - FastAPI Application

Main entry point for the application.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studizen.api.v1 import router as api_v1_router
from studizen.core.config import settings
from studizen.core.database import close_db
from studizen.core.exceptions import StudizenError, studizen_error_handler
from studizen.core.http_client import close_http_client


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    configure_logging()
    print("🚀 Starting Studizen Backend...")
    if settings.is_development and not settings.RESEND_API_KEY:
        print("📧 RESEND_API_KEY not set: verification codes will be printed to the console")
    yield
    # Shutdown
    print("🛑 Shutting down Studizen Backend...")
    await close_http_client()
    await close_db()


# Create FastAPI application
app = FastAPI(
    title="Studizen Backend",
    description="Student planner backend with class schedules, tasks, premium plans and email OTP verification.",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Localized domain errors
app.add_exception_handler(StudizenError, studizen_error_handler)

# Include API routers
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """
    Health check endpoint.

    Returns:
        dict: Health status and environment info.
    """
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "version": "0.1.0",
    }


@app.get("/", tags=["Root"])
async def root() -> dict:
    return {
        "message": "Welcome to Studizen Backend API",
        "docs": "/docs",
        "health": "/health",
    }
