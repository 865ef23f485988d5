"""StairProperty CRM - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings
from app.core.database import engine
from app.core.env_validation import validate_environment
from app.core.logging_config import configure_logging
from app.routers import (
    auth_router,
    organisations_router,
    properties_router,
    valuations_router,
    tenants_router,
    staircasing_router,
    dashboard_router,
    campaigns_router,
    providers_router,
    feedback_router,
    insights_router,
)

settings = get_settings()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    configure_logging(settings.log_level)
    # Hard-fails (exit 1) if required configuration is missing
    validate_environment()
    logger.info("CORS configured with origins: %s", settings.origins)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Shared-ownership portfolio CRM for housing associations: properties, tenants, staircasing, campaigns and resident feedback.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# In production, wildcard (*) is blocked by env_validation.py
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API v1 routers
app.include_router(auth_router, prefix=settings.api_v1_prefix)
app.include_router(organisations_router, prefix=settings.api_v1_prefix)
app.include_router(properties_router, prefix=settings.api_v1_prefix)
app.include_router(valuations_router, prefix=settings.api_v1_prefix)
app.include_router(tenants_router, prefix=settings.api_v1_prefix)
app.include_router(staircasing_router, prefix=settings.api_v1_prefix)
app.include_router(dashboard_router, prefix=settings.api_v1_prefix)
app.include_router(campaigns_router, prefix=settings.api_v1_prefix)
app.include_router(providers_router, prefix=settings.api_v1_prefix)
app.include_router(feedback_router, prefix=settings.api_v1_prefix)
app.include_router(insights_router, prefix=settings.api_v1_prefix)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs" if settings.debug else "Disabled in production",
    }
