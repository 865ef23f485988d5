"""API Routers for the StairProperty CRM."""

from app.routers.auth import router as auth_router
from app.routers.organisations import router as organisations_router
from app.routers.properties import router as properties_router
from app.routers.valuations import router as valuations_router
from app.routers.tenants import router as tenants_router
from app.routers.staircasing import router as staircasing_router
from app.routers.dashboard import router as dashboard_router
from app.routers.campaigns import router as campaigns_router
from app.routers.providers import router as providers_router
from app.routers.feedback import router as feedback_router
from app.routers.insights import router as insights_router

__all__ = [
    "auth_router",
    "organisations_router",
    "properties_router",
    "valuations_router",
    "tenants_router",
    "staircasing_router",
    "dashboard_router",
    "campaigns_router",
    "providers_router",
    "feedback_router",
    "insights_router",
]
