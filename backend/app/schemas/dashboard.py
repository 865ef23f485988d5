"""Dashboard schemas."""

from app.schemas.base import BaseSchema


class DashboardStats(BaseSchema):
    """Headline counts for the current organisation."""

    total_properties: int = 0
    total_tenants: int = 0
    pending_applications: int = 0
