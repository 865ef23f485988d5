"""Domain calculations for the StairProperty CRM."""

from app.services.insights import InsightService, calculate_readiness
from app.services.staircasing import InvalidTransition, apply_status_change

__all__ = [
    "InsightService",
    "calculate_readiness",
    "InvalidTransition",
    "apply_status_change",
]
