"""SQLAlchemy models for the StairProperty CRM."""

from app.models.user import User
from app.models.organisation import Organisation, UserOrganisation
from app.models.property import Property, PropertyValuation
from app.models.tenant import Tenant
from app.models.staircasing import StaircasingApplication
from app.models.campaign import MarketingCampaign, CampaignTrigger
from app.models.provider import ServiceProvider
from app.models.feedback import ResidentFeedback
from app.models.insight import FinancialInsight

__all__ = [
    "User",
    "Organisation",
    "UserOrganisation",
    "Property",
    "PropertyValuation",
    "Tenant",
    "StaircasingApplication",
    "MarketingCampaign",
    "CampaignTrigger",
    "ServiceProvider",
    "ResidentFeedback",
    "FinancialInsight",
]
