"""Enumeration types for the StairProperty domain model."""

from enum import Enum


class UserRole(str, Enum):
    """Role within an organisation."""
    ADMIN = "admin"
    VIEWER = "viewer"


class StaircasingStatus(str, Enum):
    """Status of a staircasing application."""
    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"
    REJECTED = "rejected"


class CampaignStatus(str, Enum):
    """Status of a marketing campaign."""
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class TriggerType(str, Enum):
    """What initiates a campaign."""
    EQUITY_THRESHOLD = "equity_threshold"
    MOVE_IN_ANNIVERSARY = "move_in_anniversary"
    PROPERTY_VALUE_INCREASE = "property_value_increase"
    MANUAL = "manual"


class ProviderType(str, Enum):
    """Kind of third-party service provider."""
    BROKER = "broker"
    SURVEYOR = "surveyor"
    VALUER = "valuer"
    CONVEYANCER = "conveyancer"
    SOLICITOR = "solicitor"


class Sentiment(str, Enum):
    """Sentiment attached to resident feedback."""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class FeedbackCategory(str, Enum):
    """Topic of resident feedback."""
    STAIRCASING_PROCESS = "staircasing_process"
    CUSTOMER_SERVICE = "customer_service"
    PLATFORM_USABILITY = "platform_usability"
    COMMUNICATION = "communication"
    OVERALL_EXPERIENCE = "overall_experience"


class RecommendedAction(str, Enum):
    """Outcome of a staircasing readiness assessment."""
    STAIRCASE_NOW = "staircase_now"
    SAVE_MORE = "save_more"
    WAIT_FOR_VALUE_INCREASE = "wait_for_value_increase"
