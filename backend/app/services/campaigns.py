"""Campaign funnel rates."""

from typing import Any, Sequence

from app.models.campaign import MarketingCampaign
from app.models.enums import CampaignStatus


def rate(count: int, total: int) -> float:
    """``count`` as a percentage of ``total`` to 1 decimal place."""
    if not total:
        return 0.0
    return round(count / total * 100, 1)


def campaign_rates(campaign: MarketingCampaign) -> dict[str, float]:
    sent = campaign.total_sent or 0
    return {
        "open_rate": rate(campaign.total_opened or 0, sent),
        "click_rate": rate(campaign.total_clicked or 0, sent),
        "conversion_rate": rate(campaign.total_converted or 0, sent),
    }


def campaign_summary(campaigns: Sequence[MarketingCampaign]) -> dict[str, Any]:
    total_sent = sum(c.total_sent or 0 for c in campaigns)
    total_converted = sum(c.total_converted or 0 for c in campaigns)
    return {
        "active_campaigns": sum(1 for c in campaigns if c.status == CampaignStatus.ACTIVE),
        "total_sent": total_sent,
        "total_converted": total_converted,
        "conversion_rate": rate(total_converted, total_sent),
    }
