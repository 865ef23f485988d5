"""Valuation summaries derived from a property's valuation history."""

from datetime import date, datetime
from typing import Any, Optional, Sequence

from app.models.property import Property, PropertyValuation

CHART_POINTS = 12


def change_percent(previous: float, current: float) -> float:
    """Percentage change between two values, rounded to 2 places."""
    if not previous:
        return 0.0
    return round((current - previous) / previous * 100, 2)


def sort_history(valuations: Sequence[PropertyValuation]) -> list[PropertyValuation]:
    """Valuations ordered oldest first."""
    return sorted(valuations, key=lambda v: (v.valuation_date, v.created_at or datetime.min))


def summarise_valuations(
    property_value: float,
    valuations: Sequence[PropertyValuation],
) -> dict[str, Any]:
    """Headline figures for a property.

    ``current_value`` falls back to the recorded property value when no
    valuation exists, and ``yearly_change`` compares the oldest and latest
    valuations.
    """
    history = sort_history(valuations)
    if not history:
        return {
            "original_value": property_value,
            "current_value": property_value,
            "valuation_date": None,
            "monthly_change": 0.0,
            "yearly_change": 0.0,
        }

    oldest, latest = history[0], history[-1]
    return {
        "original_value": property_value,
        "current_value": latest.estimated_value,
        "valuation_date": latest.valuation_date,
        "monthly_change": latest.value_change_percent or 0.0,
        "yearly_change": change_percent(oldest.estimated_value, latest.estimated_value),
    }


def chart_history(valuations: Sequence[PropertyValuation]) -> list[PropertyValuation]:
    """The most recent valuations, oldest first, for charting."""
    return sort_history(valuations)[-CHART_POINTS:]


def previous_valuation(
    valuations: Sequence[PropertyValuation],
    on: date,
) -> Optional[PropertyValuation]:
    """Latest valuation dated strictly before ``on``."""
    earlier = [v for v in sort_history(valuations) if v.valuation_date < on]
    return earlier[-1] if earlier else None


def portfolio_totals(properties: Sequence[Property], summaries: Sequence[dict[str, Any]]) -> dict[str, Any]:
    """Count, value and growth totals across a portfolio."""
    count = len(properties)
    total_value = sum(s["current_value"] for s in summaries)
    return {
        "total_count": count,
        "total_value": total_value,
        "average_value": round(total_value / count, 2) if count else 0.0,
        "average_yearly_change": (
            round(sum(s["yearly_change"] for s in summaries) / count, 2) if count else 0.0
        ),
    }
