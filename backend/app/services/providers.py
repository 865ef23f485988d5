"""Service provider directory ordering and totals."""

from typing import Any, Sequence

from app.models.provider import ServiceProvider


def sort_providers(providers: Sequence[ServiceProvider]) -> list[ServiceProvider]:
    """Preferred providers first, then best rated."""
    return sorted(
        providers,
        key=lambda p: (not p.is_preferred, -(p.average_rating or 0.0), p.company_name),
    )


def group_by_type(providers: Sequence[ServiceProvider]) -> dict[str, list[ServiceProvider]]:
    grouped: dict[str, list[ServiceProvider]] = {}
    for provider in providers:
        grouped.setdefault(provider.provider_type.value, []).append(provider)
    return grouped


def provider_summary(providers: Sequence[ServiceProvider]) -> dict[str, Any]:
    total = len(providers)
    # Unrated providers count as zero
    ratings = sum(p.average_rating or 0.0 for p in providers)
    return {
        "total": total,
        "preferred": sum(1 for p in providers if p.is_preferred),
        "average_rating": round(ratings / total, 1) if total else 0.0,
        "total_referrals": sum(p.total_referrals or 0 for p in providers),
    }
