"""Net promoter and satisfaction metrics."""

from typing import Any, Sequence

from app.models.enums import Sentiment
from app.models.feedback import ResidentFeedback

PROMOTER_MIN = 9
PASSIVE_MIN = 7
UNCATEGORISED = "other"


def _average(values: Sequence[float]) -> float:
    return round(sum(values) / len(values), 1) if values else 0.0


def feedback_metrics(feedback: Sequence[ResidentFeedback]) -> dict[str, Any]:
    """Summarise survey responses.

    Missing NPS or satisfaction scores count as 0, so a response without an
    NPS score is a detractor.
    """
    total = len(feedback)
    nps_scores = [f.nps_score or 0 for f in feedback]
    satisfaction = [f.satisfaction_score or 0 for f in feedback]

    promoters = sum(1 for s in nps_scores if s >= PROMOTER_MIN)
    passives = sum(1 for s in nps_scores if PASSIVE_MIN <= s < PROMOTER_MIN)
    detractors = total - promoters - passives

    by_category: dict[str, list[int]] = {}
    for f in feedback:
        by_category.setdefault(f.category or UNCATEGORISED, []).append(f.satisfaction_score or 0)

    return {
        "total_responses": total,
        "average_nps": _average(nps_scores),
        "average_satisfaction": _average(satisfaction),
        "promoters": promoters,
        "passives": passives,
        "detractors": detractors,
        "nps": round((promoters - detractors) / total * 100, 1) if total else 0.0,
        "sentiment": {
            s.value: sum(1 for f in feedback if f.sentiment == s) for s in Sentiment
        },
        "categories": {
            category: {"count": len(scores), "average_satisfaction": _average(scores)}
            for category, scores in by_category.items()
        },
    }
