"""Staircasing application workflow."""

import logging
from datetime import datetime
from typing import Optional

from app.models.enums import StaircasingStatus
from app.models.staircasing import StaircasingApplication
from app.models.tenant import Tenant

logger = logging.getLogger(__name__)

MAX_EQUITY = 100.0

ALLOWED_TRANSITIONS: dict[StaircasingStatus, set[StaircasingStatus]] = {
    StaircasingStatus.PENDING: {StaircasingStatus.APPROVED, StaircasingStatus.REJECTED},
    StaircasingStatus.APPROVED: {StaircasingStatus.COMPLETED, StaircasingStatus.REJECTED},
    StaircasingStatus.COMPLETED: set(),
    StaircasingStatus.REJECTED: set(),
}

DELETABLE_STATUSES = {StaircasingStatus.PENDING, StaircasingStatus.REJECTED}

OPEN_STATUSES = {StaircasingStatus.PENDING, StaircasingStatus.APPROVED}


class InvalidTransition(ValueError):
    """Raised when an application cannot move to the requested status."""


def estimate_cost(equity_percentage: float, property_value: float) -> float:
    """Cost of buying ``equity_percentage`` of a property at its current value."""
    return round(equity_percentage / 100 * property_value, 2)


def check_equity_headroom(current_equity: float, requested: float) -> None:
    """Reject requests that would take a tenant beyond full ownership."""
    if current_equity + requested > MAX_EQUITY:
        raise ValueError(
            f"Requested {requested:g}% exceeds remaining equity of "
            f"{MAX_EQUITY - current_equity:g}%"
        )


def apply_status_change(
    application: StaircasingApplication,
    tenant: Tenant,
    new_status: StaircasingStatus,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> None:
    """Move an application to ``new_status`` and apply its side effects.

    Completing an application transfers the requested equity to the tenant.
    """
    allowed = ALLOWED_TRANSITIONS[application.status]
    if new_status not in allowed:
        raise InvalidTransition(
            f"Cannot change status from {application.status.value} to {new_status.value}"
        )

    now = now or datetime.utcnow()
    if new_status == StaircasingStatus.APPROVED:
        application.approved_date = now
    elif new_status == StaircasingStatus.COMPLETED:
        application.completed_date = now
        tenant.current_equity_percentage = min(
            MAX_EQUITY,
            tenant.current_equity_percentage + application.equity_percentage_requested,
        )

    logger.info(
        "Staircasing application %s: %s -> %s",
        application.id,
        application.status.value,
        new_status.value,
    )
    application.status = new_status
    if notes is not None:
        application.notes = notes
