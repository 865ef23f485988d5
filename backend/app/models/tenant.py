"""Tenant (shared-ownership resident) model."""

import uuid
from datetime import datetime, date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, Date, ForeignKey, Float, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.property import Property
    from app.models.staircasing import StaircasingApplication


class Tenant(Base):
    """A resident who owns a share of a property and rents the remainder."""

    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    organisation_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organisations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    move_in_date: Mapped[date] = mapped_column(Date, nullable=False)

    current_equity_percentage: Mapped[float] = mapped_column(Float, default=25.0, nullable=False)

    # Monthly outgoings (GBP)
    monthly_rent: Mapped[float] = mapped_column(Float, nullable=False)
    monthly_mortgage: Mapped[float] = mapped_column(Float, nullable=False)
    monthly_service_charge: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    property: Mapped["Property"] = relationship("Property", back_populates="tenants")
    applications: Mapped[list["StaircasingApplication"]] = relationship(
        "StaircasingApplication", back_populates="tenant", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            "current_equity_percentage >= 0 AND current_equity_percentage <= 100",
            name="ck_tenant_equity_range",
        ),
    )
