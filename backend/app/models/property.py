"""Property and PropertyValuation models."""

import uuid
from datetime import datetime, date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, DateTime, Date, ForeignKey, Text, Float, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.organisation import Organisation
    from app.models.tenant import Tenant


class Property(Base):
    """A shared-ownership home managed by an organisation."""

    __tablename__ = "properties"

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

    address: Mapped[str] = mapped_column(String(255), nullable=False)
    postcode: Mapped[str] = mapped_column(String(20), nullable=False)
    # Full market value at acquisition (GBP)
    property_value: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    organisation: Mapped["Organisation"] = relationship("Organisation", back_populates="properties")
    valuations: Mapped[list["PropertyValuation"]] = relationship(
        "PropertyValuation", back_populates="property", cascade="all, delete-orphan"
    )
    tenants: Mapped[list["Tenant"]] = relationship(
        "Tenant", back_populates="property", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("property_value > 0", name="ck_property_value_positive"),
    )


class PropertyValuation(Base):
    """A point-in-time valuation (typically HPI-indexed, monthly)."""

    __tablename__ = "property_valuations"

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

    valuation_date: Mapped[date] = mapped_column(Date, nullable=False)
    estimated_value: Mapped[float] = mapped_column(Float, nullable=False)
    # Change vs. the previous valuation, in percent
    value_change_percent: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    hpi_index: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    property: Mapped["Property"] = relationship("Property", back_populates="valuations")
