"""Booking ORM model (columns the workflow engine reads or writes)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from propertyops.infrastructure.persistence.database import Base
from propertyops.infrastructure.persistence.models.mixins import TimestampedModel


class Booking(TimestampedModel, Base):
    """Guest booking of a property. Table: booking."""

    __tablename__ = "booking"

    property_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    owner_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
