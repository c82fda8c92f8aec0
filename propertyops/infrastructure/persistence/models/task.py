"""Task ORM model. Operational task, optionally created by a workflow rule."""

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from propertyops.infrastructure.persistence.database import Base
from propertyops.infrastructure.persistence.models.mixins import TimestampedModel
from propertyops.shared.enums import TaskStatus, TaskType


class Task(TimestampedModel, Base):
    """Task for a property (cleaning, maintenance, ...). Table: task."""

    __tablename__ = "task"

    property_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    booking_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("booking.id", ondelete="SET NULL"), nullable=True, index=True
    )
    type: Mapped[str] = mapped_column(
        String(32), nullable=False, default=TaskType.OTHER.value
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=TaskStatus.PENDING.value,
        server_default=TaskStatus.PENDING.value,
    )
    scheduled_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    due_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    assigned_to_user_id: Mapped[str | None] = mapped_column(
        String, nullable=True, index=True
    )
    cost_estimate: Mapped[float | None] = mapped_column(Float, nullable=True)

    __table_args__ = (Index("ix_task_property_status", "property_id", "status"),)
