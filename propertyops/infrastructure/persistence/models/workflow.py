"""WorkflowRule and WorkflowExecution ORM models. Trigger-driven automation."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from propertyops.infrastructure.persistence.database import Base
from propertyops.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampedModel,
)
from propertyops.shared.enums import WorkflowExecutionStatus, WorkflowTrigger


def _in_values_check(column: str, values: list[str]) -> str:
    quoted = ", ".join("'{}'".format(v.replace("'", "''")) for v in values)
    return f"{column} IN ({quoted})"


class WorkflowRule(TimestampedModel, Base):
    """Workflow rule definition. Table: workflow_rule. Trigger + conditions + actions JSON."""

    __tablename__ = "workflow_rule"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    trigger: Mapped[str] = mapped_column(String(64), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=sa.text("true")
    )
    priority: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    conditions: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    actions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    property_ids: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list, server_default=sa.text("'[]'")
    )
    owner_ids: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list, server_default=sa.text("'[]'")
    )
    schedule_cron: Mapped[str | None] = mapped_column(String(128), nullable=True)
    execution_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=sa.text("0")
    )
    last_executed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("ix_workflow_rule_trigger_active", "trigger", "is_active"),
        CheckConstraint(
            _in_values_check("trigger", WorkflowTrigger.values()),
            name="workflow_rule_trigger_check",
        ),
    )


class WorkflowExecution(CuidMixin, Base):
    """Workflow execution audit (write-once). Table: workflow_execution."""

    __tablename__ = "workflow_execution"

    workflow_rule_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("workflow_rule.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    trigger_type: Mapped[str] = mapped_column(String(64), nullable=False)
    trigger_entity_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    execution_log: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    executed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index(
            "ix_workflow_execution_rule_executed_at",
            "workflow_rule_id",
            "executed_at",
        ),
        CheckConstraint(
            _in_values_check("status", WorkflowExecutionStatus.values()),
            name="workflow_execution_status_check",
        ),
    )
