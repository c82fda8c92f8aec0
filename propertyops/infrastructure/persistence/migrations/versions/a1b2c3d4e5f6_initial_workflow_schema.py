"""initial workflow schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-17

Rule and execution tables, plus the booking/task/issue columns the workflow
engine writes.
"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

revision: str = "a1b2c3d4e5f6"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_TRIGGERS = (
    "BOOKING_CREATED",
    "BOOKING_UPDATED",
    "BOOKING_STATUS_CHANGED",
    "BOOKING_CHECKOUT",
    "BOOKING_CHECKED_IN",
    "TASK_CREATED",
    "TASK_COMPLETED",
    "TASK_OVERDUE",
    "ISSUE_CREATED",
    "ISSUE_STATUS_CHANGED",
    "ISSUE_PRIORITY_CHANGED",
    "EXPENSE_CREATED",
    "STATEMENT_FINALIZED",
    "SCHEDULED",
)
_EXECUTION_STATUSES = ("SUCCESS", "FAILED", "PARTIAL")


def _in_check(column: str, values: Sequence[str]) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "booking",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("property_id", sa.String(), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_booking_property_id", "booking", ["property_id"])
    op.create_index("ix_booking_owner_id", "booking", ["owner_id"])

    op.create_table(
        "issue",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("property_id", sa.String(), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("priority", sa.String(length=32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_issue_property_id", "issue", ["property_id"])
    op.create_index("ix_issue_owner_id", "issue", ["owner_id"])

    op.create_table(
        "task",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("property_id", sa.String(), nullable=False),
        sa.Column("booking_id", sa.String(), nullable=True),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "status",
            sa.String(length=32),
            server_default="PENDING",
            nullable=False,
        ),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("due_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("assigned_to_user_id", sa.String(), nullable=True),
        sa.Column("cost_estimate", sa.Float(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["booking_id"], ["booking.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_task_property_id", "task", ["property_id"])
    op.create_index("ix_task_booking_id", "task", ["booking_id"])
    op.create_index("ix_task_assigned_to_user_id", "task", ["assigned_to_user_id"])
    op.create_index("ix_task_property_status", "task", ["property_id", "status"])

    op.create_table(
        "workflow_rule",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("trigger", sa.String(length=64), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("priority", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("conditions", sa.JSON(), nullable=True),
        sa.Column("actions", sa.JSON(), nullable=False),
        sa.Column("property_ids", sa.JSON(), server_default=sa.text("'[]'"), nullable=False),
        sa.Column("owner_ids", sa.JSON(), server_default=sa.text("'[]'"), nullable=False),
        sa.Column("schedule_cron", sa.String(length=128), nullable=True),
        sa.Column(
            "execution_count", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column("last_executed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            _in_check("trigger", _TRIGGERS), name="workflow_rule_trigger_check"
        ),
    )
    op.create_index(
        "ix_workflow_rule_trigger_active", "workflow_rule", ["trigger", "is_active"]
    )

    op.create_table(
        "workflow_execution",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("workflow_rule_id", sa.String(), nullable=False),
        sa.Column("trigger_type", sa.String(length=64), nullable=False),
        sa.Column("trigger_entity_id", sa.String(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("execution_log", sa.JSON(), nullable=True),
        sa.Column(
            "executed_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["workflow_rule_id"], ["workflow_rule.id"], ondelete="CASCADE"
        ),
        sa.CheckConstraint(
            _in_check("status", _EXECUTION_STATUSES),
            name="workflow_execution_status_check",
        ),
    )
    op.create_index(
        "ix_workflow_execution_workflow_rule_id", "workflow_execution", ["workflow_rule_id"]
    )
    op.create_index(
        "ix_workflow_execution_trigger_entity_id",
        "workflow_execution",
        ["trigger_entity_id"],
    )
    op.create_index("ix_workflow_execution_status", "workflow_execution", ["status"])
    op.create_index(
        "ix_workflow_execution_rule_executed_at",
        "workflow_execution",
        ["workflow_rule_id", "executed_at"],
    )


def downgrade() -> None:
    op.drop_table("workflow_execution")
    op.drop_table("workflow_rule")
    op.drop_table("task")
    op.drop_table("issue")
    op.drop_table("booking")
