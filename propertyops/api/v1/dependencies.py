"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB-backed workflow repositories.
Routes depend only on these dependencies, not on infra construction.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from propertyops.infrastructure.persistence.database import get_db, get_db_transactional
from propertyops.infrastructure.persistence.repositories import (
    WorkflowExecutionRepository,
    WorkflowRuleRepository,
)


async def get_workflow_rule_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WorkflowRuleRepository:
    """Workflow rule repository for read operations (list, get by id)."""
    return WorkflowRuleRepository(db)


async def get_workflow_rule_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> WorkflowRuleRepository:
    """Workflow rule repository for create/update/delete (transactional)."""
    return WorkflowRuleRepository(db)


async def get_workflow_execution_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WorkflowExecutionRepository:
    """Workflow execution repository for read (history by rule)."""
    return WorkflowExecutionRepository(db)
