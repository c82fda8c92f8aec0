"""Issue repository for workflow UPDATE_STATUS / UPDATE_PRIORITY actions."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from propertyops.infrastructure.persistence.models.issue import Issue
from propertyops.infrastructure.persistence.repositories.base import BaseRepository


class IssueRepository(BaseRepository[Issue]):
    """Issue repository. Implements IIssueRepository."""

    resource_type = "issue"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Issue)

    async def update_status(self, entity_id: str, status: str) -> None:
        await self.update_fields(entity_id, status=status)

    async def update_priority(self, entity_id: str, priority: str) -> None:
        await self.update_fields(entity_id, priority=priority)
