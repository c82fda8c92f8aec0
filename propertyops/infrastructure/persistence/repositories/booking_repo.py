"""Booking repository for workflow UPDATE_STATUS actions."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from propertyops.infrastructure.persistence.models.booking import Booking
from propertyops.infrastructure.persistence.repositories.base import BaseRepository


class BookingRepository(BaseRepository[Booking]):
    """Booking repository. Implements IBookingRepository."""

    resource_type = "booking"

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Booking)

    async def update_status(self, entity_id: str, status: str) -> None:
        await self.update_fields(entity_id, status=status)
