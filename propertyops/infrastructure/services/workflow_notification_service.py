"""Workflow notification: log-only implementation of the notification service port."""

from __future__ import annotations

import logging

from propertyops.application.dtos.notification import NotificationRequest
from propertyops.shared.telemetry.logging import get_logger
from propertyops.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class LogOnlyNotificationService:
    """INotificationService implementation that logs instead of delivering.

    Use when no email/SMS/WhatsApp provider is wired in. Production swaps in
    the multi-channel delivery service behind the same protocol.
    """

    async def send_notification(self, request: NotificationRequest) -> None:
        """Log the notification; nothing is actually sent."""
        title_preview = (request.title or "")[:80]
        if not request.channels:
            logger.info(
                "Workflow notification: no channels for owner %s, skipping (title=%r)",
                request.owner_id,
                title_preview,
            )
            return
        logger.info(
            "Workflow notification: would send %s to owner %s via %s (title=%r)",
            request.type.value,
            request.owner_id,
            ", ".join(channel.value for channel in request.channels),
            title_preview,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Workflow notification body (first 500 chars, at %s): %s",
                utc_now().isoformat(),
                (request.message or "")[:500],
            )
