"""Notification request DTO (workflow SEND_* actions -> notification service)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from propertyops.shared.enums import NotificationChannel, NotificationType


@dataclass(frozen=True)
class NotificationRequest:
    """One owner notification fanned out to the requested channels."""

    owner_id: str
    type: NotificationType
    channels: list[NotificationChannel]
    title: str
    message: str
    action_url: str | None = None
    action_text: str | None = None
    template_type: str | None = None
    template_variables: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] | None = None
