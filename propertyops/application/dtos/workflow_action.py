"""Workflow action configs as tagged variants (one model per action type).

Rules store actions as {"type": ..., "params": {...}} with camelCase param
keys. parse_action() validates that shape once, before dispatch, into the
variant for its type; each variant carries only the params its handler
reads. Unknown param keys are kept (extra="allow") so stored rules
round-trip unchanged.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, ClassVar, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from propertyops.domain.exceptions import ValidationException
from propertyops.shared.enums import NotificationChannel, NotificationType, TaskType
from propertyops.shared.utils.datetime import parse_datetime


class _Params(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )


class CreateTaskParams(_Params):
    title: str | None = None
    description: str | None = None
    task_type: TaskType | None = Field(default=None, alias="type")
    scheduled_at: datetime | None = None
    due_at: datetime | None = None
    assigned_to_user_id: str | None = None
    cost_estimate: float | None = None

    @field_validator("scheduled_at", "due_at", mode="before")
    @classmethod
    def _as_utc(cls, value: Any) -> datetime | None:
        return parse_datetime(value)


class AssignTaskParams(_Params):
    task_id: str | None = None
    user_id: str | None = None

    @model_validator(mode="after")
    def _require_task_and_user(self) -> AssignTaskParams:
        if not self.task_id or not self.user_id:
            raise ValueError("Task ID and User ID required")
        return self


class SendNotificationParams(_Params):
    channels: list[NotificationChannel] | None = None
    notification_type: NotificationType | None = None
    title: str | None = None
    message: str | None = None
    action_url: str | None = None
    action_text: str | None = None
    template_type: str | None = None
    template_variables: dict[str, Any] | None = None


class DirectMessageParams(_Params):
    """Params for single-channel messages (email, SMS, WhatsApp)."""

    subject: str | None = None
    title: str | None = None
    message: str | None = None
    action_url: str | None = None
    action_text: str | None = None


class UpdateStatusParams(_Params):
    status: str | None = None

    @model_validator(mode="after")
    def _require_status(self) -> UpdateStatusParams:
        if not self.status:
            raise ValueError("Status required")
        return self


class UpdatePriorityParams(_Params):
    priority: str | None = None

    @model_validator(mode="after")
    def _require_priority(self) -> UpdatePriorityParams:
        if not self.priority:
            raise ValueError("Priority update only supported for issues")
        return self


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _default_params(cls, data: Any) -> Any:
        # Rules saved without params still parse; required params fail in the params model.
        if isinstance(data, dict) and data.get("params") is None:
            return {**data, "params": {}}
        return data


class CreateTaskAction(_Action):
    type: Literal["CREATE_TASK"]
    params: CreateTaskParams


class AssignTaskAction(_Action):
    type: Literal["ASSIGN_TASK"]
    params: AssignTaskParams


class SendNotificationAction(_Action):
    type: Literal["SEND_NOTIFICATION"]
    params: SendNotificationParams


class _DirectMessageAction(_Action):
    channel: ClassVar[NotificationChannel]
    params: DirectMessageParams


class SendEmailAction(_DirectMessageAction):
    channel: ClassVar[NotificationChannel] = NotificationChannel.EMAIL
    type: Literal["SEND_EMAIL"]


class SendSmsAction(_DirectMessageAction):
    channel: ClassVar[NotificationChannel] = NotificationChannel.SMS
    type: Literal["SEND_SMS"]


class SendWhatsAppAction(_DirectMessageAction):
    channel: ClassVar[NotificationChannel] = NotificationChannel.WHATSAPP
    type: Literal["SEND_WHATSAPP"]


class UpdateStatusAction(_Action):
    type: Literal["UPDATE_STATUS"]
    params: UpdateStatusParams


class UpdatePriorityAction(_Action):
    type: Literal["UPDATE_PRIORITY"]
    params: UpdatePriorityParams


ActionConfig = Annotated[
    CreateTaskAction
    | AssignTaskAction
    | SendNotificationAction
    | SendEmailAction
    | SendSmsAction
    | SendWhatsAppAction
    | UpdateStatusAction
    | UpdatePriorityAction,
    Field(discriminator="type"),
]

DirectMessageAction = SendEmailAction | SendSmsAction | SendWhatsAppAction

_ACTION_ADAPTER: TypeAdapter[ActionConfig] = TypeAdapter(ActionConfig)


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into the short message stored on failed actions."""
    messages: list[str] = []
    for err in exc.errors():
        ctx = err.get("ctx") or {}
        if err["type"] == "union_tag_invalid":
            messages.append(f"Unknown action type: {ctx.get('tag')}")
        elif err["type"] == "union_tag_not_found":
            messages.append("Action type required")
        elif "error" in ctx:
            messages.append(str(ctx["error"]))
        else:
            location = ".".join(str(part) for part in err["loc"][1:])
            messages.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "; ".join(messages)


def parse_action(raw: Any) -> ActionConfig:
    """Validate a stored {type, params} dict into its action variant.

    Raises:
        ValidationException: Unknown type or params the handler cannot use.
    """
    if not isinstance(raw, dict):
        raise ValidationException("Action must be an object with a type", field="actions")
    try:
        return _ACTION_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise ValidationException(describe_validation_error(e), field="actions") from e
