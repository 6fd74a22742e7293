"""알림 API 스키마 및 payload (kind 로 구분되는 tagged union)."""
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class NotificationKind(str, Enum):
    REQUEST_APPROVED = "solicitud_aprobada"
    REQUEST_REJECTED = "solicitud_rechazada"
    REQUEST_PENDING = "solicitud_pendiente"
    UPCOMING_REMINDER = "recordatorio_solicitud"
    OTHER = "otro"


class ApprovedPayload(BaseModel):
    kind: Literal["solicitud_aprobada"] = "solicitud_aprobada"
    requestId: str
    subject: str
    startsAt: datetime | None = None


class RejectedPayload(BaseModel):
    kind: Literal["solicitud_rechazada"] = "solicitud_rechazada"
    requestId: str
    subject: str
    notes: str | None = None


class PendingPayload(BaseModel):
    kind: Literal["solicitud_pendiente"] = "solicitud_pendiente"
    requestId: str
    subject: str


class ReminderPayload(BaseModel):
    kind: Literal["recordatorio_solicitud"] = "recordatorio_solicitud"
    requestId: str
    subject: str
    startsAt: datetime | None = None


NotificationPayload = Annotated[
    Union[ApprovedPayload, RejectedPayload, PendingPayload, ReminderPayload],
    Field(discriminator="kind"),
]

payload_adapter: TypeAdapter[NotificationPayload] = TypeAdapter(NotificationPayload)


class NotificationDraft(BaseModel):
    """Emitter / Reminder 가 만든 저장 전 알림. id, created_at 은 저장소가 부여."""

    kind: NotificationKind
    title: str
    body: str
    request_id: str | None = None
    subject_name: str | None = None
    notes: str | None = None
    payload: NotificationPayload | None = None


class NotificationResponse(BaseModel):
    id: str
    title: str
    message: str
    kind: str
    createdAt: datetime
    isRead: bool
    requestId: str | None = None
    subjectName: str | None = None
    notes: str | None = None
    payload: NotificationPayload | None = None


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    unreadCount: int


class UnreadCountResponse(BaseModel):
    unreadCount: int
    label: str


class PruneResponse(BaseModel):
    removed: int
    unreadCount: int
