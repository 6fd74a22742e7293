"""상태 변경 → 알림 문구/payload 변환, 이력 저장 후 OS 알림 표시."""
import asyncio
import logging
from datetime import tzinfo

from ..config.timezone import LOCAL_TZ, to_local
from ..models.notification import Notification
from ..schemas.notification import (
    ApprovedPayload,
    NotificationDraft,
    NotificationKind,
    PendingPayload,
    RejectedPayload,
)
from ..schemas.solicitud import RequestSnapshotEntry, Transition
from .alerts import AlertSink, LocalAlert
from .exceptions import AlertDeliveryError
from .record_store import NotificationStore

logger = logging.getLogger(__name__)

# 서버가 스페인어/영어, 성별 어미를 섞어 보내는 경우까지 허용
APPROVED_STATUSES = {"aprobada", "aprobado", "approved"}
REJECTED_STATUSES = {"rechazada", "rechazado", "rejected"}
PENDING_STATUSES = {"pendiente", "pending"}


def status_kind(status: str) -> NotificationKind | None:
    key = status.strip().lower()
    if key in APPROVED_STATUSES:
        return NotificationKind.REQUEST_APPROVED
    if key in REJECTED_STATUSES:
        return NotificationKind.REQUEST_REJECTED
    if key in PENDING_STATUSES:
        return NotificationKind.REQUEST_PENDING
    return None


def build_status_draft(
    entry: RequestSnapshotEntry,
    status: str,
    *,
    tz: tzinfo = LOCAL_TZ,
) -> NotificationDraft | None:
    """상태별 제목/본문. 알 수 없는 상태는 None (알림 없음). 날짜는 tz 기준 현지 날짜."""
    kind = status_kind(status)
    subject = entry.subject_name
    if kind is NotificationKind.REQUEST_APPROVED:
        local_start = to_local(entry.starts_at, tz)
        return NotificationDraft(
            kind=kind,
            title="¡Solicitud Aprobada!",
            body=f"Tu solicitud para {subject} ha sido aprobada. Fecha: {local_start:%d/%m/%Y}",
            request_id=entry.key,
            subject_name=subject,
            notes=entry.notes,
            payload=ApprovedPayload(requestId=entry.key, subject=subject, startsAt=entry.starts_at),
        )
    if kind is NotificationKind.REQUEST_REJECTED:
        reason = f" Motivo: {entry.notes}" if entry.notes else ""
        return NotificationDraft(
            kind=kind,
            title="Solicitud Rechazada",
            body=f"Tu solicitud para {subject} ha sido rechazada.{reason}",
            request_id=entry.key,
            subject_name=subject,
            notes=entry.notes,
            payload=RejectedPayload(requestId=entry.key, subject=subject, notes=entry.notes),
        )
    if kind is NotificationKind.REQUEST_PENDING:
        return NotificationDraft(
            kind=kind,
            title="Solicitud en Revisión",
            body=f"Tu solicitud para {subject} está siendo revisada.",
            request_id=entry.key,
            subject_name=subject,
            payload=PendingPayload(requestId=entry.key, subject=subject),
        )
    return None


def classify(transition: Transition, *, tz: tzinfo = LOCAL_TZ) -> NotificationDraft | None:
    return build_status_draft(transition.entry, transition.new_status, tz=tz)


class NotificationEmitter:
    """
    알림 1건 = 이력 저장 + OS 알림 표시.
    표시는 백그라운드 task 로 넘기고 기다리지 않음 (fire-and-forget).
    종료 시 drain() 으로 남은 전송을 마무리.
    """

    def __init__(self, store: NotificationStore, alerts: AlertSink, *, sound: str | None = "default") -> None:
        self.store = store
        self.alerts = alerts
        self.sound = sound
        self._pending: set[asyncio.Task] = set()

    @property
    def pending_alerts(self) -> int:
        return len(self._pending)

    async def emit(self, draft: NotificationDraft) -> Notification:
        """이력 저장 후 알림 전송을 예약. 저장 실패(StorageError)는 호출자로 전파, 이때 알림도 보내지 않음."""
        notification = await self.store.append(draft)
        alert = LocalAlert(
            title=draft.title,
            body=draft.body,
            payload=draft.payload.model_dump(mode="json") if draft.payload else {},
            sound=self.sound,
        )
        task = asyncio.create_task(self._deliver(alert, notification.id), name=f"alert-{notification.id}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return notification

    async def _deliver(self, alert: LocalAlert, notification_id: str) -> None:
        try:
            await self.alerts.send(alert)
        except AlertDeliveryError as e:
            logger.warning("Alert delivery failed for %s (history already saved): %s", notification_id, e)
        except Exception as e:
            logger.exception("Alert sink error for %s (history already saved): %s", notification_id, e)

    async def drain(self) -> None:
        """전송 중인 알림이 모두 끝날 때까지 대기."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
