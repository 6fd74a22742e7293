"""승인된 요청이 24시간 이내 시작하면 1회 리마인더."""
import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

from ..config.timezone import to_naive_utc
from ..models.notification import Notification
from ..schemas.notification import NotificationDraft, NotificationKind, ReminderPayload
from ..schemas.solicitud import RequestSnapshotEntry
from .dedup import DedupGuard
from .emitter import NotificationEmitter, status_kind

logger = logging.getLogger(__name__)


def build_reminder_draft(entry: RequestSnapshotEntry) -> NotificationDraft:
    return NotificationDraft(
        kind=NotificationKind.UPCOMING_REMINDER,
        title="Recordatorio de Solicitud",
        body=(
            f"Tu solicitud para {entry.subject_name} comienza mañana. "
            "Prepárate para recoger los insumos."
        ),
        request_id=entry.key,
        subject_name=entry.subject_name,
        payload=ReminderPayload(requestId=entry.key, subject=entry.subject_name, startsAt=entry.starts_at),
    )


def find_reminder_candidates(
    snapshot: Iterable[RequestSnapshotEntry],
    now: datetime,
    window: timedelta = timedelta(hours=24),
) -> list[NotificationDraft]:
    """승인 상태이고 0 < starts_at - now <= window 인 요청의 리마인더 후보 (dedup 전)."""
    now = to_naive_utc(now)
    candidates = []
    for entry in snapshot:
        if status_kind(entry.status) is not NotificationKind.REQUEST_APPROVED:
            continue
        remaining = entry.starts_at - now
        if timedelta(0) < remaining <= window:
            candidates.append(build_reminder_draft(entry))
    return candidates


class ReminderEvaluator:
    def __init__(
        self,
        guard: DedupGuard,
        emitter: NotificationEmitter,
        *,
        window_hours: int = 24,
    ) -> None:
        self.guard = guard
        self.emitter = emitter
        self.window = timedelta(hours=window_hours)

    def evaluate(self, snapshot: Iterable[RequestSnapshotEntry], now: datetime) -> list[NotificationDraft]:
        return find_reminder_candidates(snapshot, now, self.window)

    async def run(self, snapshot: Iterable[RequestSnapshotEntry], now: datetime) -> list[Notification]:
        """후보 중 아직 리마인더가 없는 요청만 알림. 요청당 평생 1회."""
        created = []
        for draft in self.evaluate(snapshot, now):
            if not await self.guard.should_notify(draft.request_id, draft.kind):
                continue
            created.append(await self.emitter.emit(draft))
        if created:
            logger.info("Sent %s upcoming reminders", len(created))
        return created
