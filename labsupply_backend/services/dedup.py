"""중복 알림 방지: (request_id, kind) 당 알림 1건."""
import logging

from ..schemas.notification import NotificationKind
from .exceptions import DedupCheckError, StorageError
from .record_store import NotificationStore

logger = logging.getLogger(__name__)


class DedupGuard:
    def __init__(self, store: NotificationStore) -> None:
        self.store = store

    async def should_notify(self, request_id: str, kind: NotificationKind) -> bool:
        """
        저장소에 같은 (request_id, kind) 알림이 있으면 False.
        조회 실패 시 True/False 어느 쪽으로도 답하지 않고 DedupCheckError:
        호출자는 이번 cycle 을 중단하고 다음 poll 에서 재시도한다.
        """
        try:
            exists = await self.store.has_notification(request_id, kind)
        except StorageError as e:
            raise DedupCheckError(f"dedup check failed for {request_id}/{kind.value}: {e}") from e
        if exists:
            logger.debug("Notification already exists: request=%s kind=%s", request_id, kind.value)
        return not exists
