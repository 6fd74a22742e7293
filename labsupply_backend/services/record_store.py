"""로컬 알림 이력 저장소. 최신순 저장, 읽음 처리, 30일 정리, 안읽음 카운트 캐시."""
import logging
import random
import string
import time
from datetime import datetime, timedelta

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..config.timezone import now_utc
from ..models.notification import Notification
from ..schemas.notification import NotificationDraft, NotificationKind
from .exceptions import NotificationNotFound, StorageError
from .state_store import UNREAD_COUNT_KEY, read_value, write_value

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_notification_id() -> str:
    """밀리초 timestamp + base36 9자리 난수."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{int(time.time() * 1000)}{suffix}"


class NotificationStore:
    """
    Notification 컬렉션의 유일한 소유자.
    쓰기는 Poll Scheduler / Reminder Evaluator, 읽기는 UI 와 Badge.
    모든 변경 작업은 같은 트랜잭션 안에서 안읽음 카운트를 다시 계산해 저장한다.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def _recount(self, session: AsyncSession) -> int:
        count = await session.scalar(
            select(func.count()).select_from(Notification).where(Notification.is_read.is_(False))
        )
        count = int(count or 0)
        await write_value(session, UNREAD_COUNT_KEY, count)
        return count

    async def append(
        self,
        draft: NotificationDraft,
        *,
        created_at: datetime | None = None,
    ) -> Notification:
        notification = Notification(
            id=generate_notification_id(),
            title=draft.title,
            message=draft.body,
            kind=draft.kind.value,
            created_at=created_at or now_utc(),
            is_read=False,
            request_id=draft.request_id,
            subject_name=draft.subject_name,
            notes=draft.notes,
            payload=draft.payload.model_dump(mode="json") if draft.payload else None,
        )
        try:
            async with self.session_factory() as session:
                session.add(notification)
                await session.flush()
                await self._recount(session)
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"notification append failed: {e}") from e
        logger.info(
            "Notification saved: id=%s kind=%s request=%s",
            notification.id,
            notification.kind,
            notification.request_id,
        )
        return notification

    async def get_all(self) -> list[Notification]:
        """최신순 전체 목록."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(select(Notification).order_by(Notification.seq.desc()))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(f"notification list failed: {e}") from e

    async def get_unread(self) -> list[Notification]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(Notification)
                    .where(Notification.is_read.is_(False))
                    .order_by(Notification.seq.desc())
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(f"unread list failed: {e}") from e

    async def get(self, notification_id: str) -> Notification:
        try:
            async with self.session_factory() as session:
                notification = await session.scalar(
                    select(Notification).where(Notification.id == notification_id)
                )
        except SQLAlchemyError as e:
            raise StorageError(f"notification read failed: {e}") from e
        if notification is None:
            raise NotificationNotFound(notification_id)
        return notification

    async def has_notification(self, request_id: str, kind: NotificationKind | str) -> bool:
        kind_value = kind.value if isinstance(kind, NotificationKind) else kind
        try:
            async with self.session_factory() as session:
                found = await session.scalar(
                    select(
                        exists().where(
                            Notification.request_id == str(request_id),
                            Notification.kind == kind_value,
                        )
                    )
                )
                return bool(found)
        except SQLAlchemyError as e:
            raise StorageError(f"dedup lookup failed: {e}") from e

    async def mark_read(self, notification_id: str) -> Notification:
        """읽음 처리. 이미 읽은 알림은 그대로 (false → true 단방향)."""
        try:
            async with self.session_factory() as session:
                notification = await session.scalar(
                    select(Notification).where(Notification.id == notification_id)
                )
                if notification is None:
                    raise NotificationNotFound(notification_id)
                if not notification.is_read:
                    notification.is_read = True
                    await session.flush()
                    await self._recount(session)
                    await session.commit()
                return notification
        except SQLAlchemyError as e:
            raise StorageError(f"mark read failed: {e}") from e

    async def mark_all_read(self) -> int:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    update(Notification).where(Notification.is_read.is_(False)).values(is_read=True)
                )
                await self._recount(session)
                await session.commit()
                return result.rowcount or 0
        except SQLAlchemyError as e:
            raise StorageError(f"mark all read failed: {e}") from e

    async def delete(self, notification_id: str) -> None:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    delete(Notification).where(Notification.id == notification_id)
                )
                if not result.rowcount:
                    raise NotificationNotFound(notification_id)
                await self._recount(session)
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"notification delete failed: {e}") from e

    async def clear_all(self) -> int:
        try:
            async with self.session_factory() as session:
                result = await session.execute(delete(Notification))
                await write_value(session, UNREAD_COUNT_KEY, 0)
                await session.commit()
                return result.rowcount or 0
        except SQLAlchemyError as e:
            raise StorageError(f"notification clear failed: {e}") from e

    async def prune_older_than(self, days: int, *, now: datetime | None = None) -> int:
        """created_at 이 (now - days) 이전인 알림 삭제. 명시적 유지보수 작업으로만 호출."""
        cutoff = (now or now_utc()) - timedelta(days=days)
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    delete(Notification).where(Notification.created_at <= cutoff)
                )
                await self._recount(session)
                await session.commit()
                removed = result.rowcount or 0
        except SQLAlchemyError as e:
            raise StorageError(f"notification prune failed: {e}") from e
        if removed:
            logger.info("Pruned %s notifications older than %s days", removed, days)
        return removed

    async def get_unread_count(self) -> int:
        """캐시된 안읽음 카운트 (O(1)). 캐시가 없으면 한 번 계산해서 저장."""
        try:
            async with self.session_factory() as session:
                cached = await read_value(session, UNREAD_COUNT_KEY)
                if isinstance(cached, int):
                    return cached
                count = await self._recount(session)
                await session.commit()
                return count
        except (SQLAlchemyError, ValueError) as e:
            raise StorageError(f"unread count read failed: {e}") from e

    async def recount_unread(self) -> int:
        try:
            async with self.session_factory() as session:
                count = await self._recount(session)
                await session.commit()
                return count
        except SQLAlchemyError as e:
            raise StorageError(f"unread recount failed: {e}") from e
