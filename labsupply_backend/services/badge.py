"""안읽음 배지: 저장소의 캐시 카운트를 30초마다 다시 읽어 표시용으로 보관."""
import asyncio
import logging
from contextlib import suppress

from .exceptions import StorageError
from .record_store import NotificationStore

logger = logging.getLogger(__name__)


class BadgeCounter:
    def __init__(
        self,
        store: NotificationStore,
        *,
        interval_seconds: float = 30.0,
        max_count: int = 99,
    ) -> None:
        self.store = store
        self.interval_seconds = interval_seconds
        self.max_count = max_count
        self._count = 0
        self._task: asyncio.Task | None = None

    def get_count(self) -> int:
        """마지막으로 읽은 값. 표시용이라 오래됐을 수 있음, 정확한 값은 refresh()."""
        return self._count

    def label(self) -> str:
        if self._count <= 0:
            return ""
        if self._count > self.max_count:
            return f"{self.max_count}+"
        return str(self._count)

    async def refresh(self) -> int:
        try:
            self._count = await self.store.get_unread_count()
        except StorageError as e:
            logger.warning("Badge refresh failed, keeping last value: %s", e)
        return self._count

    async def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        await self.refresh()
        self._task = asyncio.create_task(self._loop(), name="badge-counter")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.refresh()
