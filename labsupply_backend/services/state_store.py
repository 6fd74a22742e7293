"""app_state key-value 저장소: 로그인 세션, 마지막 스냅샷."""
import json
import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..models.app_state import AppState
from ..schemas.solicitud import RequestSnapshotEntry
from .exceptions import StorageError

logger = logging.getLogger(__name__)

USER_DATA_KEY = "user_data"
LAST_SNAPSHOT_KEY = "last_request_snapshot"
UNREAD_COUNT_KEY = "unread_notifications_count"


async def read_value(session: AsyncSession, key: str) -> Any | None:
    row = await session.get(AppState, key)
    if row is None:
        return None
    return json.loads(row.value)


async def write_value(session: AsyncSession, key: str, value: Any) -> None:
    """같은 세션(트랜잭션) 안에서 upsert. commit 은 호출자 책임."""
    encoded = json.dumps(value, ensure_ascii=False)
    row = await session.get(AppState, key)
    if row is None:
        session.add(AppState(key=key, value=encoded))
    else:
        row.value = encoded


class StateStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, key: str) -> Any | None:
        try:
            async with self.session_factory() as session:
                return await read_value(session, key)
        except (SQLAlchemyError, ValueError) as e:
            raise StorageError(f"app_state read failed ({key}): {e}") from e

    async def set(self, key: str, value: Any) -> None:
        try:
            async with self.session_factory() as session:
                await write_value(session, key, value)
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"app_state write failed ({key}): {e}") from e

    async def delete(self, key: str) -> None:
        try:
            async with self.session_factory() as session:
                row = await session.get(AppState, key)
                if row is not None:
                    await session.delete(row)
                    await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"app_state delete failed ({key}): {e}") from e


class SessionStore:
    """로그인한 학생 정보 (인증 서버가 내려준 userData 의 id_estudiante)."""

    def __init__(self, state: StateStore) -> None:
        self.state = state

    async def get_current_student_id(self) -> str | None:
        user = await self.state.get(USER_DATA_KEY)
        if not isinstance(user, dict):
            return None
        student_id = user.get("id_estudiante")
        if student_id in (None, ""):
            return None
        return str(student_id)

    async def login(self, student_id: int | str, **extra: Any) -> None:
        await self.state.set(USER_DATA_KEY, {"id_estudiante": student_id, **extra})

    async def logout(self) -> None:
        await self.state.delete(USER_DATA_KEY)


class SnapshotStore:
    """마지막으로 관측한 solicitudes 스냅샷. 성공한 poll 마다 통째로 교체."""

    def __init__(self, state: StateStore) -> None:
        self.state = state

    async def load(self) -> list[RequestSnapshotEntry]:
        raw = await self.state.get(LAST_SNAPSHOT_KEY)
        if not isinstance(raw, list):
            return []
        entries: list[RequestSnapshotEntry] = []
        for item in raw:
            try:
                entries.append(RequestSnapshotEntry.model_validate(item))
            except ValidationError as e:
                logger.warning("Stored snapshot entry skipped: %s", e)
        return entries

    async def save(self, snapshot: list[RequestSnapshotEntry]) -> None:
        await self.state.set(LAST_SNAPSHOT_KEY, [e.to_api_dict() for e in snapshot])
