import asyncio
from datetime import datetime

import pytest
import pytest_asyncio

from labsupply_backend.config.database import init_db
from labsupply_backend.config.settings import Settings
from labsupply_backend.container import build_container
from labsupply_backend.schemas.solicitud import FetchedSnapshot, RequestSnapshotEntry
from labsupply_backend.services.alerts import AlertSink, LocalAlert
from labsupply_backend.services.exceptions import AlertDeliveryError, FetchError

API_URL = "https://api.labsupply.test"


def make_entry(request_id, estado, *, materia="Química General", starts_at="2026-11-20T09:00:00", **extra):
    data = {
        "id_solicitud": request_id,
        "estado": estado,
        "materia_nombre": materia,
        "fecha_hora_inicio": starts_at,
        **extra,
    }
    return RequestSnapshotEntry.model_validate(data)


class RecordingAlertSink(AlertSink):
    def __init__(self, fail: bool = False) -> None:
        self.sent: list[LocalAlert] = []
        self.fail = fail
        # 설정 시 set() 될 때까지 전송이 멈춤 (느린 push 서버)
        self.gate: asyncio.Event | None = None

    async def send(self, alert: LocalAlert) -> None:
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise AlertDeliveryError("alert facility unavailable")
        self.sent.append(alert)


class FakeRequestSource:
    """스크립트된 스냅샷을 순서대로 반환. 항목이 Exception 이면 raise, list 는 FetchedSnapshot 으로 감쌈."""

    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None

    def push(self, *responses) -> None:
        self.responses.extend(responses)

    async def fetch_snapshot(self, student_id: str) -> FetchedSnapshot:
        self.calls.append(student_id)
        if self.gate is not None:
            await self.gate.wait()
        if not self.responses:
            raise FetchError("no scripted response")
        # 마지막 응답은 계속 재사용
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, FetchedSnapshot):
            return response
        return FetchedSnapshot(entries=list(response))


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        api_url=API_URL,
        sqlite_path=str(tmp_path / "labsupply-test.db"),
        poll_interval_seconds=0.05,
        badge_interval_seconds=0.05,
        expo_push_token="",
    )


@pytest.fixture
def alerts() -> RecordingAlertSink:
    return RecordingAlertSink()


@pytest.fixture
def source() -> FakeRequestSource:
    return FakeRequestSource()


@pytest_asyncio.fixture
async def container(settings, alerts, source):
    c = build_container(settings, alerts=alerts, source=source)
    # 리마인더 판정 시각 고정
    c.poller.clock = lambda: datetime(2026, 10, 19, 12, 0, 0)
    await init_db(c.engine)
    yield c
    await c.poller.stop()
    await c.emitter.drain()
    await c.badge.stop()
    await c.engine.dispose()


@pytest.fixture
def store(container):
    return container.store
