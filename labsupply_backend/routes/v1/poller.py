"""Polling 시작/중지 훅. 앱 foreground/background 전환 시 클라이언트가 호출."""
from typing import Annotated

from fastapi import APIRouter, Depends

from ...container import Container
from ...middleware.deps import get_container
from ...schemas.poller import PollerStatusResponse, TickResult

router = APIRouter()


def _status(container: Container) -> PollerStatusResponse:
    poller = container.poller
    return PollerStatusResponse(
        running=poller.is_running,
        intervalSeconds=poller.interval_seconds,
        lastResult=poller.last_result,
    )


@router.get("/status", response_model=PollerStatusResponse, summary="Polling 상태")
async def poller_status(container: Annotated[Container, Depends(get_container)]):
    return _status(container)


@router.post("/start", response_model=PollerStatusResponse, summary="Polling 시작 (이미 실행 중이면 무시)")
async def poller_start(container: Annotated[Container, Depends(get_container)]):
    await container.poller.start()
    return _status(container)


@router.post("/stop", response_model=PollerStatusResponse, summary="Polling 중지")
async def poller_stop(container: Annotated[Container, Depends(get_container)]):
    await container.poller.stop()
    return _status(container)


@router.post("/tick", response_model=TickResult, summary="수동 새로고침 (1 cycle 즉시 실행)")
async def poller_tick(container: Annotated[Container, Depends(get_container)]):
    result = await container.poller.tick()
    await container.badge.refresh()
    return result
