"""Polling 스케줄러 / 세션 API 스키마."""
from enum import Enum
from pydantic import BaseModel, Field


class TickOutcome(str, Enum):
    NEW_DATA = "new_data"  # 알림 생성됨
    NO_DATA = "no_data"  # 정상 처리, 새 알림 없음
    FAILED = "failed"  # fetch / 저장 실패, 스냅샷 미갱신
    SKIPPED = "skipped"  # 로그인 학생 없음
    BUSY = "busy"  # 이전 tick 진행 중


class TickResult(BaseModel):
    outcome: TickOutcome
    transitions: int = 0
    created: int = 0
    reminders: int = 0


class PollerStatusResponse(BaseModel):
    running: bool
    intervalSeconds: float
    lastResult: TickResult | None = None


class SessionRequest(BaseModel):
    studentId: int | str = Field(..., description="로그인한 학생 id_estudiante")
