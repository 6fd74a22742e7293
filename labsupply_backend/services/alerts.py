"""OS 알림 표시 채널. 기본은 로그 출력, Expo push 토큰이 있으면 Expo push API 호출."""
import asyncio
import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from .exceptions import AlertDeliveryError

logger = logging.getLogger(__name__)


class LocalAlert(BaseModel):
    title: str
    body: str
    payload: dict[str, Any] = Field(default_factory=dict)
    sound: str | None = "default"


class AlertSink:
    """알림 표시 채널 인터페이스. 코어 입장에서는 fire-and-forget."""

    async def send(self, alert: LocalAlert) -> None:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


class LoggingAlertSink(AlertSink):
    """푸시 설정이 없을 때: 알림 내용을 로그로만 남김."""

    async def send(self, alert: LocalAlert) -> None:
        logger.info("[ALERT] %s | %s", alert.title, alert.body)


class ExpoPushAlertSink(AlertSink):
    """Expo push API 로 기기에 알림 전송. 실패 시 retry_attempts 회까지 재시도."""

    def __init__(
        self,
        push_token: str,
        *,
        url: str = "https://exp.host/--/api/v2/push/send",
        retry_attempts: int = 3,
        retry_delay_ms: int = 1000,
        timeout: float = 10.0,
    ) -> None:
        self.push_token = push_token
        self.url = url
        self.retry_attempts = max(1, retry_attempts)
        self.retry_delay = retry_delay_ms / 1000
        self.timeout = timeout

    def _build_message(self, alert: LocalAlert) -> dict[str, Any]:
        message: dict[str, Any] = {
            "to": self.push_token,
            "title": alert.title,
            "body": alert.body,
            "data": alert.payload,
            "priority": "high",
        }
        if alert.sound:
            message["sound"] = alert.sound
        return message

    async def send(self, alert: LocalAlert) -> None:
        message = self._build_message(alert)
        last_error: Exception | None = None
        for attempt in range(1, self.retry_attempts + 1):
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    r = await client.post(self.url, json=message)
                    r.raise_for_status()
                return
            except httpx.HTTPError as e:
                last_error = e
                logger.warning("Expo push attempt %s/%s failed: %s", attempt, self.retry_attempts, e)
                if attempt < self.retry_attempts:
                    await asyncio.sleep(self.retry_delay)
        raise AlertDeliveryError(f"Expo push failed after {self.retry_attempts} attempts") from last_error
