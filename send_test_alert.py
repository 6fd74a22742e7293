"""Expo push 테스트 알림 전송 (EXPO_PUSH_TOKEN 필요)."""
import asyncio
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent))

from labsupply_backend.config.settings import settings
from labsupply_backend.container import build_alert_sink
from labsupply_backend.services.alerts import LocalAlert
from labsupply_backend.services.exceptions import AlertDeliveryError


async def send_test_alert() -> int:
    sink = build_alert_sink(settings)
    print(f"Alert sink: {type(sink).__name__}")
    alert = LocalAlert(
        title="Prueba de Notificación",
        body="Esta es una notificación de prueba para verificar que el sistema funciona correctamente.",
        payload={"kind": "prueba", "requestId": "999", "subject": "Prueba"},
        sound=settings.notification_sound,
    )
    try:
        await sink.send(alert)
    except AlertDeliveryError as e:
        print(f"FAIL - {e}")
        return 1
    print("SUCCESS - 전송 완료")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(send_test_alert()))
