import json

import httpx
import pytest
import respx

from labsupply_backend.config.settings import Settings
from labsupply_backend.container import build_alert_sink
from labsupply_backend.services.alerts import ExpoPushAlertSink, LocalAlert, LoggingAlertSink
from labsupply_backend.services.exceptions import AlertDeliveryError

PUSH_URL = "https://push.labsupply.test/send"


def alert():
    return LocalAlert(
        title="Solicitud Rechazada",
        body="Tu solicitud para Física ha sido rechazada.",
        payload={"kind": "solicitud_rechazada", "requestId": "9", "subject": "Física"},
        sound="default",
    )


@pytest.mark.asyncio
@respx.mock
async def test_expo_push_message_shape():
    route = respx.post(PUSH_URL).respond(200, json={"data": {"status": "ok"}})
    sink = ExpoPushAlertSink("ExponentPushToken[abc]", url=PUSH_URL, retry_delay_ms=0)

    await sink.send(alert())

    body = json.loads(route.calls[0].request.content)
    assert body["to"] == "ExponentPushToken[abc]"
    assert body["title"] == "Solicitud Rechazada"
    assert body["data"]["requestId"] == "9"
    assert body["sound"] == "default"


@pytest.mark.asyncio
@respx.mock
async def test_expo_push_retries_then_succeeds():
    route = respx.post(PUSH_URL)
    route.side_effect = [httpx.ConnectError("down"), httpx.Response(503), httpx.Response(200, json={})]
    sink = ExpoPushAlertSink("tok", url=PUSH_URL, retry_attempts=3, retry_delay_ms=0)

    await sink.send(alert())

    assert route.call_count == 3


@pytest.mark.asyncio
@respx.mock
async def test_expo_push_gives_up_after_attempts():
    route = respx.post(PUSH_URL).respond(500)
    sink = ExpoPushAlertSink("tok", url=PUSH_URL, retry_attempts=2, retry_delay_ms=0)

    with pytest.raises(AlertDeliveryError):
        await sink.send(alert())
    assert route.call_count == 2


def test_alert_sink_selection():
    assert isinstance(build_alert_sink(Settings(expo_push_token="")), LoggingAlertSink)
    assert isinstance(build_alert_sink(Settings(expo_push_token="tok")), ExpoPushAlertSink)
