import httpx
import pytest
import respx

from conftest import API_URL
from labsupply_backend.services.exceptions import FetchError
from labsupply_backend.services.request_source import RequestSourceClient, parse_snapshot

SOLICITUDES_URL = f"{API_URL}/estudiantes/solicitudes"


def row(request_id, estado="Pendiente", **extra):
    return {
        "id_solicitud": request_id,
        "estado": estado,
        "materia_nombre": "Química Orgánica",
        "fecha_hora_inicio": "2026-10-21T14:00:00.000Z",
        "fecha_hora_fin": "2026-10-21T16:00:00.000Z",
        **extra,
    }


@pytest.mark.asyncio
@respx.mock
async def test_fetch_snapshot_maps_fields():
    route = respx.get(SOLICITUDES_URL).respond(200, json=[row(1, "Aprobada", observaciones="ok")])
    client = RequestSourceClient(API_URL)

    snapshot = await client.fetch_snapshot("42")

    assert route.calls[0].request.url.params["id_estudiante"] == "42"
    assert len(snapshot.entries) == 1
    entry = snapshot.entries[0]
    assert entry.request_id == 1
    assert entry.status == "Aprobada"
    assert entry.subject_name == "Química Orgánica"
    assert entry.starts_at.tzinfo is None
    assert entry.starts_at.hour == 14
    assert entry.ends_at is not None
    assert entry.notes == "ok"


@pytest.mark.asyncio
@respx.mock
async def test_fetch_snapshot_accepts_wrapped_payload():
    respx.get(SOLICITUDES_URL).respond(200, json={"data": [row(1), row(2)]})

    snapshot = await RequestSourceClient(API_URL).fetch_snapshot("42")

    assert [e.key for e in snapshot.entries] == ["1", "2"]


@pytest.mark.asyncio
@respx.mock
async def test_malformed_entry_is_skipped():
    bad = {"id_solicitud": 2, "estado": "Pendiente"}
    respx.get(SOLICITUDES_URL).respond(200, json=[row(1), bad, "junk", row(3)])

    snapshot = await RequestSourceClient(API_URL).fetch_snapshot("42")

    assert [e.key for e in snapshot.entries] == ["1", "3"]
    assert snapshot.skipped_keys == {"2"}


@pytest.mark.asyncio
@respx.mock
async def test_non_2xx_raises_fetch_error():
    respx.get(SOLICITUDES_URL).respond(500)

    with pytest.raises(FetchError):
        await RequestSourceClient(API_URL).fetch_snapshot("42")


@pytest.mark.asyncio
@respx.mock
async def test_timeout_raises_fetch_error():
    respx.get(SOLICITUDES_URL).mock(side_effect=httpx.ReadTimeout("slow"))

    with pytest.raises(FetchError):
        await RequestSourceClient(API_URL).fetch_snapshot("42")


@pytest.mark.asyncio
@respx.mock
async def test_connect_error_and_bad_json_raise_fetch_error():
    route = respx.get(SOLICITUDES_URL)
    route.side_effect = httpx.ConnectError("refused")
    with pytest.raises(FetchError):
        await RequestSourceClient(API_URL).fetch_snapshot("42")

    route.side_effect = None
    route.return_value = httpx.Response(200, text="<html>down</html>")
    with pytest.raises(FetchError):
        await RequestSourceClient(API_URL).fetch_snapshot("42")


def test_duplicate_ids_keep_last_occurrence():
    snapshot = parse_snapshot([row(1, "Pendiente"), row(1, "Aprobada")])

    assert len(snapshot.entries) == 1
    assert snapshot.entries[0].status == "Aprobada"


def test_unexpected_payload_shape_raises():
    with pytest.raises(FetchError):
        parse_snapshot({"error": "nope"})


def test_valid_duplicate_is_not_reported_as_skipped():
    snapshot = parse_snapshot([row(1, "Pendiente"), {"id_solicitud": 1, "estado": "Aprobada"}, {"estado": "x"}])

    assert [e.status for e in snapshot.entries] == ["Pendiente"]
    assert snapshot.skipped_keys == frozenset()
