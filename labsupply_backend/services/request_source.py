"""학교 REST API: 로그인 학생의 solicitudes 조회 → 스냅샷 변환."""
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..schemas.solicitud import FetchedSnapshot, RequestSnapshotEntry
from .exceptions import FetchError, MalformedEntryError

logger = logging.getLogger(__name__)


def _extract_items(data: Any) -> list:
    """응답이 list 이거나 {"data": [...]} / {"solicitudes": [...]} 형태."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("data", "solicitudes", "items"):
            items = data.get(key)
            if isinstance(items, list):
                return items
    raise FetchError(f"unexpected solicitudes payload: {type(data).__name__}")


def parse_entry(item: Any) -> RequestSnapshotEntry:
    if not isinstance(item, dict):
        raise MalformedEntryError(f"entry is not an object: {item!r}")
    try:
        return RequestSnapshotEntry.model_validate(item)
    except ValidationError as e:
        raise MalformedEntryError(
            f"solicitud {item.get('id_solicitud')!r}: {e.error_count()} invalid field(s)"
        ) from e


def _item_key(item: Any) -> str | None:
    if isinstance(item, dict) and item.get("id_solicitud") is not None:
        return str(item["id_solicitud"])
    return None


def parse_snapshot(data: Any) -> FetchedSnapshot:
    """
    응답 → 스냅샷. 형식이 깨진 항목은 그 1건만 건너뛰고 id 를 skipped_keys 에 기록.
    같은 id_solicitud 가 여러 번 오면 마지막 항목 사용 (스냅샷은 id 기준 집합).
    """
    by_key: dict[str, RequestSnapshotEntry] = {}
    skipped: set[str] = set()
    for item in _extract_items(data):
        try:
            entry = parse_entry(item)
        except MalformedEntryError as e:
            logger.warning("Malformed solicitud skipped: %s", e)
            key = _item_key(item)
            if key is not None:
                skipped.add(key)
            continue
        by_key[entry.key] = entry
    return FetchedSnapshot(entries=list(by_key.values()), skipped_keys=frozenset(skipped - by_key.keys()))


class RequestSourceClient:
    """GET /estudiantes/solicitudes?id_estudiante=... 조회. 실패는 모두 FetchError."""

    def __init__(self, base_url: str, *, timeout: float = 10.0) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout

    async def fetch_snapshot(self, student_id: str) -> FetchedSnapshot:
        if not self.base_url:
            raise FetchError("API URL not configured")
        url = f"{self.base_url}/estudiantes/solicitudes"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                r = await client.get(
                    url,
                    params={"id_estudiante": student_id},
                    headers={"Content-Type": "application/json"},
                )
                r.raise_for_status()
                data = r.json()
        except httpx.TimeoutException as e:
            raise FetchError("solicitudes request timeout") from e
        except httpx.HTTPStatusError as e:
            raise FetchError(f"solicitudes request failed: HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"solicitudes request error: {e}") from e
        except ValueError as e:
            raise FetchError(f"solicitudes response is not JSON: {e}") from e
        return parse_snapshot(data)
