"""학교 API solicitud 스냅샷 스키마."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config.timezone import to_naive_utc


class RequestSnapshotEntry(BaseModel):
    """polling 시점의 요청 1건. 학교 API 필드명(alias)으로 입출력."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    request_id: int | str = Field(..., alias="id_solicitud")
    subject_name: str = Field(..., alias="materia_nombre")
    status: str = Field(..., alias="estado")
    starts_at: datetime = Field(..., alias="fecha_hora_inicio")
    ends_at: datetime | None = Field(None, alias="fecha_hora_fin")
    notes: str | None = Field(None, alias="observaciones")

    @field_validator("starts_at", "ends_at")
    @classmethod
    def _naive_utc(cls, v: datetime | None) -> datetime | None:
        return to_naive_utc(v) if v is not None else None

    @property
    def key(self) -> str:
        """dedup / diff 키. 서버가 1 과 "1" 을 섞어 보내도 같은 요청으로 취급."""
        return str(self.request_id)

    @property
    def status_key(self) -> str:
        return self.status.strip().lower()

    def to_api_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class Transition(BaseModel):
    """연속된 두 스냅샷 사이의 상태 변경. Differ 만 생성."""

    model_config = ConfigDict(frozen=True)

    entry: RequestSnapshotEntry
    previous_status: str
    new_status: str


class FetchedSnapshot(BaseModel):
    """1회 조회 결과. 형식이 깨져 건너뛴 항목의 id 는 skipped_keys 로 따로 보관."""

    model_config = ConfigDict(frozen=True)

    entries: list[RequestSnapshotEntry]
    skipped_keys: frozenset[str] = frozenset()
