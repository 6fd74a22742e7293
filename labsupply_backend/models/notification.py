"""local_notifications: 학생에게 표시되는 알림 이력 (읽음/안읽음 관리)."""
from datetime import datetime
from sqlalchemy import BigInteger, Integer, String, Text, DateTime, Boolean, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from ..config.database import Base
from ..config.timezone import now_utc


class Notification(Base):
    __tablename__ = "local_notifications"
    # dedup key: (request_id, kind). request_id 가 NULL 인 알림끼리는 중복 허용
    __table_args__ = (UniqueConstraint("request_id", "kind", name="uq_notification_request_kind"),)

    # seq: 삽입 순서 (최신순 정렬 기준), id: 외부 노출용 문자열 ID
    seq: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    kind: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=now_utc, index=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    request_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    subject_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    payload: Mapped[dict | None] = mapped_column(JSON, nullable=True)
