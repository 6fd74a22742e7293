"""UTC 기준 현재 시각 및 API 날짜 파싱. DB 저장·비교용 (naive UTC), 알림 문구는 현지 시각."""
from datetime import datetime, timezone, timedelta, tzinfo


def fixed_offset(hours: float) -> timezone:
    return timezone(timedelta(hours=hours))


# 알림 본문 날짜 표시 기본값 (UTC-5)
LOCAL_TZ = fixed_offset(-5)


def now_utc() -> datetime:
    """현재 시각을 naive UTC datetime으로 반환. DB 저장 및 리마인더 비교에 사용."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """tz-aware 값은 UTC로 변환 후 tzinfo 제거, naive 값은 UTC로 간주."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def to_local(value: datetime, tz: tzinfo = LOCAL_TZ) -> datetime:
    """naive UTC 값을 현지 시각(naive)으로 변환. 화면/알림 표시용."""
    return value.replace(tzinfo=timezone.utc).astimezone(tz).replace(tzinfo=None)
