"""알림 코어 예외. tick 경계에서 잡아서 로그만 남기고, HTTP 에서는 상태 코드로 변환."""


class LabSupplyError(Exception):
    """코어 공통 예외."""


class FetchError(LabSupplyError):
    """학교 API 조회 실패 (네트워크, timeout, non-2xx, 응답 형식 오류)."""


class StorageError(LabSupplyError):
    """로컬 DB 읽기/쓰기 실패."""


class DedupCheckError(StorageError):
    """중복 알림 여부를 확인하지 못함. 알림/스냅샷 저장 없이 다음 poll 에서 재시도."""


class NotificationNotFound(LabSupplyError):
    def __init__(self, notification_id: str) -> None:
        super().__init__(f"notification not found: {notification_id}")
        self.notification_id = notification_id


class MalformedEntryError(LabSupplyError):
    """스냅샷 항목 1건의 필수 필드 누락/형식 오류. 해당 항목만 건너뜀."""


class AlertDeliveryError(LabSupplyError):
    """로컬/푸시 알림 표시 실패. 이력 저장과는 별개라 로그만 남김."""
