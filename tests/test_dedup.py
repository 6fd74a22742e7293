import pytest

from labsupply_backend.schemas.notification import NotificationDraft, NotificationKind
from labsupply_backend.services.dedup import DedupGuard
from labsupply_backend.services.exceptions import DedupCheckError, StorageError


class BrokenStore:
    async def has_notification(self, request_id, kind):
        raise StorageError("disk I/O error")


@pytest.mark.asyncio
async def test_should_notify_until_recorded(store):
    guard = DedupGuard(store)

    assert await guard.should_notify("1", NotificationKind.REQUEST_APPROVED)

    await store.append(
        NotificationDraft(kind=NotificationKind.REQUEST_APPROVED, title="t", body="b", request_id="1")
    )

    assert not await guard.should_notify("1", NotificationKind.REQUEST_APPROVED)
    # 다른 kind 는 별도 dedup key
    assert await guard.should_notify("1", NotificationKind.REQUEST_REJECTED)


@pytest.mark.asyncio
async def test_storage_failure_is_not_answered():
    guard = DedupGuard(BrokenStore())

    with pytest.raises(DedupCheckError):
        await guard.should_notify("1", NotificationKind.REQUEST_APPROVED)
