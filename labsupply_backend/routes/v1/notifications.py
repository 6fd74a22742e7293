"""로컬 알림 이력 API: 목록, 안읽음 배지, 읽음 처리, 삭제, 오래된 알림 정리."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from ...container import Container
from ...middleware.deps import get_container
from ...models.notification import Notification
from ...schemas.notification import (
    NotificationListResponse,
    NotificationResponse,
    PruneResponse,
    UnreadCountResponse,
    payload_adapter,
)

router = APIRouter()


def _to_response(n: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=n.id,
        title=n.title,
        message=n.message,
        kind=n.kind,
        createdAt=n.created_at,
        isRead=n.is_read,
        requestId=n.request_id,
        subjectName=n.subject_name,
        notes=n.notes,
        payload=payload_adapter.validate_python(n.payload) if n.payload else None,
    )


@router.get(
    "/list",
    response_model=NotificationListResponse,
    summary="알림 목록 (최신순, unread=true 면 안읽음만)",
)
async def notification_list(
    container: Annotated[Container, Depends(get_container)],
    unread: bool = Query(False),
):
    rows = await container.store.get_unread() if unread else await container.store.get_all()
    return NotificationListResponse(
        items=[_to_response(r) for r in rows],
        unreadCount=await container.store.get_unread_count(),
    )


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
    summary="안읽음 배지 카운트",
)
async def unread_count(container: Annotated[Container, Depends(get_container)]):
    count = await container.badge.refresh()
    return UnreadCountResponse(unreadCount=count, label=container.badge.label())


@router.post(
    "/read-all",
    response_model=UnreadCountResponse,
    summary="전체 읽음 처리",
)
async def mark_all_read(container: Annotated[Container, Depends(get_container)]):
    await container.store.mark_all_read()
    count = await container.badge.refresh()
    return UnreadCountResponse(unreadCount=count, label=container.badge.label())


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="알림 1건 읽음 처리",
    responses={404: {"description": "알림 없음"}},
)
async def mark_read(
    notification_id: str,
    container: Annotated[Container, Depends(get_container)],
):
    notification = await container.store.mark_read(notification_id)
    await container.badge.refresh()
    return _to_response(notification)


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="알림 1건 삭제",
    responses={404: {"description": "알림 없음"}},
)
async def delete_notification(
    notification_id: str,
    container: Annotated[Container, Depends(get_container)],
):
    await container.store.delete(notification_id)
    await container.badge.refresh()


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="알림 전체 삭제",
)
async def clear_notifications(container: Annotated[Container, Depends(get_container)]):
    await container.store.clear_all()
    await container.badge.refresh()


@router.post(
    "/prune",
    response_model=PruneResponse,
    summary="보존 기간(기본 30일)이 지난 알림 정리",
)
async def prune_notifications(
    container: Annotated[Container, Depends(get_container)],
    days: int | None = Query(None, ge=0),
):
    retention = days if days is not None else container.settings.notification_retention_days
    removed = await container.store.prune_older_than(retention)
    count = await container.badge.refresh()
    return PruneResponse(removed=removed, unreadCount=count)
