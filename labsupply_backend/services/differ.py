"""스냅샷 비교: 이전 poll 대비 상태가 바뀐 요청만 Transition 으로 반환."""
from collections.abc import Iterable

from ..schemas.solicitud import RequestSnapshotEntry, Transition


def diff_snapshots(
    current: Iterable[RequestSnapshotEntry],
    previous: Iterable[RequestSnapshotEntry],
) -> list[Transition]:
    """
    current 의 각 항목을 previous 에서 같은 request_id 로 찾아 상태(대소문자 무시)가
    다르면 Transition 1건. 새로 생긴 요청, 사라진 요청은 무시.
    """
    previous_by_key = {entry.key: entry for entry in previous}
    transitions: list[Transition] = []
    for entry in current:
        before = previous_by_key.get(entry.key)
        if before is None:
            continue
        if before.status_key == entry.status_key:
            continue
        transitions.append(
            Transition(entry=entry, previous_status=before.status, new_status=entry.status)
        )
    return transitions


def carry_forward(
    current: list[RequestSnapshotEntry],
    previous: Iterable[RequestSnapshotEntry],
    skipped_keys: Iterable[str],
) -> list[RequestSnapshotEntry]:
    """
    저장할 스냅샷. 이번 조회에서 형식 오류로 빠진 요청은 이전 항목을 그대로 유지해서
    다음 정상 조회 때 그 사이의 상태 변경이 새 요청으로 오인되지 않게 한다.
    """
    present = {entry.key for entry in current}
    skipped = set(skipped_keys) - present
    if not skipped:
        return list(current)
    kept = [entry for entry in previous if entry.key in skipped]
    return list(current) + kept
