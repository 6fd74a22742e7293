"""
학교 API 연결 상태 확인 스크립트 (DB 저장 없음)

사용: python check_api_connection.py <id_estudiante> [<id_estudiante> ...]
"""
import asyncio
import sys
from datetime import timedelta
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, str(Path(__file__).parent))

from labsupply_backend.config.settings import settings
from labsupply_backend.config.timezone import now_utc
from labsupply_backend.services.emitter import status_kind
from labsupply_backend.services.exceptions import FetchError
from labsupply_backend.services.reminders import find_reminder_candidates
from labsupply_backend.services.request_source import RequestSourceClient


async def check_api_connection(student_ids: list[str]) -> int:
    print("=" * 60)
    print(f"solicitudes API 연결 확인: {settings.api_url}")
    print("=" * 60)

    client = RequestSourceClient(settings.api_url, timeout=settings.request_timeout_seconds)
    window = timedelta(hours=settings.reminder_window_hours)
    failures = 0

    for i, student_id in enumerate(student_ids, 1):
        print(f"\n[{i}/{len(student_ids)}] id_estudiante={student_id}")
        print("-" * 60)
        try:
            fetched = await client.fetch_snapshot(student_id)
        except FetchError as e:
            print(f"[FAIL] {e}")
            failures += 1
            continue

        snapshot = fetched.entries
        print(f"[OK] {len(snapshot)}건")
        if fetched.skipped_keys:
            print(f"   형식 오류로 건너뜀: {', '.join(sorted(fetched.skipped_keys))}")
        for entry in snapshot:
            kind = status_kind(entry.status)
            print(
                f"   #{entry.key} {entry.subject_name} | {entry.status} "
                f"({kind.value if kind else '알림 없음'}) | {entry.starts_at:%Y-%m-%d %H:%M}"
            )
        reminders = find_reminder_candidates(snapshot, now_utc(), window)
        if reminders:
            print(f"   리마인더 대상: {', '.join(d.request_id for d in reminders)}")

    print("\n" + "=" * 60)
    print(f"총 {len(student_ids)}명 중 {len(student_ids) - failures}명 성공")
    return 1 if failures else 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(check_api_connection(sys.argv[1:])))
