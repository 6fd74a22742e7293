"""
Polling 스케줄러: 주기적으로 solicitudes 조회 → 이전 스냅샷과 비교 → 알림 → 스냅샷 저장.

- start(): 즉시 1회 실행 후 interval 마다 반복. 이미 실행 중이면 무시
- stop(): 타이머 취소. 진행 중인 tick (수동 tick 포함) 은 끝까지 처리 (graceful drain)
- tick 은 동시에 1개만 실행 (asyncio.Lock). 진행 중에 요청되면 BUSY 로 건너뜀
"""
import asyncio
import logging
from collections.abc import Callable
from contextlib import suppress
from datetime import datetime, tzinfo

from ..config.timezone import LOCAL_TZ, now_utc
from ..schemas.poller import TickOutcome, TickResult
from ..schemas.solicitud import Transition
from .dedup import DedupGuard
from .differ import carry_forward, diff_snapshots
from .emitter import NotificationEmitter, classify
from .exceptions import FetchError, StorageError
from .reminders import ReminderEvaluator
from .request_source import RequestSourceClient
from .state_store import SessionStore, SnapshotStore

logger = logging.getLogger(__name__)


class PollScheduler:
    def __init__(
        self,
        *,
        sessions: SessionStore,
        snapshots: SnapshotStore,
        source: RequestSourceClient,
        guard: DedupGuard,
        emitter: NotificationEmitter,
        reminders: ReminderEvaluator | None = None,
        interval_seconds: float = 10.0,
        clock: Callable[[], datetime] = now_utc,
        local_tz: tzinfo = LOCAL_TZ,
    ) -> None:
        self.sessions = sessions
        self.snapshots = snapshots
        self.source = source
        self.guard = guard
        self.emitter = emitter
        self.reminders = reminders
        self.interval_seconds = interval_seconds
        self.clock = clock
        self.local_tz = local_tz
        self.last_result: TickResult | None = None
        self._running = False
        self._lock = asyncio.Lock()
        self._task: asyncio.Task | None = None
        self._inflight: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        if self._running:
            logger.info("Request polling already running, skipping start")
            return
        self._running = True
        logger.info("Starting request polling every %s seconds", self.interval_seconds)
        await self._run_tick()
        # 첫 tick 도중 stop() 된 경우 타이머를 걸지 않음
        if self._running:
            self._task = asyncio.create_task(self._loop(), name="request-poller")

    async def stop(self) -> None:
        was_running = self._running
        self._running = False
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        inflight = self._inflight
        if inflight is not None and not inflight.done():
            await asyncio.wait([inflight])
        # 수동 tick (POST /poller/tick) 도 끝날 때까지 대기
        async with self._lock:
            pass
        if self._running:
            logger.info("Request polling restarted while stopping, leaving it running")
            return
        if was_running:
            logger.info("Request polling stopped")

    async def _loop(self) -> None:
        while self._running:
            await asyncio.sleep(self.interval_seconds)
            if not self._running:
                break
            await self._run_tick()

    async def _run_tick(self) -> TickResult | None:
        # shield: 루프가 취소돼도 진행 중인 tick 은 끝까지 실행
        self._inflight = asyncio.ensure_future(self.tick())
        try:
            return await asyncio.shield(self._inflight)
        except Exception as e:
            logger.exception("Unexpected error in polling tick: %s", e)
            return None

    async def tick(self) -> TickResult:
        """fetch → diff → guard → emit → 스냅샷 저장 1 cycle."""
        if self._lock.locked():
            logger.debug("Previous tick still in flight, skipping")
            return TickResult(outcome=TickOutcome.BUSY)
        async with self._lock:
            result = await self._process()
        self.last_result = result
        return result

    async def _process(self) -> TickResult:
        try:
            student_id = await self.sessions.get_current_student_id()
        except StorageError as e:
            logger.warning("Session read failed, cycle skipped: %s", e)
            return TickResult(outcome=TickOutcome.FAILED)
        if student_id is None:
            logger.debug("No logged-in student, polling tick skipped")
            return TickResult(outcome=TickOutcome.SKIPPED)

        try:
            fetched = await self.source.fetch_snapshot(student_id)
        except FetchError as e:
            # 이전 스냅샷은 그대로: 다음 성공 poll 이 실제 마지막 상태와 비교
            logger.warning("Solicitudes fetch failed, cycle skipped: %s", e)
            return TickResult(outcome=TickOutcome.FAILED)

        current = fetched.entries
        transitions: list[Transition] = []
        created = 0
        reminders = 0
        try:
            previous = await self.snapshots.load()
            transitions = diff_snapshots(current, previous)
            for transition in transitions:
                logger.info(
                    "Status changed for solicitud %s: %s -> %s",
                    transition.entry.key,
                    transition.previous_status,
                    transition.new_status,
                )
                draft = classify(transition, tz=self.local_tz)
                if draft is None:
                    continue
                if not await self.guard.should_notify(draft.request_id, draft.kind):
                    continue
                await self.emitter.emit(draft)
                created += 1

            if self.reminders is not None:
                reminders = len(await self.reminders.run(current, self.clock()))

            # 형식 오류로 빠진 요청은 이전 상태 유지
            await self.snapshots.save(carry_forward(current, previous, fetched.skipped_keys))
        except StorageError as e:
            # 스냅샷 미저장: 다음 poll 에서 같은 변경을 다시 감지, 이미 저장된 알림은 dedup 으로 걸러짐
            logger.warning("Storage error, cycle aborted before snapshot save: %s", e)
            return TickResult(
                outcome=TickOutcome.FAILED,
                transitions=len(transitions),
                created=created,
                reminders=reminders,
            )

        outcome = TickOutcome.NEW_DATA if created or reminders else TickOutcome.NO_DATA
        return TickResult(
            outcome=outcome,
            transitions=len(transitions),
            created=created,
            reminders=reminders,
        )
