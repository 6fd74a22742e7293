"""서비스 조립 (composition root). 앱 lifespan 에서 1회 생성해 app.state 에 보관."""
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from .config.database import create_engine, create_sessionmaker, init_db
from .config.settings import Settings
from .config.timezone import fixed_offset
from .services.alerts import AlertSink, ExpoPushAlertSink, LoggingAlertSink
from .services.badge import BadgeCounter
from .services.dedup import DedupGuard
from .services.emitter import NotificationEmitter
from .services.poller import PollScheduler
from .services.record_store import NotificationStore
from .services.reminders import ReminderEvaluator
from .services.request_source import RequestSourceClient
from .services.state_store import SessionStore, SnapshotStore, StateStore


@dataclass
class Container:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    state: StateStore
    sessions: SessionStore
    snapshots: SnapshotStore
    store: NotificationStore
    guard: DedupGuard
    alerts: AlertSink
    emitter: NotificationEmitter
    reminders: ReminderEvaluator
    poller: PollScheduler
    badge: BadgeCounter

    async def startup(self) -> None:
        await init_db(self.engine)
        await self.badge.start()
        if self.settings.poll_on_startup:
            await self.poller.start()

    async def shutdown(self) -> None:
        await self.poller.stop()
        await self.emitter.drain()
        await self.badge.stop()
        await self.alerts.aclose()
        await self.engine.dispose()


def build_alert_sink(settings: Settings) -> AlertSink:
    if settings.push_enabled:
        return ExpoPushAlertSink(
            settings.expo_push_token,
            url=settings.expo_push_url,
            retry_attempts=settings.push_retry_attempts,
            retry_delay_ms=settings.push_retry_delay_ms,
            timeout=settings.request_timeout_seconds,
        )
    return LoggingAlertSink()


def build_container(
    settings: Settings,
    *,
    engine: AsyncEngine | None = None,
    alerts: AlertSink | None = None,
    source: RequestSourceClient | None = None,
) -> Container:
    engine = engine or create_engine(settings.database_url, echo=settings.debug)
    session_factory = create_sessionmaker(engine)
    state = StateStore(session_factory)
    sessions = SessionStore(state)
    snapshots = SnapshotStore(state)
    store = NotificationStore(session_factory)
    guard = DedupGuard(store)
    alerts = alerts or build_alert_sink(settings)
    emitter = NotificationEmitter(store, alerts, sound=settings.notification_sound)
    reminders = ReminderEvaluator(guard, emitter, window_hours=settings.reminder_window_hours)
    source = source or RequestSourceClient(settings.api_url, timeout=settings.request_timeout_seconds)
    poller = PollScheduler(
        sessions=sessions,
        snapshots=snapshots,
        source=source,
        guard=guard,
        emitter=emitter,
        reminders=reminders if settings.reminders_enabled else None,
        interval_seconds=settings.poll_interval_seconds,
        local_tz=fixed_offset(settings.local_utc_offset_hours),
    )
    badge = BadgeCounter(
        store,
        interval_seconds=settings.badge_interval_seconds,
        max_count=settings.badge_max_count,
    )
    return Container(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        state=state,
        sessions=sessions,
        snapshots=snapshots,
        store=store,
        guard=guard,
        alerts=alerts,
        emitter=emitter,
        reminders=reminders,
        poller=poller,
        badge=badge,
    )
