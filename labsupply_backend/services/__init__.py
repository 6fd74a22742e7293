from .record_store import NotificationStore
from .state_store import StateStore, SessionStore, SnapshotStore
from .differ import carry_forward, diff_snapshots
from .dedup import DedupGuard
from .alerts import AlertSink, LoggingAlertSink, ExpoPushAlertSink, LocalAlert
from .emitter import NotificationEmitter, classify
from .reminders import ReminderEvaluator
from .request_source import RequestSourceClient
from .poller import PollScheduler
from .badge import BadgeCounter

__all__ = [
    "NotificationStore",
    "StateStore",
    "SessionStore",
    "SnapshotStore",
    "diff_snapshots",
    "carry_forward",
    "DedupGuard",
    "AlertSink",
    "LoggingAlertSink",
    "ExpoPushAlertSink",
    "LocalAlert",
    "NotificationEmitter",
    "classify",
    "ReminderEvaluator",
    "RequestSourceClient",
    "PollScheduler",
    "BadgeCounter",
]
