from .solicitud import FetchedSnapshot, RequestSnapshotEntry, Transition
from .notification import (
    NotificationKind,
    NotificationPayload,
    ApprovedPayload,
    RejectedPayload,
    PendingPayload,
    ReminderPayload,
    NotificationDraft,
    NotificationResponse,
    NotificationListResponse,
    UnreadCountResponse,
    PruneResponse,
)
from .poller import TickOutcome, TickResult, PollerStatusResponse, SessionRequest

__all__ = [
    "FetchedSnapshot",
    "RequestSnapshotEntry",
    "Transition",
    "NotificationKind",
    "NotificationPayload",
    "ApprovedPayload",
    "RejectedPayload",
    "PendingPayload",
    "ReminderPayload",
    "NotificationDraft",
    "NotificationResponse",
    "NotificationListResponse",
    "UnreadCountResponse",
    "PruneResponse",
    "TickOutcome",
    "TickResult",
    "PollerStatusResponse",
    "SessionRequest",
]
