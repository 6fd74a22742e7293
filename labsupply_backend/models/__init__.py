from .notification import Notification
from .app_state import AppState

__all__ = [
    "Notification",
    "AppState",
]
