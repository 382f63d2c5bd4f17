"""Notify 모듈."""

from src.tree_watch.notify.dispatcher import (
    DispatchResult,
    Dispatcher,
    normalize_endpoint,
)
from src.tree_watch.notify.notification import Notification

__all__ = [
    "DispatchResult",
    "Dispatcher",
    "Notification",
    "normalize_endpoint",
]
