"""Core 모듈."""

from src.tree_watch.core.agent import WatchAgent
from src.tree_watch.core.scheduler import Scheduler

__all__ = [
    "Scheduler",
    "WatchAgent",
]
