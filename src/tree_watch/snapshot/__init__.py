"""Snapshot 모듈."""

from src.tree_watch.snapshot.builder import SnapshotBuildError, SnapshotBuilder
from src.tree_watch.snapshot.filters import extension_of, is_tracked
from src.tree_watch.snapshot.node import Node, NodeKind, render_tree
from src.tree_watch.snapshot.poller import Poller

__all__ = [
    "Node",
    "NodeKind",
    "Poller",
    "SnapshotBuildError",
    "SnapshotBuilder",
    "extension_of",
    "is_tracked",
    "render_tree",
]
