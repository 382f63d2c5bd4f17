"""Diff 모듈."""

from src.tree_watch.diff.engine import DiffLine, DiffTag, diff_lines, split_lines

__all__ = [
    "DiffLine",
    "DiffTag",
    "diff_lines",
    "split_lines",
]
