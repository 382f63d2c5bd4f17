"""Pytest fixtures for Tree Watch tests."""

import os
from pathlib import Path

import pytest


@pytest.fixture
def tmp_watch_dir(tmp_path: Path) -> Path:
    """임시 감시 디렉토리."""
    watch_dir = tmp_path / "watch"
    watch_dir.mkdir()
    return watch_dir


@pytest.fixture
def bump_mtime():
    """파일 내용을 쓰고 mtime을 확실히 변경 (파일시스템 해상도 무관)."""

    def _write(path: Path, content: str | bytes, seconds: int = 5) -> int:
        before = path.stat().st_mtime_ns if path.exists() else 0
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8", newline="")
        new_ns = before + seconds * 1_000_000_000
        os.utime(path, ns=(new_ns, new_ns))
        return new_ns // 1_000_000

    return _write
