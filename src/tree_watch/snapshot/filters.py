"""감시 대상 확장자 필터."""

from __future__ import annotations

from collections.abc import Collection
from pathlib import Path


def extension_of(path: Path | str) -> str | None:
    """확장자 반환 ('.' 제외). 확장자가 없으면 None.

    '.bashrc' 같은 점으로 시작하는 이름은 확장자가 없는 것으로 취급합니다.
    """
    suffix = Path(path).suffix
    return suffix[1:] if suffix else None


def is_tracked(path: Path | str, targets: Collection[str]) -> bool:
    """경로의 확장자가 감시 대상인지 확인 (대소문자 구분)."""
    ext = extension_of(path)
    return ext is not None and ext in targets
