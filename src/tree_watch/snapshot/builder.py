"""스냅샷 트리 빌더.

디렉토리를 재귀적으로 순회하며 감시 대상 확장자 필터를 적용하고,
감시 대상 파일이 없는 폴더는 제거(prune)한 트리를 생성합니다.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Collection
from pathlib import Path

from src.tree_watch.snapshot.filters import is_tracked
from src.tree_watch.snapshot.node import (
    MAX_CONTENT_BYTES,
    Node,
    NodeKind,
    read_content,
    read_modified,
)

logger = logging.getLogger(__name__)


class SnapshotBuildError(Exception):
    """스냅샷 빌드 실패 (메타데이터 조회 오류)."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class SnapshotBuilder:
    """스냅샷 트리 빌더.

    기능:
    - 확장자 필터링 (targets)
    - 파일 수정 시각 + 내용 캐시
    - 빈 폴더 제거 (하위로부터 한 단계씩 전파)
    - 나열할 수 없는 디렉토리는 빈 폴더로 취급

    Examples:
        ```python
        builder = SnapshotBuilder(targets={"txt", "json"})
        root = builder.build(Path("/project"))
        root.display()
        ```
    """

    def __init__(
        self,
        targets: Collection[str],
        max_content_bytes: int = MAX_CONTENT_BYTES,
    ) -> None:
        """초기화.

        Args:
            targets: 감시할 확장자 집합 ('.' 제외)
            max_content_bytes: 캐시할 파일 내용 최대 크기
        """
        self.targets = frozenset(targets)
        self.max_content_bytes = max_content_bytes

    def build(self, root_path: Path | str) -> Node:
        """루트 디렉토리부터 스냅샷 트리 생성.

        Args:
            root_path: 감시 루트 디렉토리

        Returns:
            루트 폴더 노드 (감시 대상이 없으면 children이 빈 상태)

        Raises:
            SnapshotBuildError: 루트가 디렉토리가 아니거나 메타데이터 조회 실패
        """
        root = Path(root_path).absolute()
        if not root.is_dir():
            raise SnapshotBuildError(f"감시 루트가 디렉토리가 아님: {root}", root)

        node = self._build_folder(root)
        logger.debug(f"스냅샷 빌드 완료: {root} (파일 {node.count_files()}개)")
        return node

    def build_entry(self, path: Path) -> Node | None:
        """단일 경로 노드 생성. 제외 대상이면 None."""
        if path.is_dir():
            if path.is_symlink():
                return None
            node = self._build_folder(path)
            return node if node.children else None
        if not path.is_file():
            # FIFO, 소켓, 장치 파일, 깨진 링크
            return None
        return self._build_file(path)

    def _build_file(self, path: Path) -> Node | None:
        if not is_tracked(path, self.targets):
            return None

        try:
            modified = read_modified(path)
        except OSError as e:
            raise SnapshotBuildError(f"메타데이터 조회 실패 ({path}): {e}", path) from e

        return Node(
            kind=NodeKind.FILE,
            path=path,
            modified=modified,
            content=read_content(path, self.max_content_bytes),
        )

    def _build_folder(self, path: Path) -> Node:
        node = Node(kind=NodeKind.FOLDER, path=path)

        try:
            with os.scandir(path) as entries:
                entry_paths = [Path(entry.path) for entry in entries]
        except OSError as e:
            logger.debug(f"디렉토리 나열 실패 ({path}): {e}")
            return node

        for entry_path in entry_paths:
            child = self.build_entry(entry_path)
            if child is not None:
                node.children.append(child)

        return node
