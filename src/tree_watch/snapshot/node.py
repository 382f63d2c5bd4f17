"""스냅샷 트리 노드.

감시 중인 파일시스템의 한 경로(파일 또는 폴더)를 나타내며,
파일 노드는 마지막으로 관찰한 수정 시각과 전체 내용을 캐시합니다.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)

MAX_CONTENT_BYTES = 10 * 1024 * 1024

# 트리 표시 설정
NAME_MAX_WIDTH = 60
NAME_COLUMN_OFFSET = 20


class NodeKind(str, Enum):
    """노드 종류."""

    FILE = "file"
    FOLDER = "folder"


@dataclass
class Node:
    """스냅샷 트리 노드.

    Attributes:
        kind: 파일 / 폴더
        path: 절대 경로
        name: 마지막 경로 요소
        modified: 마지막 수정 시각 (epoch 밀리초), 폴더 또는 확인 불가 시 None
        content: 캐시된 파일 내용, 폴더 또는 읽기 불가/크기 초과 시 None
        children: 자식 노드 (폴더만, 디렉토리 순회 순서)
    """

    kind: NodeKind
    path: Path
    name: str = ""
    modified: int | None = None
    content: str | None = None
    children: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        """name 기본값 설정."""
        if not self.name:
            self.name = self.path.name or str(self.path)

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    @property
    def is_folder(self) -> bool:
        return self.kind is NodeKind.FOLDER

    def iter_files(self) -> Iterator[Node]:
        """하위 파일 노드 순회 (전위 순서)."""
        if self.is_file:
            yield self
        for child in self.children:
            yield from child.iter_files()

    def count_files(self) -> int:
        """하위 파일 노드 수."""
        return sum(1 for _ in self.iter_files())

    def display(self, stream: TextIO | None = None) -> None:
        """트리 출력 (진단용)."""
        out = stream or sys.stdout
        for line in render_tree(self):
            print(line, file=out)


def read_modified(path: Path) -> int | None:
    """파일 수정 시각 조회 (epoch 밀리초).

    파일이 없으면 None을 반환하고, 그 외 OS 오류는 그대로 전파합니다.
    """
    try:
        stat = path.stat()
    except FileNotFoundError:
        return None
    return stat.st_mtime_ns // 1_000_000


def read_content(path: Path, max_bytes: int = MAX_CONTENT_BYTES) -> str | None:
    """파일 전체 내용 읽기.

    개행 변환 없이 UTF-8로 읽습니다.
    일반 파일이 아니거나 열기 실패, 크기 초과, 디코딩 실패 시 None.
    """
    if not path.is_file():
        logger.debug(f"일반 파일 아님: {path}")
        return None

    try:
        with open(path, encoding="utf-8", newline="") as f:
            size = os.fstat(f.fileno()).st_size
            if size > max_bytes:
                logger.debug(f"파일 크기 초과 ({size} bytes): {path}")
                return None
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"파일 읽기 실패 ({path}): {e}")
        return None


def render_tree(node: Node, prefix: str = "") -> list[str]:
    """트리를 박스 문자 접두어가 붙은 라인 리스트로 변환.

    각 라인: '└── 이름......... Last Modified: <ms> millis'
    이름이 60자를 넘으면 잘라내고 '...'을 붙입니다.
    """
    name = node.name
    if len(name) > NAME_MAX_WIDTH:
        name = f"{name[:NAME_MAX_WIDTH]}..."

    name_column = f"{prefix}└── {name}"
    modified = node.modified if node.modified is not None else "-"
    lines = [
        f"{name_column:.<{NAME_MAX_WIDTH + NAME_COLUMN_OFFSET}} "
        f"Last Modified: {modified} millis"
    ]

    for child in node.children:
        lines.extend(render_tree(child, f"{prefix}│  "))
    return lines
