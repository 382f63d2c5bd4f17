"""스냅샷 트리 폴러.

기존 트리를 그대로 순회하며 파일 수정 시각을 다시 읽고,
변경이 감지되면 diff를 계산해 알림을 생성합니다.
트리 구조는 변경하지 않으므로 새 파일/삭제된 파일은 다음 재구성 전까지 보이지 않습니다.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from src.tree_watch.diff.engine import diff_lines
from src.tree_watch.notify.notification import Notification, utcnow
from src.tree_watch.snapshot.node import (
    MAX_CONTENT_BYTES,
    Node,
    read_content,
    read_modified,
)

logger = logging.getLogger(__name__)


class Poller:
    """수정 시각 비교 기반 변경 감지기.

    이전/현재 내용 중 하나라도 없으면 알림을 만들지 않지만 캐시는 항상 갱신합니다.
    """

    def __init__(
        self,
        max_content_bytes: int = MAX_CONTENT_BYTES,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """초기화.

        Args:
            max_content_bytes: 캐시할 파일 내용 최대 크기
            clock: 알림 시각 생성 함수 (테스트 주입용)
        """
        self.max_content_bytes = max_content_bytes
        self._clock = clock

    def poll(self, node: Node, out: list[Notification]) -> None:
        """트리 전위 순회하며 변경 감지.

        Args:
            node: 순회 시작 노드 (보통 루트)
            out: 감지된 알림을 추가할 리스트
        """
        if node.is_file:
            self._poll_file(node, out)

        for child in node.children:
            self.poll(child, out)

    def _poll_file(self, node: Node, out: list[Notification]) -> None:
        try:
            modified = read_modified(node.path)
        except OSError:
            modified = None

        if modified != node.modified:
            notification = Notification(path=node.path, time=self._clock())
            old_content = node.content
            new_content = read_content(node.path, self.max_content_bytes)

            if old_content is not None and new_content is not None:
                notification.diff = diff_lines(old_content, new_content)
                out.append(notification)
                logger.debug(f"변경 감지: {node.path}")
            else:
                logger.debug(f"변경 감지 (내용 없음, 알림 생략): {node.path}")

            node.content = new_content

        node.modified = modified
