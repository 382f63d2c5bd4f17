"""WatchAgent - 스냅샷 감시 실행 루프.

설계:
- 시작 시 스냅샷 트리 1회 생성
- 매 사이클: 폴링 → 가장 최근 알림 1건 출력/전송 → 나머지 폐기
- rebuild_every 사이클마다 트리 전체 재구성
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

from src.tree_watch.config.settings import Settings
from src.tree_watch.core.scheduler import Scheduler
from src.tree_watch.notify.dispatcher import Dispatcher
from src.tree_watch.notify.notification import Notification
from src.tree_watch.snapshot.builder import SnapshotBuildError, SnapshotBuilder
from src.tree_watch.snapshot.node import Node
from src.tree_watch.snapshot.poller import Poller

logger = logging.getLogger(__name__)


class WatchAgent:
    """디렉토리 변경 감시 에이전트.

    기능:
    - 확장자 필터 기반 스냅샷 트리 생성
    - mtime 비교 폴링 + 라인 diff 알림
    - 콘솔 출력 + HTTP 엔드포인트 전송
    - 주기적 트리 재구성 (새 파일/삭제 반영)

    Examples:
        ```python
        settings = load_settings()
        agent = WatchAgent(settings=settings, root=Path.cwd())

        await agent.start()  # stop() 또는 취소 전까지 실행
        ```
    """

    def __init__(
        self,
        settings: Settings,
        root: Path,
        dispatcher: Dispatcher | None = None,
        scheduler: Scheduler | None = None,
        stream: TextIO | None = None,
    ) -> None:
        """초기화.

        Args:
            settings: 설정
            root: 감시 루트 디렉토리
            dispatcher: 알림 디스패처 (기본: settings.endpoints)
            scheduler: 스케줄러 (기본: settings.poll_interval / rebuild_every)
            stream: 알림 출력 스트림 (기본: stdout)
        """
        self.settings = settings
        self.root = Path(root).absolute()
        self._running = False
        self._stream = stream

        # 컴포넌트 초기화
        self.builder = SnapshotBuilder(
            targets=settings.target_set,
            max_content_bytes=settings.max_content_bytes,
        )
        self.poller = Poller(max_content_bytes=settings.max_content_bytes)
        self.dispatcher = dispatcher or Dispatcher(
            endpoints=settings.endpoints,
            timeout=settings.request_timeout,
        )
        self.scheduler = scheduler or Scheduler(
            poll_interval=settings.poll_interval,
            rebuild_every=settings.rebuild_every,
        )

        self.tree: Node | None = None
        self._notified = 0
        self._discarded = 0

    def build(self) -> Node:
        """스냅샷 트리 생성 (실패 시 SnapshotBuildError 전파)."""
        self.tree = self.builder.build(self.root)
        logger.info(f"스냅샷 생성: {self.root} (파일 {self.tree.count_files()}개)")
        return self.tree

    def rebuild(self) -> None:
        """트리 전체 재구성. 실패하면 기존 트리를 유지합니다."""
        try:
            self.build()
        except SnapshotBuildError as e:
            logger.error(f"스냅샷 재구성 실패, 기존 트리 유지: {e}")

    async def start(self, max_cycles: int | None = None) -> None:
        """에이전트 시작.

        Args:
            max_cycles: 최대 사이클 수 (None이면 무한)
        """
        self._running = True
        logger.info("=" * 60)
        logger.info("WatchAgent 시작")
        logger.info("=" * 60)
        logger.info(f"감시 경로: {self.root}")
        logger.info(f"확장자: {', '.join(self.settings.targets)}")
        logger.info(f"엔드포인트: {', '.join(self.dispatcher.endpoints) or '(없음)'}")
        logger.info(f"폴링 주기: {self.scheduler.poll_interval}초")
        logger.info(f"재구성 주기: {self.scheduler.rebuild_every} 사이클")
        logger.info("=" * 60)

        if self.tree is None:
            self.build()

        if not self.dispatcher.is_connected:
            await self.dispatcher.connect()

        cycles = 0
        try:
            while self._running:
                await self.run_cycle()
                cycles += 1
                if max_cycles is not None and cycles >= max_cycles:
                    break
                await self.scheduler.wait()
        except asyncio.CancelledError:
            logger.info("WatchAgent 태스크 취소됨")
            raise
        finally:
            self._running = False

    async def run_cycle(self) -> Notification | None:
        """폴링 1 사이클.

        Returns:
            출력/전송된 알림 (없으면 None)
        """
        if self.tree is None:
            self.build()

        notifications: list[Notification] = []
        self.poller.poll(self.tree, notifications)

        notification = None
        if notifications:
            notification = notifications.pop()
            if notifications:
                self._discarded += len(notifications)
                logger.debug(f"알림 {len(notifications)}건 폐기 (사이클당 1건만 처리)")

            logger.debug(f"알림 처리: {notification.path} {notification.stats}")
            notification.display(self._stream)
            result = await self.dispatcher.dispatch(notification)
            self._notified += 1
            if result.failed:
                logger.debug(f"전송 실패 엔드포인트: {list(result.failed)}")

        if self.scheduler.advance():
            logger.info("스냅샷 재구성 주기 도달")
            self.rebuild()

        return notification

    def display_tree(self, stream: TextIO | None = None) -> None:
        """현재 트리 출력 (진단용)."""
        if self.tree is None:
            self.build()
        self.tree.display(stream or self._stream or sys.stdout)

    async def stop(self) -> None:
        """에이전트 중지."""
        logger.info("WatchAgent 중지 시작...")
        self._running = False

        await self.dispatcher.close()

        logger.info("WatchAgent 중지 완료")

    def get_stats(self) -> dict[str, Any]:
        """상태 통계 조회."""
        return {
            "running": self._running,
            "root": str(self.root),
            "tracked_files": self.tree.count_files() if self.tree else 0,
            "notified": self._notified,
            "discarded": self._discarded,
            "scheduler": self.scheduler.get_stats(),
            "dispatcher": self.dispatcher.get_stats(),
        }
