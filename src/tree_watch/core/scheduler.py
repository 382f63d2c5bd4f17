"""폴링 주기 / 트리 재구성 주기 스케줄러."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any


class Scheduler:
    """폴링 스케줄러.

    poll_interval마다 한 사이클을 실행하고,
    rebuild_every 사이클마다 트리 재구성 시점을 알려줍니다.
    sleep 함수를 주입하면 실제 대기 없이 테스트할 수 있습니다.
    """

    def __init__(
        self,
        poll_interval: float = 1.0,
        rebuild_every: int = 1000,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """초기화.

        Args:
            poll_interval: 폴링 간격 (초)
            rebuild_every: 재구성 주기 (사이클 수, 1 이상)
            sleep: 비동기 대기 함수
        """
        if rebuild_every < 1:
            raise ValueError("rebuild_every는 1 이상이어야 합니다")

        self.poll_interval = poll_interval
        self.rebuild_every = rebuild_every
        self._sleep = sleep
        self._cycle = 0
        self._total_cycles = 0
        self._rebuilds = 0

    def advance(self) -> bool:
        """사이클 1회 진행. 재구성 시점이면 True."""
        self._cycle += 1
        self._total_cycles += 1

        if self._cycle >= self.rebuild_every:
            self._cycle = 0
            self._rebuilds += 1
            return True
        return False

    async def wait(self) -> None:
        """다음 사이클까지 대기."""
        await self._sleep(self.poll_interval)

    def get_stats(self) -> dict[str, Any]:
        """통계 조회."""
        return {
            "poll_interval": self.poll_interval,
            "rebuild_every": self.rebuild_every,
            "cycle": self._cycle,
            "total_cycles": self._total_cycles,
            "rebuilds": self._rebuilds,
        }
