"""알림 디스패처.

httpx 기반으로 설정된 각 엔드포인트에 알림 payload를 POST합니다.
엔드포인트 하나의 실패는 다른 엔드포인트 전송을 막지 않으며 재시도하지 않습니다.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.tree_watch.notify.notification import Notification

logger = logging.getLogger(__name__)


def normalize_endpoint(endpoint: str) -> str:
    """스킴이 없는 'host:port' 형식에 http:// 추가."""
    endpoint = endpoint.strip()
    if "://" not in endpoint:
        return f"http://{endpoint}"
    return endpoint


@dataclass
class DispatchResult:
    """전송 결과."""

    sent: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        """모든 엔드포인트 전송 성공 여부."""
        return not self.failed


class Dispatcher:
    """HTTP 알림 디스패처.

    특징:
    - 엔드포인트별 순차 POST (body: Notification.to_json())
    - 엔드포인트별 실패 격리 (continue-on-error)
    - 재시도 없음, 응답 본문 무시

    Examples:
        ```python
        async with Dispatcher(endpoints=["localhost:9996"]) as dispatcher:
            result = await dispatcher.dispatch(notification)
            print(result.sent, result.failed)
        ```
    """

    def __init__(
        self,
        endpoints: Sequence[str],
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """초기화.

        Args:
            endpoints: 알림 대상 (host:port 또는 URL)
            timeout: 요청 타임아웃 (초)
            transport: httpx 전송 계층 (테스트 주입용)
        """
        self.endpoints = [normalize_endpoint(e) for e in endpoints]
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._dispatched = 0
        self._failures = 0

    async def connect(self) -> None:
        """HTTP 클라이언트 초기화."""
        if self._client is not None:
            logger.warning("Dispatcher가 이미 연결됨")
            return

        self._client = httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        )
        logger.info(f"Dispatcher 연결: 엔드포인트 {len(self.endpoints)}개")

    async def close(self) -> None:
        """연결 종료."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Dispatcher 연결 종료")

    async def dispatch(self, notification: Notification) -> DispatchResult:
        """알림을 모든 엔드포인트에 전송.

        Args:
            notification: 전송할 알림

        Returns:
            DispatchResult (성공/실패 엔드포인트)
        """
        result = DispatchResult()

        if self._client is None:
            logger.error("Dispatcher가 연결되지 않음")
            for endpoint in self.endpoints:
                result.failed[endpoint] = "not connected"
            return result

        body = notification.to_json()

        for endpoint in self.endpoints:
            try:
                response = await self._client.post(endpoint, content=body)
                logger.debug(f"알림 전송: {endpoint} (status={response.status_code})")
                result.sent.append(endpoint)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.warning(f"알림 전송 실패 ({endpoint}): {e}")
                result.failed[endpoint] = str(e)

        self._dispatched += 1
        self._failures += len(result.failed)
        return result

    @property
    def is_connected(self) -> bool:
        """연결 여부."""
        return self._client is not None

    def get_stats(self) -> dict[str, Any]:
        """통계 조회."""
        return {
            "endpoints": list(self.endpoints),
            "dispatched": self._dispatched,
            "failures": self._failures,
        }

    async def __aenter__(self) -> Dispatcher:
        """async with 지원."""
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """async with 종료."""
        await self.close()
