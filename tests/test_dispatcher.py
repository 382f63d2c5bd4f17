"""Dispatcher 테스트.

pytest tests/test_dispatcher.py -v
"""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from src.tree_watch.diff.engine import DiffLine, DiffTag
from src.tree_watch.notify.dispatcher import (
    DispatchResult,
    Dispatcher,
    normalize_endpoint,
)
from src.tree_watch.notify.notification import Notification


@pytest.fixture
def notification() -> Notification:
    """테스트용 알림."""
    return Notification(
        path=Path("/w/a.txt"),
        diff=[DiffLine(DiffTag.COMMON, "hello"), DiffLine(DiffTag.ADDED, "world")],
    )


@pytest.fixture
def recorded() -> list[httpx.Request]:
    """MockTransport가 받은 요청 기록."""
    return []


def _transport(recorded: list[httpx.Request], fail_hosts: set[str] = frozenset()):
    def handler(request: httpx.Request) -> httpx.Response:
        recorded.append(request)
        if request.url.host in fail_hosts:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, text="ok")

    return httpx.MockTransport(handler)


class TestNormalizeEndpoint:
    """엔드포인트 정규화."""

    def test_host_port(self):
        """host:port → http://host:port."""
        assert normalize_endpoint("localhost:9996") == "http://localhost:9996"

    def test_url_unchanged(self):
        """스킴이 있으면 그대로."""
        assert normalize_endpoint("https://example.com/hook") == "https://example.com/hook"

    def test_strips_whitespace(self):
        """공백 제거."""
        assert normalize_endpoint("  localhost:1 ") == "http://localhost:1"


class TestDispatcher:
    """Dispatcher 전송 테스트."""

    @pytest.mark.asyncio
    async def test_posts_payload_to_each_endpoint(
        self, notification: Notification, recorded: list[httpx.Request]
    ):
        """엔드포인트마다 POST 1회, body = wire payload."""
        async with Dispatcher(
            endpoints=["localhost:9996", "http://hooks.local/notify"],
            transport=_transport(recorded),
        ) as dispatcher:
            result = await dispatcher.dispatch(notification)

        assert result.success
        assert result.sent == ["http://localhost:9996", "http://hooks.local/notify"]
        assert [r.method for r in recorded] == ["POST", "POST"]
        assert str(recorded[1].url) == "http://hooks.local/notify"
        assert recorded[0].headers["content-type"] == "application/json"

        body = json.loads(recorded[0].content)
        assert body["path"] == "/w/a.txt"
        assert body["diff"] == [
            {"direction": 0, "change": "hello"},
            {"direction": 1, "change": "world"},
        ]

    @pytest.mark.asyncio
    async def test_continue_on_error(
        self, notification: Notification, recorded: list[httpx.Request]
    ):
        """한 엔드포인트 실패가 나머지 전송을 막지 않음."""
        async with Dispatcher(
            endpoints=["down.local:1", "up.local:2"],
            transport=_transport(recorded, fail_hosts={"down.local"}),
        ) as dispatcher:
            result = await dispatcher.dispatch(notification)

        assert not result.success
        assert list(result.failed) == ["http://down.local:1"]
        assert result.sent == ["http://up.local:2"]
        assert len(recorded) == 2

    @pytest.mark.asyncio
    async def test_no_retry(
        self, notification: Notification, recorded: list[httpx.Request]
    ):
        """실패해도 재시도하지 않음."""
        async with Dispatcher(
            endpoints=["down.local:1"],
            transport=_transport(recorded, fail_hosts={"down.local"}),
        ) as dispatcher:
            await dispatcher.dispatch(notification)

        assert len(recorded) == 1

    @pytest.mark.asyncio
    async def test_error_status_is_not_failure(self, notification: Notification):
        """응답 상태/본문은 무시."""
        transport = httpx.MockTransport(lambda request: httpx.Response(500))

        async with Dispatcher(endpoints=["localhost:1"], transport=transport) as dispatcher:
            result = await dispatcher.dispatch(notification)

        assert result.success

    @pytest.mark.asyncio
    async def test_not_connected(self, notification: Notification):
        """연결 전 전송은 모두 실패 처리."""
        dispatcher = Dispatcher(endpoints=["localhost:1"])

        result = await dispatcher.dispatch(notification)

        assert result.failed == {"http://localhost:1": "not connected"}

    @pytest.mark.asyncio
    async def test_connect_close(self, recorded: list[httpx.Request]):
        """연결/종료."""
        dispatcher = Dispatcher(endpoints=[], transport=_transport(recorded))

        assert not dispatcher.is_connected
        await dispatcher.connect()
        assert dispatcher.is_connected
        await dispatcher.close()
        assert not dispatcher.is_connected

    @pytest.mark.asyncio
    async def test_stats(
        self, notification: Notification, recorded: list[httpx.Request]
    ):
        """전송 통계."""
        async with Dispatcher(
            endpoints=["down.local:1", "up.local:2"],
            transport=_transport(recorded, fail_hosts={"down.local"}),
        ) as dispatcher:
            await dispatcher.dispatch(notification)
            await dispatcher.dispatch(notification)
            stats = dispatcher.get_stats()

        assert stats["dispatched"] == 2
        assert stats["failures"] == 2


class TestDispatchResult:
    """DispatchResult 테스트."""

    def test_empty_is_success(self):
        """실패 없으면 성공."""
        assert DispatchResult().success
