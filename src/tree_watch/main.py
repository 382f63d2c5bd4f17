"""Tree Watch 메인 진입점."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from src.tree_watch.config.settings import ConfigError, Settings, load_settings
from src.tree_watch.core.agent import WatchAgent
from src.tree_watch.snapshot.builder import SnapshotBuildError

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """CLI 인자 파싱."""
    parser = argparse.ArgumentParser(
        description="디렉토리 변경 감시 → 라인 diff 알림",
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=None,
        help="감시 루트 디렉토리 (기본: 현재 디렉토리)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="설정 파일 경로 (기본: ./watcher.json, 없으면 생성)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="로그 레벨 (설정 파일 값 무시)",
    )
    parser.add_argument(
        "--show-tree",
        action="store_true",
        help="스냅샷 트리만 출력하고 종료",
    )
    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """로깅 설정."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


async def run_agent(settings: Settings, root: Path) -> None:
    """감시 루프 실행."""
    agent = WatchAgent(settings=settings, root=root)

    try:
        await agent.start()
    except KeyboardInterrupt:
        logger.info("키보드 인터럽트 감지")
    finally:
        await agent.stop()


def main(argv: list[str] | None = None) -> int:
    """메인 함수."""
    args = parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        setup_logging(args.log_level or "INFO")
        logger.error(f"설정 로드 실패 ({e.config_path}): {e}")
        return 1

    setup_logging(args.log_level or settings.log_level)
    root = Path(args.root) if args.root else Path.cwd()

    try:
        if args.show_tree:
            WatchAgent(settings=settings, root=root).display_tree()
            return 0
        asyncio.run(run_agent(settings, root))
    except SnapshotBuildError as e:
        logger.error(f"스냅샷 생성 실패: {e}")
        return 1
    except KeyboardInterrupt:
        pass

    return 0


if __name__ == "__main__":
    sys.exit(main())
