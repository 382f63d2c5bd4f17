"""CLI 진입점 테스트."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import AsyncMock, patch

from src.tree_watch import main as main_module
from src.tree_watch.main import main, parse_args


class TestParseArgs:
    """parse_args 테스트."""

    def test_defaults(self):
        """기본 인자."""
        args = parse_args([])

        assert args.root is None
        assert args.config is None
        assert args.show_tree is False

    def test_options(self, tmp_path: Path):
        """옵션 파싱."""
        args = parse_args([str(tmp_path), "--config", "c.json", "--show-tree"])

        assert args.root == str(tmp_path)
        assert args.config == Path("c.json")
        assert args.show_tree is True


class TestMain:
    """main 테스트."""

    def test_malformed_config_exits_1(self, tmp_path: Path):
        """손상된 설정은 종료 코드 1."""
        config_path = tmp_path / "watcher.json"
        config_path.write_text("{broken", encoding="utf-8")

        assert main(["--config", str(config_path)]) == 1

    def test_show_tree(self, tmp_watch_dir: Path, tmp_path: Path, capsys):
        """--show-tree는 트리 출력 후 종료."""
        config_path = tmp_path / "watcher.json"
        config_path.write_text(json.dumps({"targets": ["txt"]}), encoding="utf-8")
        (tmp_watch_dir / "a.txt").write_text("a\n", encoding="utf-8")

        with patch.dict(os.environ, {}, clear=True):
            code = main([str(tmp_watch_dir), "--config", str(config_path), "--show-tree"])

        assert code == 0
        assert "└── a.txt" in capsys.readouterr().out

    def test_missing_root_exits_1(self, tmp_path: Path):
        """감시 루트가 없으면 종료 코드 1."""
        config_path = tmp_path / "watcher.json"

        with patch.dict(os.environ, {}, clear=True):
            code = main([str(tmp_path / "missing"), "--config", str(config_path)])

        assert code == 1
        assert config_path.exists()

    def test_runs_agent(self, tmp_watch_dir: Path, tmp_path: Path):
        """기본 실행은 run_agent 호출."""
        config_path = tmp_path / "watcher.json"

        with patch.dict(os.environ, {}, clear=True):
            with patch.object(main_module, "run_agent", new_callable=AsyncMock) as run:
                code = main([str(tmp_watch_dir), "--config", str(config_path)])

        assert code == 0
        run.assert_awaited_once()
        assert run.await_args[0][1] == tmp_watch_dir
