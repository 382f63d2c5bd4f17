"""변경 알림.

감지된 변경 한 건(시각, 경로, diff)을 담고
콘솔 출력 및 wire payload 직렬화를 담당합니다.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TextIO

from src.tree_watch.diff.engine import DiffLine, DiffTag


def utcnow() -> datetime:
    """UTC 현재 시간 (timezone-aware)."""
    return datetime.now(UTC)


@dataclass
class Notification:
    """변경 알림.

    Attributes:
        path: 변경된 파일의 절대 경로
        time: 변경 최초 감지 시각 (UTC)
        diff: 태그가 붙은 라인 시퀀스
    """

    path: Path
    time: datetime = field(default_factory=utcnow)
    diff: list[DiffLine] = field(default_factory=list)

    def format_time(self) -> str:
        """로컬 타임존 기준 'YYYY-MM-DD HH:MM:SS'."""
        return self.time.astimezone().strftime("%Y-%m-%d %H:%M:%S")

    def render(self) -> list[str]:
        """콘솔 출력 라인 생성.

        COMMON 라인은 출력하지 않지만 카운터는 diff 위치를 따라 증가합니다.
        """
        lines = [f"[{self.format_time()}] - {self.path}"]
        for count, line in enumerate(self.diff, start=1):
            if line.tag is DiffTag.REMOVED:
                lines.append(f"{count:0>5} - |  {line.text}")
            elif line.tag is DiffTag.ADDED:
                lines.append(f"{count:0>5} + |  {line.text}")
        return lines

    def display(self, stream: TextIO | None = None) -> None:
        """콘솔 출력."""
        out = stream or sys.stdout
        for line in self.render():
            print(line, file=out)

    def serialize(self) -> dict[str, Any]:
        """wire payload 딕셔너리 변환."""
        return {
            "time": self.time.astimezone(UTC).isoformat(),
            "path": str(self.path),
            "diff": [
                {"direction": int(line.tag), "change": line.text}
                for line in self.diff
            ],
        }

    def to_json(self) -> str:
        """wire payload JSON 문자열."""
        return json.dumps(self.serialize(), ensure_ascii=False)

    @property
    def stats(self) -> dict[str, int]:
        """diff 라인 수 통계."""
        return {
            "removed": sum(1 for line in self.diff if line.tag is DiffTag.REMOVED),
            "added": sum(1 for line in self.diff if line.tag is DiffTag.ADDED),
            "common": sum(1 for line in self.diff if line.tag is DiffTag.COMMON),
        }
