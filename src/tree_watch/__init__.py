"""Tree Watch: 디렉토리 스냅샷 폴링 + 라인 diff 알림."""

__version__ = "0.1.0"
