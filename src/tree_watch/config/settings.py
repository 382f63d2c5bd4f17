"""Tree Watch 설정 모듈.

JSON 설정 파일 + 환경 변수 기반 Settings 클래스.
설정 파일이 없으면 기본값을 저장한 뒤 사용합니다.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "watcher.json"

# 설정 파일에 저장되는 필드
PERSISTED_FIELDS = (
    "targets",
    "endpoints",
    "poll_interval",
    "rebuild_every",
    "request_timeout",
    "max_content_bytes",
    "log_level",
)


class ConfigError(Exception):
    """설정 파일 오류 (시작 시 치명적)."""

    def __init__(self, message: str, config_path: Path | None = None):
        super().__init__(message)
        self.config_path = config_path


def get_config_path() -> Path:
    """기본 설정 파일 경로 반환 (현재 작업 디렉토리 기준)."""
    return Path.cwd() / DEFAULT_CONFIG_FILE


class Settings(BaseSettings):
    """Tree Watch 설정.

    환경 변수 PREFIX: TREE_WATCH_
    우선순위: 환경 변수 > .env > 설정 파일 값

    Examples:
        ```bash
        export TREE_WATCH_TARGETS='["py", "md"]'
        export TREE_WATCH_ENDPOINTS='["http://localhost:9996/hook"]'
        export TREE_WATCH_POLL_INTERVAL=0.5
        ```
    """

    model_config = SettingsConfigDict(
        env_prefix="TREE_WATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === 감시 대상 ===
    targets: list[str] = Field(
        default_factory=lambda: ["txt", "json", "toml", "rs"],
        description="감시할 확장자 목록 (구분자 '.' 제외)",
    )

    # === 알림 엔드포인트 ===
    endpoints: list[str] = Field(
        default_factory=lambda: ["localhost:9996"],
        description="변경 알림 POST 대상 (host:port 또는 URL)",
    )
    request_timeout: float = Field(
        default=10.0,
        ge=0.1,
        le=300.0,
        description="엔드포인트 요청 타임아웃 (초)",
    )

    # === 폴링 설정 ===
    poll_interval: float = Field(
        default=1.0,
        ge=0.01,
        le=3600.0,
        description="폴링 간격 (초)",
    )
    rebuild_every: int = Field(
        default=1000,
        ge=1,
        le=1_000_000,
        description="스냅샷 트리 전체 재구성 주기 (폴링 횟수)",
    )

    # === 스냅샷 설정 ===
    max_content_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=0,
        description="캐시할 파일 내용 최대 크기 (바이트)",
    )

    # === 로깅 설정 ===
    log_level: str = Field(
        default="INFO",
        description="로그 레벨 (DEBUG, INFO, WARNING, ERROR)",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """환경 변수가 설정 파일 값(init 인자)보다 우선."""
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @field_validator("targets")
    @classmethod
    def validate_targets(cls, value: list[str]) -> list[str]:
        """확장자 정규화 (앞쪽 '.' 제거, 빈 값 거부)."""
        normalized = []
        for ext in value:
            ext = ext.lstrip(".")
            if not ext:
                raise ValueError("빈 확장자는 허용되지 않습니다")
            normalized.append(ext)
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """로그 레벨 검증."""
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"알 수 없는 로그 레벨: {value}")
        return level

    @property
    def target_set(self) -> frozenset[str]:
        """확장자 집합 (필터용)."""
        return frozenset(self.targets)

    def to_file_dict(self) -> dict[str, Any]:
        """설정 파일에 저장할 딕셔너리."""
        return self.model_dump(include=set(PERSISTED_FIELDS))

    def save(self, config_path: Path | None = None) -> Path:
        """설정을 파일에 저장.

        Args:
            config_path: 저장 경로 (기본: ./watcher.json)

        Returns:
            저장된 파일 경로
        """
        path = config_path or get_config_path()
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_file_dict(), f, indent=2, ensure_ascii=False)
        return path


def load_settings(config_path: Path | None = None) -> Settings:
    """설정 파일 로드.

    파일이 없으면 기본 설정을 저장하고 사용합니다.
    파일이 손상되었거나 검증에 실패하면 ConfigError를 발생시킵니다.

    Args:
        config_path: 설정 파일 경로 (기본: ./watcher.json)

    Returns:
        Settings

    Raises:
        ConfigError: JSON 파싱 실패, 검증 실패, 읽기/쓰기 오류
    """
    path = config_path or get_config_path()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        defaults = Settings.model_construct()
        try:
            defaults.save(path)
        except OSError as e:
            raise ConfigError(f"기본 설정 저장 실패: {e}", path) from e
        logger.info(f"설정 파일 없음, 기본 설정 생성: {path}")
        data = defaults.to_file_dict()
    except json.JSONDecodeError as e:
        raise ConfigError(f"설정 파일 파싱 실패: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"설정 파일 읽기 실패: {e}", path) from e

    if not isinstance(data, dict):
        raise ConfigError("설정 파일 최상위는 객체여야 합니다", path)

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigError(f"설정 검증 실패: {e}", path) from e
