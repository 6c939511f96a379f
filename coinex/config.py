"""환경변수 기반 애플리케이션 설정 로더."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr

# 설치된 패키지에서도 실행 위치의 .env 를 읽는다
load_dotenv(find_dotenv(usecwd=True))

DEFAULT_REST_BASE_URL = "https://api.coinex.com/v1"


def _to_bool(value: str | bool | None, default: bool = False) -> bool:
    """문자열 값을 불리언으로 변환한다."""
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(value: str | int | None, default: int) -> int:
    """문자열 값을 정수로 변환한다."""
    if isinstance(value, int):
        return value
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_optional_float(value: str | float | None) -> Optional[float]:
    """문자열 값을 실수로 변환한다. 비어 있거나 잘못된 값이면 None."""
    if isinstance(value, (int, float)):
        return float(value)
    if not value:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _secret_from_env(name: str) -> Optional[SecretStr]:
    value = os.getenv(name)
    return SecretStr(value) if value else None


class LoggingSettings(BaseModel):
    """로깅 관련 설정."""

    model_config = ConfigDict(populate_by_name=True)

    level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))
    file_name: str = Field(default="coinex.log")
    rotation_when: str = Field(default="midnight")
    rotation_interval: int = Field(default=1, ge=1)
    backup_count: int = Field(default=7, ge=0)
    to_file: bool = Field(default=False)

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        """환경변수에서 로깅 설정을 생성한다."""
        log_dir_value = os.getenv("LOG_DIR", "logs")
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=Path(log_dir_value).expanduser(),
            file_name=os.getenv("LOG_FILE_NAME", "coinex.log"),
            rotation_when=os.getenv("LOG_ROTATION_WHEN", "midnight"),
            rotation_interval=_to_int(os.getenv("LOG_ROTATION_INTERVAL"), 1),
            backup_count=_to_int(os.getenv("LOG_BACKUP_COUNT"), 7),
            to_file=_to_bool(os.getenv("LOG_TO_FILE"), False),
        )

    @property
    def normalized_level(self) -> str:
        """대문자로 정규화된 로그 레벨."""
        return self.level.upper()

    def resolve_log_dir(self, root_dir: Path) -> Path:
        """루트 경로 기준 로그 디렉터리를 반환한다."""
        if self.log_dir.is_absolute():
            return self.log_dir
        return (root_dir / self.log_dir).resolve()

    def resolve_log_path(self, root_dir: Path) -> Path:
        """루트 경로 기준 로그 파일 전체 경로."""
        return self.resolve_log_dir(root_dir) / self.file_name


class CoinexSettings(BaseModel):
    """코인엑스 API 관련 설정."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: Optional[SecretStr] = Field(default=None)
    api_secret: Optional[SecretStr] = Field(default=None)
    rest_base_url: str = Field(default=DEFAULT_REST_BASE_URL)
    http_proxy: Optional[str] = Field(default=None)
    timeout: Optional[float] = Field(default=None, gt=0)

    @classmethod
    def from_env(cls) -> "CoinexSettings":
        """환경변수에서 코인엑스 API 설정을 생성한다."""
        return cls(
            api_key=_secret_from_env("COINEX_API_KEY"),
            api_secret=_secret_from_env("COINEX_API_SECRET"),
            rest_base_url=os.getenv("COINEX_REST_BASE_URL", DEFAULT_REST_BASE_URL),
            http_proxy=os.getenv("HTTP_PROXY") or None,
            timeout=_to_optional_float(os.getenv("COINEX_TIMEOUT")),
        )

    @property
    def has_credentials(self) -> bool:
        """API 키와 시크릿이 모두 설정되어 있는지 여부."""
        return self.api_key is not None and self.api_secret is not None


class AppSettings(BaseModel):
    """애플리케이션 전반에 사용되는 설정 묶음."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    root_dir: Path = Field(default_factory=Path.cwd)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    coinex: CoinexSettings = Field(default_factory=CoinexSettings)

    @classmethod
    def load(cls) -> "AppSettings":
        """환경변수 및 기본값을 반영하여 설정 인스턴스를 생성한다."""
        return cls(
            root_dir=Path.cwd(),
            logging=LoggingSettings.from_env(),
            coinex=CoinexSettings.from_env(),
        )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """애플리케이션 전역 설정을 캐시하여 반환한다."""
    return AppSettings.load()


__all__ = [
    "AppSettings",
    "CoinexSettings",
    "DEFAULT_REST_BASE_URL",
    "LoggingSettings",
    "get_settings",
]
