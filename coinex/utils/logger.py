"""명령줄 도구에서 사용하는 로깅 설정 유틸리티.

라이브러리 코드는 ``logging.getLogger(__name__)`` 만 사용하고, 핸들러 구성은
애플리케이션 진입점에서 ``configure_logging`` 으로 한 번 수행한다.
"""

from __future__ import annotations

from logging.config import dictConfig
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import AppSettings, get_settings

_LOG_CONFIGURED = False

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _file_handler(settings: AppSettings, level: str, log_path: Optional[Path]) -> Dict[str, Any]:
    logging_settings = settings.logging
    path = log_path or logging_settings.resolve_log_path(settings.root_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    return {
        "class": "logging.handlers.TimedRotatingFileHandler",
        "formatter": "standard",
        "level": level,
        "filename": str(path),
        "when": logging_settings.rotation_when,
        "interval": logging_settings.rotation_interval,
        "backupCount": logging_settings.backup_count,
        "encoding": "utf-8",
    }


def build_logging_config(
    settings: AppSettings,
    *,
    level: Optional[str] = None,
    log_path: Optional[Path] = None,
) -> Dict[str, Any]:
    """dictConfig 설정을 만든다. 파일 핸들러는 요청된 경우에만 추가된다."""
    resolved_level = (level or settings.logging.level).upper()
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "level": resolved_level,
            "stream": "ext://sys.stderr",
        },
    }
    if log_path is not None or settings.logging.to_file:
        handlers["file"] = _file_handler(settings, resolved_level, log_path)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": LOG_FORMAT, "datefmt": LOG_DATE_FORMAT}},
        "handlers": handlers,
        "root": {"level": resolved_level, "handlers": list(handlers)},
    }


def configure_logging(
    force: bool = False,
    *,
    settings: Optional[AppSettings] = None,
    level: Optional[str] = None,
    log_path: Optional[Path] = None,
) -> None:
    """로깅 설정을 초기화한다."""
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED and not force:
        return
    dictConfig(build_logging_config(settings or get_settings(), level=level, log_path=log_path))
    _LOG_CONFIGURED = True


__all__ = ["build_logging_config", "configure_logging"]
