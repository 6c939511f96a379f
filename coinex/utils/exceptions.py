"""애플리케이션 공통 예외 계층."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional


class AppError(Exception):
    """프로젝트 전반에서 사용하는 기본 예외 클래스."""


class ConfigurationError(AppError):
    """환경 설정이나 필수 값이 누락된 경우 발생."""


class ExchangeError(AppError):
    """거래소 API 호출 중 발생한 예외."""


class CoinexErrorKind(str, Enum):
    """코인엑스 호출 실패 유형."""

    TRANSPORT = "transport"
    BODYLESS_HTTP = "bodyless_http"
    DOMAIN = "domain"


class CoinexError(ExchangeError):
    """코인엑스 응답을 정규화한 예외.

    ``kind`` 에 따라 채워지는 필드가 다르다.

    - ``BODYLESS_HTTP``: ``response`` 와 원본 예외 ``inner``
    - ``DOMAIN``: 응답 봉투 전체 ``envelope`` (HTTP 오류에서 온 경우 ``response`` 포함)

    네트워크 단계의 실패는 이 예외로 감싸지 않고 원본 예외를 그대로 전파한다.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: CoinexErrorKind,
        envelope: Optional[Mapping[str, Any]] = None,
        response: Any = None,
        inner: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.envelope = envelope
        self.response = response
        self.inner = inner

    @property
    def code(self) -> Any:
        """응답 봉투의 오류 코드."""
        if self.envelope is None:
            return None
        return self.envelope.get("code")

    @property
    def api_message(self) -> Optional[str]:
        """응답 봉투의 오류 메시지."""
        if self.envelope is None:
            return None
        return self.envelope.get("message")

    @property
    def status_code(self) -> Optional[int]:
        """HTTP 상태 코드. 응답이 없으면 None."""
        return getattr(self.response, "status_code", None)


__all__ = [
    "AppError",
    "CoinexError",
    "CoinexErrorKind",
    "ConfigurationError",
    "ExchangeError",
]
