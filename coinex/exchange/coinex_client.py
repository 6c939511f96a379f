"""코인엑스 v1 REST API 서명 클라이언트."""

from __future__ import annotations

import asyncio
import functools
import hashlib
import logging
import math
import time
from concurrent.futures import Executor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, NoReturn, Optional, Tuple, Union
from urllib.parse import quote, urlencode

import requests
from requests import Response, Session

from ..config import DEFAULT_REST_BASE_URL, CoinexSettings, get_settings
from ..utils.exceptions import CoinexError, CoinexErrorKind, ConfigurationError

JsonMapping = Mapping[str, Any]
Fields = Mapping[str, Any]
Timeout = Union[float, Tuple[float, float]]

DEFAULT_BASE_URL = DEFAULT_REST_BASE_URL
# 단순 봇 차단을 피하기 위한 브라우저 UA
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 6.1; WOW64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/39.0.2171.71 Safari/537.36"
)
SECRET_KEY_FIELD = "secret_key"

# 쿼리 문자열에서 인코딩하지 않는 문자 (영숫자와 -_.~ 는 quote 기본값)
_QUERY_SAFE_CHARS = "!*'()"


class HttpMethod(str, Enum):
    """지원하는 HTTP 메서드."""

    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class ClientCredentials:
    """코인엑스 API 인증 정보를 담는 데이터 구조."""

    api_key: Optional[str]
    api_secret: Optional[str]


# ----------------------------------------------------------------------
# 서명 유틸리티
# ----------------------------------------------------------------------
def build_params(api_key: Optional[str], tonce: str, fields: Optional[Fields] = None) -> dict[str, Any]:
    """``access_id``/``tonce`` 기본값 위에 호출자 필드를 덮어쓴 파라미터를 만든다."""

    params: dict[str, Any] = {"access_id": api_key, "tonce": tonce}
    if fields:
        params.update(fields)
    return params


def sort_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """키 오름차순으로 재구성한 파라미터 사본을 반환한다."""

    return {key: params[key] for key in sorted(params)}


def _stringify_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    # 중첩 객체와 배열은 빈 값으로 직렬화된다
    if value is None or isinstance(value, (Mapping, list, tuple, set)):
        return ""
    return str(value)


def _require_path(path: Optional[str]) -> None:
    if not path:
        raise AssertionError("path is required")


def build_query_string(params: Mapping[str, Any]) -> str:
    """파라미터를 ``key=value&...`` 형태로 직렬화한다. 순서는 입력 그대로 유지한다."""

    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        values = value if isinstance(value, (list, tuple)) else (value,)
        for item in values:
            pairs.append((str(key), _stringify_value(item)))
    return urlencode(pairs, safe=_QUERY_SAFE_CHARS, quote_via=quote)


def sign_query_string(query_string: str, api_secret: Optional[str]) -> str:
    """``&secret_key=`` 를 덧붙인 문자열의 MD5 다이제스트(대문자 16진수)."""

    payload = f"{query_string}&{SECRET_KEY_FIELD}={api_secret}"
    return hashlib.md5(payload.encode("utf-8")).hexdigest().upper()


# ----------------------------------------------------------------------
# 응답 정규화
# ----------------------------------------------------------------------
def _decode_envelope(response: Response) -> Optional[JsonMapping]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, Mapping):
        return None
    return payload


def _bodyless_message(response: Response) -> str:
    return f"코인엑스 API 호출 실패: HTTP {response.status_code} - {response.text}"


def _domain_message(code: Any, message: Any) -> str:
    return f"코인엑스 API 오류({code}): {message}"


def parse_response(response: Response) -> Any:
    """성공 응답 봉투에서 ``data`` 를 꺼낸다. ``code`` 가 0이 아니면 예외를 발생시킨다."""

    envelope = _decode_envelope(response)
    if envelope is None:
        raise CoinexError(
            _bodyless_message(response),
            kind=CoinexErrorKind.BODYLESS_HTTP,
            response=response,
        )

    code = envelope.get("code")
    if code:
        raise CoinexError(
            _domain_message(code, envelope.get("message")),
            kind=CoinexErrorKind.DOMAIN,
            envelope=envelope,
            response=response,
        )
    return envelope.get("data")


def wrap_response_error(error: requests.RequestException) -> NoReturn:
    """실패한 HTTP 호출을 코인엑스 예외로 변환한다.

    응답 자체가 없는 네트워크 오류는 원본 예외 객체를 그대로 다시 발생시킨다.
    """

    response = error.response
    if response is None:
        raise error

    envelope = _decode_envelope(response)
    if envelope is None:
        raise CoinexError(
            _bodyless_message(response),
            kind=CoinexErrorKind.BODYLESS_HTTP,
            response=response,
            inner=error,
        ) from error

    code = envelope.get("code")
    message = envelope.get("message")
    assert code, f"Code: {code}"
    raise CoinexError(
        _domain_message(code, message),
        kind=CoinexErrorKind.DOMAIN,
        envelope=envelope,
        response=response,
        inner=error,
    ) from error


def classify_error(error: BaseException) -> Optional[CoinexErrorKind]:
    """클라이언트 호출이 발생시킨 예외의 실패 유형을 반환한다."""

    if isinstance(error, CoinexError):
        return error.kind
    if isinstance(error, requests.RequestException):
        return CoinexErrorKind.TRANSPORT
    return None


# ----------------------------------------------------------------------
# 클라이언트
# ----------------------------------------------------------------------
class CoinexClient:
    """코인엑스 REST API 서명 요청을 담당하는 클라이언트."""

    def __init__(
        self,
        api_key: Optional[str],
        api_secret: Optional[str],
        *,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[Session] = None,
        proxy: Optional[str] = None,
        timeout: Optional[Timeout] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._credentials = ClientCredentials(api_key, api_secret)
        self._base_url = base_url.rstrip("/")
        self._session: Session = session or requests.Session()
        self._owns_session = session is None
        if self._owns_session:
            # 프록시는 명시적으로 전달된 값만 사용한다
            self._session.trust_env = False
        self._proxy = proxy
        self._proxies = {"http": proxy, "https": proxy} if proxy else None
        self._timeout = timeout
        self._default_headers: dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": user_agent,
        }
        self._logger = logging.getLogger(__name__)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[CoinexSettings] = None,
        *,
        session: Optional[Session] = None,
    ) -> "CoinexClient":
        """환경 설정에서 인증 정보와 프록시를 읽어 클라이언트를 만든다."""

        coinex_settings = settings or get_settings().coinex
        if not coinex_settings.has_credentials:
            raise ConfigurationError("COINEX_API_KEY/COINEX_API_SECRET 환경변수를 설정해야 합니다.")
        return cls(
            coinex_settings.api_key.get_secret_value(),
            coinex_settings.api_secret.get_secret_value(),
            base_url=coinex_settings.rest_base_url,
            session=session,
            proxy=coinex_settings.http_proxy,
            timeout=coinex_settings.timeout,
        )

    @property
    def base_url(self) -> str:
        """REST API 기본 URL."""

        return self._base_url

    @property
    def credentials(self) -> ClientCredentials:
        return self._credentials

    @property
    def proxy(self) -> Optional[str]:
        return self._proxy

    def close(self) -> None:
        """세션을 종료한다."""

        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "CoinexClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # 내부 유틸리티
    # ------------------------------------------------------------------
    def _generate_tonce(self) -> str:
        return str(int(time.time() * 1000))

    def _sign(self, fields: Optional[Fields]) -> tuple[dict[str, Any], str, str]:
        params = build_params(self._credentials.api_key, self._generate_tonce(), fields)
        sorted_params = sort_params(params)
        query_string = build_query_string(sorted_params)
        signature = sign_query_string(query_string, self._credentials.api_secret)
        return sorted_params, query_string, signature

    def _build_headers(self, signature: str) -> dict[str, str]:
        headers = dict(self._default_headers)
        headers["authorization"] = signature
        return headers

    def _send(
        self,
        method: HttpMethod,
        url: str,
        path: str,
        signature: str,
        body: Optional[JsonMapping] = None,
    ) -> Any:
        self._logger.debug("코인엑스 %s %s 요청", method.value, path)
        try:
            response = self._session.request(
                method=method.value,
                url=url,
                json=body,
                headers=self._build_headers(signature),
                proxies=self._proxies,
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            status_code = getattr(exc.response, "status_code", None)
            if status_code is None:
                self._logger.warning(
                    "코인엑스 %s %s 네트워크 오류: %s", method.value, path, type(exc).__name__
                )
            else:
                self._logger.warning("코인엑스 %s %s 호출 실패: HTTP %s", method.value, path, status_code)
            wrap_response_error(exc)

        try:
            return parse_response(response)
        except CoinexError as exc:
            self._logger.warning("코인엑스 %s %s 응답 오류: %s", method.value, path, exc)
            raise

    # ------------------------------------------------------------------
    # 공개 메서드
    # ------------------------------------------------------------------
    def get(self, path: str, fields: Optional[Fields] = None) -> Any:
        """서명된 GET 요청을 보내고 응답의 ``data`` 를 반환한다."""

        _require_path(path)
        _, query_string, signature = self._sign(fields)
        url = f"{self._base_url}{path}"
        separator = "&" if "?" in url else "?"
        return self._send(HttpMethod.GET, f"{url}{separator}{query_string}", path, signature)

    def post(self, path: str, fields: Optional[Fields] = None) -> Any:
        """서명된 POST 요청을 보낸다. 본문은 키 정렬된 JSON 객체다."""

        _require_path(path)
        sorted_params, _, signature = self._sign(fields)
        return self._send(HttpMethod.POST, f"{self._base_url}{path}", path, signature, body=sorted_params)


class AsyncCoinexClient:
    """``CoinexClient`` 호출을 실행기에서 돌려 await 가능하게 만든 래퍼."""

    def __init__(self, client: CoinexClient, *, executor: Optional[Executor] = None) -> None:
        self._client = client
        self._executor = executor

    @property
    def client(self) -> CoinexClient:
        return self._client

    async def _run(self, func, path: str, fields: Optional[Fields]) -> Any:
        _require_path(path)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(func, path, fields))

    async def get(self, path: str, fields: Optional[Fields] = None) -> Any:
        return await self._run(self._client.get, path, fields)

    async def post(self, path: str, fields: Optional[Fields] = None) -> Any:
        return await self._run(self._client.post, path, fields)

    def close(self) -> None:
        self._client.close()


def create_client(
    api_key: Optional[str],
    api_secret: Optional[str],
    *,
    proxy: Optional[str] = None,
    **options: Any,
) -> CoinexClient:
    """API 키/시크릿으로 ``get``/``post`` 를 제공하는 클라이언트를 생성한다."""

    return CoinexClient(api_key, api_secret, proxy=proxy, **options)


__all__ = [
    "AsyncCoinexClient",
    "ClientCredentials",
    "CoinexClient",
    "DEFAULT_BASE_URL",
    "DEFAULT_USER_AGENT",
    "HttpMethod",
    "build_params",
    "build_query_string",
    "classify_error",
    "create_client",
    "parse_response",
    "sign_query_string",
    "sort_params",
    "wrap_response_error",
]
