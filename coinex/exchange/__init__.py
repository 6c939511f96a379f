"""코인엑스 REST API 연동 래퍼 패키지."""

from .coinex_client import (
    AsyncCoinexClient,
    ClientCredentials,
    CoinexClient,
    DEFAULT_BASE_URL,
    DEFAULT_USER_AGENT,
    HttpMethod,
    build_params,
    build_query_string,
    classify_error,
    create_client,
    parse_response,
    sign_query_string,
    sort_params,
    wrap_response_error,
)

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
