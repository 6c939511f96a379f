"""코인엑스 서명 REST 클라이언트."""

from .exchange import AsyncCoinexClient, CoinexClient, create_client
from .utils.exceptions import CoinexError, CoinexErrorKind

__version__ = "0.1.0"

__all__ = [
    "AsyncCoinexClient",
    "CoinexClient",
    "CoinexError",
    "CoinexErrorKind",
    "create_client",
]
