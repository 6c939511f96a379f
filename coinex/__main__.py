"""코인엑스 서명 요청 명령줄 도구.

    python -m coinex get /balance/info
    python -m coinex post /order/limit market=BTCUSDT type=buy amount=0.01 price=60000
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

import requests

from .exchange import CoinexClient
from .utils.exceptions import CoinexError, CoinexErrorKind, ConfigurationError
from .utils.logger import configure_logging


def _parse_field(raw: str) -> tuple[str, str]:
    key, separator, value = raw.partition("=")
    if not separator or not key:
        raise argparse.ArgumentTypeError(f"key=value 형식이어야 합니다: {raw}")
    return key, value


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="coinex", description="코인엑스 서명 REST 요청")
    parser.add_argument("method", choices=["get", "post"], help="HTTP 메서드")
    parser.add_argument("path", help="API 경로 (예: /market/list)")
    parser.add_argument(
        "fields",
        nargs="*",
        type=_parse_field,
        help="요청 파라미터 key=value 목록",
    )
    parser.add_argument("--log-level", default=None, help="로그 레벨 (기본값: LOG_LEVEL)")
    parser.add_argument("--log-file", type=Path, default=None, help="로그를 기록할 파일 경로")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(level=args.log_level, log_path=args.log_file)

    try:
        client = CoinexClient.from_settings()
    except ConfigurationError as exc:
        print(f"설정 오류: {exc}", file=sys.stderr)
        return 2

    with client:
        call = client.get if args.method == "get" else client.post
        try:
            data = call(args.path, dict(args.fields))
        except CoinexError as exc:
            print(f"{exc.kind.value}: {exc}", file=sys.stderr)
            if exc.envelope is not None:
                print(json.dumps(exc.envelope, ensure_ascii=False, indent=2), file=sys.stderr)
            return 1
        except requests.RequestException as exc:
            print(f"{CoinexErrorKind.TRANSPORT.value}: {exc}", file=sys.stderr)
            return 1

    print(json.dumps(data, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
