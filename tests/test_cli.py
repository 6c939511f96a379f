from __future__ import annotations

import json

import pytest
import requests

import coinex.__main__ as cli
from coinex.exchange import CoinexClient
from coinex.utils.exceptions import ConfigurationError
from tests.fakes import DummyResponse, DummySession, FailingSession


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


def install_client(monkeypatch, session) -> None:
    client = CoinexClient("cli-key", "cli-secret", session=session)
    monkeypatch.setattr(CoinexClient, "from_settings", classmethod(lambda cls: client))


def test_cli_prints_data_payload(monkeypatch, capsys) -> None:
    session = DummySession([DummyResponse(json_payload={"code": 0, "data": {"BTC": {"available": "1"}}})])
    install_client(monkeypatch, session)

    exit_code = cli.main(["post", "/balance/info", "market=BTCUSDT"])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == {"BTC": {"available": "1"}}
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["json"]["market"] == "BTCUSDT"


def test_cli_reports_domain_error(monkeypatch, capsys) -> None:
    session = DummySession([DummyResponse(json_payload={"code": 24, "message": "Signature error"})])
    install_client(monkeypatch, session)

    exit_code = cli.main(["get", "/balance/info"])

    assert exit_code == 1
    err = capsys.readouterr().err
    assert err.startswith("domain:")
    assert "Signature error" in err


def test_cli_reports_transport_error(monkeypatch, capsys) -> None:
    install_client(monkeypatch, FailingSession(requests.ConnectionError("refused")))

    assert cli.main(["get", "/market/list"]) == 1
    assert capsys.readouterr().err.startswith("transport:")


def test_cli_requires_credentials(monkeypatch, capsys) -> None:
    def missing(cls):
        raise ConfigurationError("credentials missing")

    monkeypatch.setattr(CoinexClient, "from_settings", classmethod(missing))

    assert cli.main(["get", "/market/list"]) == 2
    assert "credentials missing" in capsys.readouterr().err


def test_cli_rejects_malformed_field() -> None:
    with pytest.raises(SystemExit):
        cli.parse_args(["get", "/market/list", "market"])


def test_cli_passes_logging_options(monkeypatch, tmp_path) -> None:
    captured = {}
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: captured.update(kwargs))
    install_client(monkeypatch, DummySession([DummyResponse(json_payload={"code": 0, "data": {}})]))
    log_file = tmp_path / "cli.log"

    assert cli.main(["get", "/market/list", "--log-level", "debug", "--log-file", str(log_file)]) == 0
    assert captured == {"level": "debug", "log_path": log_file}
