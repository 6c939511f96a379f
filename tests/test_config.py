from __future__ import annotations

from pathlib import Path

from coinex.config import DEFAULT_REST_BASE_URL, AppSettings, CoinexSettings, LoggingSettings, get_settings
import coinex
from coinex.utils.logger import build_logging_config, configure_logging


def test_coinex_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("COINEX_API_KEY", "env-key")
    monkeypatch.setenv("COINEX_API_SECRET", "env-secret")
    monkeypatch.setenv("HTTP_PROXY", "http://proxy.local:3128")
    monkeypatch.setenv("COINEX_TIMEOUT", "7.5")
    monkeypatch.delenv("COINEX_REST_BASE_URL", raising=False)

    settings = CoinexSettings.from_env()

    assert settings.has_credentials
    assert settings.api_key.get_secret_value() == "env-key"
    assert settings.api_secret.get_secret_value() == "env-secret"
    assert settings.rest_base_url == DEFAULT_REST_BASE_URL
    assert settings.http_proxy == "http://proxy.local:3128"
    assert settings.timeout == 7.5


def test_coinex_settings_defaults_without_env(monkeypatch) -> None:
    for name in ("COINEX_API_KEY", "COINEX_API_SECRET", "HTTP_PROXY", "COINEX_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("COINEX_TIMEOUT", "not-a-number")

    settings = CoinexSettings.from_env()

    assert not settings.has_credentials
    assert settings.http_proxy is None
    assert settings.timeout is None


def test_get_settings_is_cached(clear_settings_cache, monkeypatch) -> None:
    monkeypatch.setenv("COINEX_REST_BASE_URL", "https://first.test/v1")

    first = get_settings()
    monkeypatch.setenv("COINEX_REST_BASE_URL", "https://second.test/v1")

    assert get_settings() is first
    assert first.coinex.rest_base_url == "https://first.test/v1"


def test_logging_settings_resolve_relative_path(tmp_path: Path) -> None:
    settings = LoggingSettings(level="debug", log_dir=Path("logs"), file_name="client.log")

    assert settings.normalized_level == "DEBUG"
    assert settings.resolve_log_path(tmp_path) == (tmp_path / "logs" / "client.log").resolve()


def test_configure_logging_creates_log_directory(tmp_path: Path) -> None:
    settings = AppSettings(root_dir=tmp_path, logging=LoggingSettings(log_dir=Path("var/log"), to_file=True))

    configure_logging(force=True, settings=settings)

    assert (tmp_path / "var" / "log").is_dir()


def test_log_path_resolves_against_working_directory(clear_settings_cache, monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LOG_DIR", raising=False)

    settings = get_settings()
    log_path = settings.logging.resolve_log_path(settings.root_dir)

    package_dir = Path(coinex.__file__).resolve().parent.parent
    assert settings.root_dir == tmp_path.resolve()
    assert log_path == tmp_path.resolve() / "logs" / "coinex.log"
    assert package_dir not in log_path.parents


def test_logging_config_is_console_only_by_default(tmp_path: Path) -> None:
    settings = AppSettings(root_dir=tmp_path)

    config = build_logging_config(settings, level="debug")

    assert list(config["handlers"]) == ["console"]
    assert config["root"]["level"] == "DEBUG"
    assert not (tmp_path / "logs").exists()


def test_logging_config_adds_file_handler_for_explicit_path(tmp_path: Path) -> None:
    log_path = tmp_path / "out" / "cli.log"

    config = build_logging_config(AppSettings(root_dir=tmp_path), log_path=log_path)

    assert config["handlers"]["file"]["filename"] == str(log_path)
    assert config["root"]["handlers"] == ["console", "file"]
    assert log_path.parent.is_dir()
