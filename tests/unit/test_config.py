"""Тесты для настроек и конфигурации логирования."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from nameledger.config import RegistrySettings
from nameledger.logging_setup import configure_logging, configure_logging_from_settings
from nameledger.registry import RegistryService


class TestRegistrySettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("NAMELEDGER_DOMAIN_PRICE", raising=False)

        settings = RegistrySettings(_env_file=None)

        assert settings.DOMAIN_PRICE == 100
        assert settings.LOG_LEVEL == "INFO"
        assert settings.LOG_JSON is True

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("NAMELEDGER_DOMAIN_PRICE", "500")
        monkeypatch.setenv("NAMELEDGER_LOG_LEVEL", "debug")
        monkeypatch.setenv("NAMELEDGER_LOG_JSON", "false")

        settings = RegistrySettings(_env_file=None)

        assert settings.DOMAIN_PRICE == 500
        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.LOG_JSON is False

    @pytest.mark.parametrize("price", [0, -10])
    def test_non_positive_price_rejected(self, price):
        with pytest.raises(ValidationError):
            RegistrySettings(DOMAIN_PRICE=price, _env_file=None)

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            RegistrySettings(LOG_LEVEL="chatty", _env_file=None)


@pytest.mark.parametrize("json_logs", [True, False])
def test_configure_logging_sets_root_level(json_logs):
    configure_logging("WARNING", json_logs=json_logs)

    assert logging.getLogger().level == logging.WARNING

    configure_logging("INFO")


def test_from_settings_applies_log_settings(monkeypatch):
    """RegistryService.from_settings настраивает логирование по LOG_LEVEL/LOG_JSON."""
    monkeypatch.setenv("NAMELEDGER_LOG_LEVEL", "warning")
    monkeypatch.setenv("NAMELEDGER_LOG_JSON", "false")
    settings = RegistrySettings(_env_file=None)

    try:
        service = RegistryService.from_settings(settings)

        assert service.price == settings.DOMAIN_PRICE
        assert logging.getLogger().level == logging.WARNING
        renderer = structlog.get_config()["processors"][-1]
        assert isinstance(renderer, structlog.dev.ConsoleRenderer)
    finally:
        configure_logging("INFO")


def test_configure_logging_from_settings_json():
    configure_logging_from_settings(
        RegistrySettings(LOG_LEVEL="error", LOG_JSON=True, _env_file=None)
    )

    assert logging.getLogger().level == logging.ERROR
    assert isinstance(
        structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer
    )

    configure_logging("INFO")
