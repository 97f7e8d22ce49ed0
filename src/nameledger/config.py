"""Конфигурация реестра доменных имён."""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RegistrySettings(BaseSettings):
    """Настройки реестра из переменных окружения NAMELEDGER_* (и .env)."""

    # Фиксированная цена покупки любого домена (минимальные единицы coin)
    DOMAIN_PRICE: int = Field(100, gt=0)

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = SettingsConfigDict(
        env_prefix="NAMELEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache
def get_settings() -> RegistrySettings:
    return RegistrySettings()
