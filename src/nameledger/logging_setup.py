"""Структурное логирование (structlog поверх stdlib logging)."""

import logging
import sys

import structlog

from nameledger.config import RegistrySettings


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Настройка structlog и корневого stdlib логгера.

    Args:
        level: Стандартное имя уровня (DEBUG, INFO, ...)
        json_logs: JSON-строки если True, иначе читаемый консольный вывод
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging_from_settings(settings: RegistrySettings) -> None:
    """Логирование по LOG_LEVEL / LOG_JSON из настроек."""
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
