"""
Исключения реестра доменов.

Доменные ошибки не зависят от инфраструктуры (HTTP, хранилище и т.п.).
Каждая ошибка несёт человекочитаемое message и структурированный details
для логирования.
"""

from typing import Any, Optional


class RegistryError(Exception):
    """Базовое исключение для всех ошибок реестра."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class AlreadyExistsError(RegistryError):
    """Попытка создать запись с уже занятым ключом (address или domain_name)."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(
            message=f"{kind} already exists: {key}",
            details={"kind": kind, "key": key},
        )


class NotFoundError(RegistryError):
    """Запись с указанным ключом отсутствует."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(
            message=f"{kind} not found: {key}",
            details={"kind": kind, "key": key},
        )


class InsufficientFundsError(RegistryError):
    """Оплата ниже цены или вывод больше накопленного баланса."""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            message=f"Insufficient funds: required {required}, available {available}",
            details={"required": required, "available": available},
        )


class NotOwnerError(RegistryError):
    """Вызывающий не является владельцем домена."""

    def __init__(self, domain_name: str, caller: str, owner: str):
        self.domain_name = domain_name
        self.caller = caller
        self.owner = owner
        super().__init__(
            message=f"Caller {caller} is not the owner of {domain_name}",
            details={"domain_name": domain_name, "caller": caller, "owner": owner},
        )
