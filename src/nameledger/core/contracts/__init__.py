"""
Contract Validation Module

Модуль для валидации JSON контрактов реестра (снапшот состояния и события).
"""

from .validators import (
    ContractValidator,
    RegistryEventValidator,
    RegistrySnapshotValidator,
    SchemaLoader,
    validate_registry_event,
    validate_registry_snapshot,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "RegistrySnapshotValidator",
    "RegistryEventValidator",
    # Functions
    "validate_registry_snapshot",
    "validate_registry_event",
]
