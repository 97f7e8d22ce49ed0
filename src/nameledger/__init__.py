"""
nameledger — реестр доменных имён.

Ledger фактов о владении и привязке: domain_name → address → content_reference,
покупка доменов по фиксированной цене с накоплением сборов в escrow.
Не является DNS-резолвером.
"""

from nameledger.config import RegistrySettings, get_settings
from nameledger.core.domain import (
    AddressRecord,
    Coin,
    DomainRecord,
    DomainResolution,
    EventLog,
    PurchaseReceipt,
    RegistrySnapshot,
    WithdrawalReceipt,
)
from nameledger.core.errors import (
    AlreadyExistsError,
    InsufficientFundsError,
    NotFoundError,
    NotOwnerError,
    RegistryError,
)
from nameledger.logging_setup import configure_logging, configure_logging_from_settings
from nameledger.registry import AddressRegistry, DomainRegistry, RegistryService

__all__ = [
    # Service and stores
    "RegistryService",
    "AddressRegistry",
    "DomainRegistry",
    # Models
    "AddressRecord",
    "DomainRecord",
    "Coin",
    "EventLog",
    "DomainResolution",
    "PurchaseReceipt",
    "WithdrawalReceipt",
    "RegistrySnapshot",
    # Errors
    "RegistryError",
    "AlreadyExistsError",
    "NotFoundError",
    "InsufficientFundsError",
    "NotOwnerError",
    # Configuration
    "RegistrySettings",
    "get_settings",
    "configure_logging",
    "configure_logging_from_settings",
]
