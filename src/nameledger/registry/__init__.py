"""Registry — хранилища адресов и доменов и сервис операций над ними.

- AddressRegistry: address → AddressRecord (write-once)
- DomainRegistry: domain_name → DomainRecord + fee balance
- RegistryService: операции с проверкой инвариантов и уведомлениями
"""

from .address_registry import AddressRegistry
from .domain_registry import DomainRegistry
from .service import RegistryService

__all__ = [
    "AddressRegistry",
    "DomainRegistry",
    "RegistryService",
]
