"""
DomainRegistry — хранилище доменов и накопленных сборов

domain_name → DomainRecord плюс fee balance (escrow).

Инварианты:
- domain_name уникален (ключ в канонической форме, нижний регистр)
- fee balance >= 0; пополняется только покупками, уменьшается только выводом
- записи immutable: изменение = замена записи целиком (replace)

Проверка прав владельца выполняется в RegistryService, не здесь.
"""

from typing import Iterator, Optional

from nameledger.core.domain.coin import Coin
from nameledger.core.domain.records import (
    DomainRecord,
    Principal,
    normalize_domain_name,
    normalize_principal,
)
from nameledger.core.errors import AlreadyExistsError, NotFoundError


DOMAIN_KIND = "domain"


class DomainRegistry:
    """Key-unique таблица domain_name → DomainRecord + fee balance."""

    def __init__(self, fee_balance: int = 0) -> None:
        self._records: dict[str, DomainRecord] = {}
        self._fees = Coin(fee_balance)

    # =========================================================================
    # RECORDS
    # =========================================================================

    def insert(self, record: DomainRecord) -> None:
        """
        Raises:
            AlreadyExistsError: Если домен уже зарегистрирован
        """
        if record.domain_name in self._records:
            raise AlreadyExistsError(DOMAIN_KIND, record.domain_name)
        self._records[record.domain_name] = record

    def get(self, domain_name: str) -> DomainRecord:
        """
        Raises:
            NotFoundError: Если домен отсутствует
        """
        record = self.find(domain_name)
        if record is None:
            raise NotFoundError(DOMAIN_KIND, normalize_domain_name(domain_name))
        return record

    def find(self, domain_name: str) -> Optional[DomainRecord]:
        return self._records.get(normalize_domain_name(domain_name))

    def replace(self, record: DomainRecord) -> DomainRecord:
        """
        Замена существующей записи новой версией.

        Returns:
            Предыдущая версия записи

        Raises:
            NotFoundError: Если домен отсутствует
        """
        previous = self.get(record.domain_name)
        self._records[record.domain_name] = record
        return previous

    def remove(self, domain_name: str) -> DomainRecord:
        """
        Raises:
            NotFoundError: Если домен отсутствует
        """
        record = self.get(domain_name)
        del self._records[record.domain_name]
        return record

    def contains(self, domain_name: str) -> bool:
        return normalize_domain_name(domain_name) in self._records

    def owned_by(self, owner: Principal) -> dict[str, str]:
        """Домены владельца: domain_name → address (порядок не определён)."""
        owner = normalize_principal(owner)
        return {
            name: record.address
            for name, record in self._records.items()
            if record.owner == owner
        }

    def records(self) -> Iterator[DomainRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, domain_name: object) -> bool:
        return isinstance(domain_name, str) and self.contains(domain_name)

    # =========================================================================
    # FEES
    # =========================================================================

    @property
    def fee_balance(self) -> int:
        return self._fees.value

    def deposit_fee(self, payment: Coin) -> None:
        """Зачисление coin в баланс сборов (coin обнуляется)."""
        self._fees.merge(payment)

    def withdraw_fee(self, amount: int) -> Coin:
        """
        Вывод amount из баланса сборов.

        Raises:
            InsufficientFundsError: Если amount > fee balance (баланс не меняется)
        """
        return self._fees.split(amount)
