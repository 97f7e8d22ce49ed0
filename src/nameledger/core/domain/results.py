"""Результаты операций RegistryService."""

from dataclasses import dataclass
from typing import Optional

from nameledger.core.domain.coin import Coin


@dataclass(frozen=True)
class DomainResolution:
    """Домен, разрешённый через AddressRegistry."""

    domain_name: str
    owner: str
    address: str
    content_reference: str

    # Владелец адреса может отличаться от владельца домена (после buy/transfer)
    address_owner: str


@dataclass(frozen=True)
class PurchaseReceipt:
    """Результат buy_domain.

    refund — сдача сверх цены; None если оплата была точной
    (нулевой остаток уничтожен).
    """

    domain_name: str
    previous_owner: str
    new_owner: str
    price: int
    refund: Optional[Coin]

    @property
    def refund_value(self) -> int:
        return self.refund.value if self.refund is not None else 0


@dataclass(frozen=True)
class WithdrawalReceipt:
    """Результат withdraw_fees."""

    amount: int
    recipient: str
    coin: Coin
