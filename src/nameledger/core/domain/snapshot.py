"""
RegistrySnapshot — снапшот состояния реестра

Persisted layout: две mapping-таблицы с уникальными ключами и скалярный
fee balance. Полная совместимость с JSON Schema
(contracts/schema/registry_snapshot.json).

Порядок записей в списках не несёт смысла.
"""

from pydantic import BaseModel, Field

from .records import AddressRecord, DomainRecord


SNAPSHOT_SCHEMA_VERSION = "1"


class RegistrySnapshot(BaseModel):
    """Immutable снапшот AddressRegistry + DomainRegistry."""

    schema_version: str = Field(
        SNAPSHOT_SCHEMA_VERSION, pattern="^1$", description="Версия схемы снапшота"
    )
    addresses: list[AddressRecord] = Field(
        default_factory=list, description="Выделенные адреса"
    )
    domains: list[DomainRecord] = Field(
        default_factory=list, description="Активные домены"
    )
    fee_balance: int = Field(0, ge=0, description="Накопленные сборы")

    model_config = {"frozen": True}
