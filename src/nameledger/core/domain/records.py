"""
AddressRecord / DomainRecord — записи реестра

Immutable Pydantic модели. Любое изменение записи строит новый экземпляр
через конструктор (с повторной валидацией), который заменяет старый в хранилище.

- AddressRecord: address → (content_reference, owner), создаётся один раз
- DomainRecord: domain_name → (address, owner), изменяется update/transfer/buy
"""

from pydantic import BaseModel, Field, field_validator


# Principal — непрозрачный идентификатор аутентифицированного вызывающего
Principal = str


def _strip_required(value: str, name: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{name} must not be blank")
    return value


# =============================================================================
# ADDRESS RECORD
# =============================================================================


class AddressRecord(BaseModel):
    """
    Запись о выделенном сетевом адресе.

    Write-once: путей обновления и удаления нет.
    """

    address: str = Field(..., min_length=1, description="Сетевой адрес (уникальный ключ)")
    content_reference: str = Field(
        ..., min_length=1, description="Ссылка на развёртываемый контент"
    )
    owner: Principal = Field(..., min_length=1, description="Владелец адреса")

    model_config = {"frozen": True}

    @field_validator("address", "content_reference", "owner")
    @classmethod
    def validate_not_blank(cls, v: str, info) -> str:
        return _strip_required(v, info.field_name)


# =============================================================================
# DOMAIN RECORD
# =============================================================================


class DomainRecord(BaseModel):
    """
    Запись о домене.

    address — ссылка в AddressRegistry, существование адреса не гарантируется
    (после update_domain адрес может быть не выделен).
    """

    domain_name: str = Field(..., min_length=1, description="Имя домена (уникальный ключ)")
    address: str = Field(..., min_length=1, description="Привязанный сетевой адрес")
    owner: Principal = Field(..., min_length=1, description="Владелец домена")

    model_config = {"frozen": True}

    @field_validator("domain_name")
    @classmethod
    def normalize_domain_name(cls, v: str) -> str:
        """Имена доменов регистронезависимы: ключ хранится в нижнем регистре."""
        return _strip_required(v, "domain_name").lower()

    @field_validator("address", "owner")
    @classmethod
    def validate_not_blank(cls, v: str, info) -> str:
        return _strip_required(v, info.field_name)

    def is_owned_by(self, principal: Principal) -> bool:
        return self.owner == normalize_principal(principal)


def normalize_domain_name(domain_name: str) -> str:
    """Каноническая форма ключа домена (для поиска без создания записи)."""
    return domain_name.strip().lower()


def normalize_address(address: str) -> str:
    """Каноническая форма ключа адреса."""
    return address.strip()


def normalize_principal(principal: str) -> str:
    """Каноническая форма principal (как хранится в поле owner)."""
    return principal.strip()
