"""
Registry Events — уведомления об изменениях реестра

Append-only уведомления для внешних слушателей. Реестр их не читает.
Каждое событие — immutable Pydantic модель с дискриминатором kind,
сериализуемая в JSON (см. contracts/schema/registry_event.json).

Доставка fire-and-forget: EventSink.publish вызывается после фиксации
изменения, ошибки sink не откатывают операцию.
"""

from typing import Literal, Protocol, TypeVar, Union

from pydantic import BaseModel, Field


# =============================================================================
# EVENTS
# =============================================================================


class AddressAllotted(BaseModel):
    """Адрес выделен владельцу."""

    kind: Literal["AddressAllotted"] = "AddressAllotted"
    address: str = Field(..., min_length=1)
    owner: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class DomainAssigned(BaseModel):
    """Домен создан и привязан к адресу."""

    kind: Literal["DomainAssigned"] = "DomainAssigned"
    domain_name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    owner: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class DomainPurchased(BaseModel):
    """Домен куплен по фиксированной цене."""

    kind: Literal["DomainPurchased"] = "DomainPurchased"
    domain_name: str = Field(..., min_length=1)
    new_owner: str = Field(..., min_length=1)
    price: int = Field(..., gt=0)

    model_config = {"frozen": True}


class DomainUpdated(BaseModel):
    """Домен перепривязан к другому адресу."""

    kind: Literal["DomainUpdated"] = "DomainUpdated"
    domain_name: str = Field(..., min_length=1)
    old_address: str = Field(..., min_length=1)
    new_address: str = Field(..., min_length=1)
    owner: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class DomainTransferred(BaseModel):
    """Владелец передал домен."""

    kind: Literal["DomainTransferred"] = "DomainTransferred"
    domain_name: str = Field(..., min_length=1)
    previous_owner: str = Field(..., min_length=1)
    new_owner: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class DomainDeleted(BaseModel):
    """Домен удалён владельцем."""

    kind: Literal["DomainDeleted"] = "DomainDeleted"
    domain_name: str = Field(..., min_length=1)
    owner: str = Field(..., min_length=1)

    model_config = {"frozen": True}


class FeesWithdrawn(BaseModel):
    """Накопленные сборы выведены получателю."""

    kind: Literal["FeesWithdrawn"] = "FeesWithdrawn"
    amount: int = Field(..., ge=0)
    recipient: str = Field(..., min_length=1)

    model_config = {"frozen": True}


RegistryEvent = Union[
    AddressAllotted,
    DomainAssigned,
    DomainPurchased,
    DomainUpdated,
    DomainTransferred,
    DomainDeleted,
    FeesWithdrawn,
]

E = TypeVar("E", bound=BaseModel)


# =============================================================================
# SINKS
# =============================================================================


class EventSink(Protocol):
    """Получатель уведомлений."""

    def publish(self, event: RegistryEvent) -> None:
        ...


class NullEventSink:
    """Sink, отбрасывающий все события."""

    def publish(self, event: RegistryEvent) -> None:
        pass


class EventLog:
    """In-memory append-only журнал событий."""

    def __init__(self) -> None:
        self._events: list[RegistryEvent] = []

    def publish(self, event: RegistryEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> tuple[RegistryEvent, ...]:
        return tuple(self._events)

    def of_type(self, event_type: type[E]) -> list[E]:
        return [e for e in self._events if isinstance(e, event_type)]

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
