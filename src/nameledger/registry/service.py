"""RegistryService — операции над AddressRegistry и DomainRegistry.

Модель исполнения:
- Каждый публичный вызов выполняется целиком под RLock сервиса
  (single-writer, сериализованные вызовы)
- Все предусловия проверяются до первой мутации: неудачный вызов
  не оставляет частичного состояния
- Уведомления буферизуются, при фиксации переносятся в outbox и
  публикуются в порядке фиксации уже после освобождения RLock;
  каждое уведомление перед публикацией проверяется по registry_event.json

State machine домена: Absent → Active(owner, address) → Absent (delete).

Права:
- update / transfer / delete: только владелец (NotOwnerError)
- buy: любой покупатель при оплате >= price, согласие владельца не требуется
- withdraw_fees: без проверки вызывающего (известный пробел, см. метод)
"""

import threading
from collections import deque
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Union

import structlog
from jsonschema import ValidationError as ContractViolation

from nameledger.config import RegistrySettings, get_settings
from nameledger.core.contracts import RegistryEventValidator, validate_registry_snapshot
from nameledger.core.domain.coin import Coin, validate_amount
from nameledger.core.domain.events import (
    AddressAllotted,
    DomainAssigned,
    DomainDeleted,
    DomainPurchased,
    DomainTransferred,
    DomainUpdated,
    EventSink,
    FeesWithdrawn,
    NullEventSink,
    RegistryEvent,
)
from nameledger.core.domain.records import (
    AddressRecord,
    DomainRecord,
    Principal,
    normalize_principal,
)
from nameledger.core.domain.results import (
    DomainResolution,
    PurchaseReceipt,
    WithdrawalReceipt,
)
from nameledger.core.domain.snapshot import RegistrySnapshot
from nameledger.core.errors import (
    AlreadyExistsError,
    InsufficientFundsError,
    NotOwnerError,
    RegistryError,
)
from nameledger.logging_setup import configure_logging_from_settings

from .address_registry import AddressRegistry
from .domain_registry import DOMAIN_KIND, DomainRegistry


logger = structlog.get_logger(__name__)


class RegistryService:
    """Операционный слой реестра доменов.

    Хранилища передаются явно (dependency injection); сервис не использует
    глобальных экземпляров. Время жизни состояния = время жизни объектов.
    """

    def __init__(
        self,
        addresses: Optional[AddressRegistry] = None,
        domains: Optional[DomainRegistry] = None,
        *,
        price: Optional[int] = None,
        events: Optional[EventSink] = None,
        settings: Optional[RegistrySettings] = None,
    ):
        """
        Args:
            addresses: хранилище адресов (по умолчанию пустое)
            domains: хранилище доменов и сборов (по умолчанию пустое)
            price: фиксированная цена покупки; по умолчанию DOMAIN_PRICE из settings
            events: получатель уведомлений (по умолчанию отбрасываются)
            settings: настройки; по умолчанию get_settings()
        """
        if price is None:
            price = (settings or get_settings()).DOMAIN_PRICE
        validate_amount(price, "price")
        if price == 0:
            raise ValueError("price must be positive")

        self._addresses = addresses if addresses is not None else AddressRegistry()
        self._domains = domains if domains is not None else DomainRegistry()
        self._price = price
        self._events: EventSink = events if events is not None else NullEventSink()
        self._lock = threading.RLock()
        # Зафиксированные, но ещё не опубликованные уведомления (FIFO)
        self._outbox: deque[RegistryEvent] = deque()
        self._publish_lock = threading.Lock()
        self._event_validator = RegistryEventValidator()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[RegistrySettings] = None,
        events: Optional[EventSink] = None,
    ) -> "RegistryService":
        """Сервис с пустыми хранилищами; цена и логирование из настроек."""
        settings = settings or get_settings()
        configure_logging_from_settings(settings)
        return cls(settings=settings, events=events)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def price(self) -> int:
        return self._price

    @property
    def fee_balance(self) -> int:
        with self._lock:
            return self._domains.fee_balance

    @property
    def address_registry(self) -> AddressRegistry:
        return self._addresses

    @property
    def domain_registry(self) -> DomainRegistry:
        return self._domains

    # =========================================================================
    # ADDRESS OPERATIONS
    # =========================================================================

    def allot_address(
        self, address: str, content_reference: str, owner: Principal
    ) -> AddressRecord:
        """
        Выделение адреса владельцу.

        Raises:
            AlreadyExistsError: адрес уже выделен
        """
        with self._operation("allot_address", address=address) as pending:
            record = self._addresses.allot(address, content_reference, owner)
            pending.append(AddressAllotted(address=record.address, owner=record.owner))
            logger.info("address_allotted", address=record.address, owner=record.owner)
            return record

    def read_address(self, address: str) -> tuple[Principal, str]:
        """
        Returns:
            (owner, content_reference)

        Raises:
            NotFoundError: адрес не выделен
        """
        with self._operation("read_address", address=address):
            return self._addresses.read(address)

    def check_address(self, address: str) -> bool:
        with self._lock:
            return self._addresses.contains(address)

    # =========================================================================
    # DOMAIN CREATION
    # =========================================================================

    def assign_domain(
        self,
        domain_name: str,
        address: str,
        content_reference: str,
        owner: Principal,
    ) -> DomainRecord:
        """
        Регистрация домена за owner.

        Если address ещё не выделен, он выделяется тому же owner с
        content_reference в рамках того же вызова.

        Raises:
            AlreadyExistsError: домен уже зарегистрирован
        """
        with self._operation("assign_domain", domain_name=domain_name) as pending:
            return self._assign_locked(
                pending, domain_name, address, owner, content_reference
            )

    def create_domain(
        self,
        caller: Principal,
        domain_name: str,
        address: str,
        content_reference: Optional[str] = None,
    ) -> DomainRecord:
        """
        Регистрация домена за вызывающим.

        Без content_reference невыделенный address не выделяется: домен
        привязывается к нему, а read_domain вернёт NotFoundError до
        выделения адреса.

        Raises:
            AlreadyExistsError: домен уже зарегистрирован
        """
        with self._operation("create_domain", domain_name=domain_name) as pending:
            return self._assign_locked(
                pending, domain_name, address, caller, content_reference
            )

    def _assign_locked(
        self,
        pending: list[RegistryEvent],
        domain_name: str,
        address: str,
        owner: Principal,
        content_reference: Optional[str],
    ) -> DomainRecord:
        record = DomainRecord(domain_name=domain_name, address=address, owner=owner)
        if self._domains.contains(record.domain_name):
            raise AlreadyExistsError(DOMAIN_KIND, record.domain_name)

        # Адрес и домен вставляются только после всех проверок
        address_record: Optional[AddressRecord] = None
        if content_reference is not None and not self._addresses.contains(record.address):
            address_record = AddressRecord(
                address=record.address,
                content_reference=content_reference,
                owner=record.owner,
            )

        if address_record is not None:
            self._addresses.insert(address_record)
            pending.append(
                AddressAllotted(address=address_record.address, owner=address_record.owner)
            )
            logger.info(
                "address_allotted",
                address=address_record.address,
                owner=address_record.owner,
                implicit=True,
            )

        self._domains.insert(record)
        pending.append(
            DomainAssigned(
                domain_name=record.domain_name,
                address=record.address,
                owner=record.owner,
            )
        )
        logger.info(
            "domain_assigned",
            domain_name=record.domain_name,
            address=record.address,
            owner=record.owner,
        )
        return record

    # =========================================================================
    # DOMAIN QUERIES
    # =========================================================================

    def read_domain(self, domain_name: str) -> tuple[Principal, str]:
        """
        Returns:
            (owner домена, content_reference привязанного адреса)

        Raises:
            NotFoundError: домен отсутствует или привязанный адрес не выделен
        """
        resolution = self.resolve_domain(domain_name)
        return resolution.owner, resolution.content_reference

    def resolve_domain(self, domain_name: str) -> DomainResolution:
        """Полное разрешение домена через AddressRegistry."""
        with self._operation("resolve_domain", domain_name=domain_name):
            record = self._domains.get(domain_name)
            address_record = self._addresses.get(record.address)
            return DomainResolution(
                domain_name=record.domain_name,
                owner=record.owner,
                address=record.address,
                content_reference=address_record.content_reference,
                address_owner=address_record.owner,
            )

    def check_domain(self, domain_name: str) -> bool:
        with self._lock:
            return self._domains.contains(domain_name)

    def get_all_domains_by_owner(self, owner: Principal) -> dict[str, str]:
        """Домены владельца: domain_name → address. Порядок не определён."""
        with self._lock:
            return self._domains.owned_by(owner)

    def list_by_owner(self, owner: Principal) -> frozenset[str]:
        with self._lock:
            return frozenset(self._domains.owned_by(owner))

    # =========================================================================
    # OWNER-GATED MUTATIONS
    # =========================================================================

    def update_domain(
        self, caller: Principal, domain_name: str, new_address: str
    ) -> DomainRecord:
        """
        Перепривязка домена к new_address (адрес не выделяется).

        Raises:
            NotFoundError: домен отсутствует
            NotOwnerError: caller не владелец
        """
        with self._operation("update_domain", domain_name=domain_name, caller=caller) as pending:
            current = self._owned_record_locked(caller, domain_name)
            updated = DomainRecord(
                domain_name=current.domain_name, address=new_address, owner=current.owner
            )
            self._domains.replace(updated)
            pending.append(
                DomainUpdated(
                    domain_name=updated.domain_name,
                    old_address=current.address,
                    new_address=updated.address,
                    owner=updated.owner,
                )
            )
            logger.info(
                "domain_updated",
                domain_name=updated.domain_name,
                old_address=current.address,
                new_address=updated.address,
            )
            return updated

    def transfer_domain(
        self, caller: Principal, domain_name: str, new_owner: Principal
    ) -> DomainRecord:
        """
        Передача домена new_owner.

        Raises:
            NotFoundError: домен отсутствует
            NotOwnerError: caller не владелец
        """
        with self._operation("transfer_domain", domain_name=domain_name, caller=caller) as pending:
            current = self._owned_record_locked(caller, domain_name)
            updated = DomainRecord(
                domain_name=current.domain_name, address=current.address, owner=new_owner
            )
            self._domains.replace(updated)
            pending.append(
                DomainTransferred(
                    domain_name=updated.domain_name,
                    previous_owner=current.owner,
                    new_owner=updated.owner,
                )
            )
            logger.info(
                "domain_transferred",
                domain_name=updated.domain_name,
                previous_owner=current.owner,
                new_owner=updated.owner,
            )
            return updated

    def delete_domain(self, caller: Principal, domain_name: str) -> DomainRecord:
        """
        Удаление домена. Запись адреса остаётся (orphaned).

        Raises:
            NotFoundError: домен отсутствует
            NotOwnerError: caller не владелец
        """
        with self._operation("delete_domain", domain_name=domain_name, caller=caller) as pending:
            current = self._owned_record_locked(caller, domain_name)
            removed = self._domains.remove(current.domain_name)
            pending.append(DomainDeleted(domain_name=removed.domain_name, owner=removed.owner))
            logger.info("domain_deleted", domain_name=removed.domain_name, owner=removed.owner)
            return removed

    def _owned_record_locked(self, caller: Principal, domain_name: str) -> DomainRecord:
        record = self._domains.get(domain_name)
        if not record.is_owned_by(caller):
            raise NotOwnerError(record.domain_name, normalize_principal(caller), record.owner)
        return record

    # =========================================================================
    # PAYMENTS
    # =========================================================================

    def buy_domain(
        self, buyer: Principal, domain_name: str, payment: Coin
    ) -> PurchaseReceipt:
        """
        Покупка домена по фиксированной цене.

        Ровно price переходит в fee balance, остаток возвращается в
        PurchaseReceipt.refund; нулевой остаток уничтожается (refund=None).
        payment после успешного вызова пуст. Согласие текущего владельца
        не требуется.

        Raises:
            NotFoundError: домен отсутствует
            InsufficientFundsError: payment.value < price (payment не меняется)
        """
        with self._operation("buy_domain", domain_name=domain_name, buyer=buyer) as pending:
            current = self._domains.get(domain_name)
            updated = DomainRecord(
                domain_name=current.domain_name, address=current.address, owner=buyer
            )
            if payment.value < self._price:
                raise InsufficientFundsError(required=self._price, available=payment.value)

            self._domains.deposit_fee(payment.split(self._price))
            self._domains.replace(updated)

            refund: Optional[Coin] = None
            if payment.is_zero():
                payment.destroy_zero()
            else:
                refund = payment.split(payment.value)

            pending.append(
                DomainPurchased(
                    domain_name=updated.domain_name,
                    new_owner=updated.owner,
                    price=self._price,
                )
            )
            logger.info(
                "domain_purchased",
                domain_name=updated.domain_name,
                previous_owner=current.owner,
                new_owner=updated.owner,
                price=self._price,
                refund=refund.value if refund is not None else 0,
            )
            return PurchaseReceipt(
                domain_name=updated.domain_name,
                previous_owner=current.owner,
                new_owner=updated.owner,
                price=self._price,
                refund=refund,
            )

    def withdraw_fees(self, amount: int, recipient: Principal) -> WithdrawalReceipt:
        """
        Вывод amount из fee balance получателю.

        Проверки вызывающего нет: любой может вывести сборы. Это известный
        пробел исходного поведения; access control должен добавлять
        окружающий слой.

        Raises:
            ValueError: amount не целое неотрицательное
            InsufficientFundsError: amount > fee balance (баланс не меняется)
        """
        with self._operation("withdraw_fees", amount=amount, recipient=recipient) as pending:
            validate_amount(amount)
            event = FeesWithdrawn(amount=amount, recipient=recipient)
            coin = self._domains.withdraw_fee(amount)
            pending.append(event)
            logger.info(
                "fees_withdrawn",
                amount=amount,
                recipient=recipient,
                fee_balance=self._domains.fee_balance,
            )
            return WithdrawalReceipt(amount=amount, recipient=event.recipient, coin=coin)

    # =========================================================================
    # SNAPSHOTS
    # =========================================================================

    def snapshot(self) -> RegistrySnapshot:
        with self._lock:
            return RegistrySnapshot(
                addresses=list(self._addresses.records()),
                domains=list(self._domains.records()),
                fee_balance=self._domains.fee_balance,
            )

    @classmethod
    def from_snapshot(
        cls,
        snapshot: Union[RegistrySnapshot, dict[str, Any]],
        *,
        price: Optional[int] = None,
        events: Optional[EventSink] = None,
        settings: Optional[RegistrySettings] = None,
    ) -> "RegistryService":
        """
        Восстановление сервиса из снапшота.

        dict проверяется по registry_snapshot.json до построения моделей.
        Уведомления при восстановлении не публикуются.

        Raises:
            jsonschema.ValidationError: dict не соответствует контракту
            AlreadyExistsError: дублирующиеся ключи в снапшоте
        """
        if isinstance(snapshot, dict):
            validate_registry_snapshot(snapshot)
            snapshot = RegistrySnapshot.model_validate(snapshot)

        addresses = AddressRegistry()
        for address_record in snapshot.addresses:
            addresses.insert(address_record)

        domains = DomainRegistry(fee_balance=snapshot.fee_balance)
        for domain_record in snapshot.domains:
            domains.insert(domain_record)

        logger.info(
            "registry_restored",
            addresses=len(addresses),
            domains=len(domains),
            fee_balance=snapshot.fee_balance,
        )
        return cls(addresses, domains, price=price, events=events, settings=settings)

    # =========================================================================
    # CALL BOUNDARY
    # =========================================================================

    @contextmanager
    def _operation(self, operation: str, **context: Any) -> Iterator[list[RegistryEvent]]:
        """Граница вызова: lock, журнал отказов, публикация после фиксации.

        Отказы (RegistryError, ошибки валидации входа) журналируются и
        пробрасываются. Уведомления зафиксированного вызова переносятся в
        outbox под lock, а публикуются после его освобождения: слушатель
        может обращаться к сервису, не блокируя остальные вызовы.
        """
        pending: list[RegistryEvent] = []
        with self._lock:
            try:
                yield pending
            except RegistryError as e:
                self._log_rejection(operation, e, e.message, e.details, context)
                raise
            except ValueError as e:  # включая pydantic.ValidationError
                self._log_rejection(operation, e, str(e), {}, context)
                raise
            self._outbox.extend(pending)
        self._drain_outbox()

    @staticmethod
    def _log_rejection(
        operation: str,
        error: Exception,
        reason: str,
        details: dict[str, Any],
        context: dict[str, Any],
    ) -> None:
        logger.warning(
            "registry_call_rejected",
            operation=operation,
            error=type(error).__name__,
            reason=reason,
            details=details,
            **context,
        )

    def _drain_outbox(self) -> None:
        """Публикация outbox в порядке фиксации.

        _publish_lock сохраняет порядок между потоками; повторный вход из
        слушателя (тот же поток) не публикует, оставшееся допубликует
        внешний вызов.
        """
        if not self._publish_lock.acquire(blocking=False):
            return
        try:
            while True:
                try:
                    event = self._outbox.popleft()
                except IndexError:
                    break
                self._publish(event)
        finally:
            self._publish_lock.release()
        # Уведомления, зафиксированные другим потоком во время публикации
        if self._outbox:
            self._drain_outbox()

    def _publish(self, event: RegistryEvent) -> None:
        try:
            self._event_validator.validate(event.model_dump(mode="json"))
        except ContractViolation as e:
            logger.error("event_contract_violation", kind=event.kind, reason=e.message)
            return
        # Вызов уже зафиксирован: ошибка слушателя его не откатывает
        try:
            self._events.publish(event)
        except Exception:
            logger.exception("event_publish_failed", kind=event.kind)
