"""
Тесты для базовых доменных моделей: AddressRecord, DomainRecord, Coin, события

Проверяет:
1. Создание и валидацию моделей Pydantic
2. Нормализацию ключей (strip, нижний регистр для доменов)
3. Immutability (frozen=True)
4. Инварианты Coin (split / merge / destroy_zero)
5. Журнал событий EventLog
"""

import pytest
from pydantic import ValidationError

from nameledger.core.domain import (
    AddressAllotted,
    AddressRecord,
    Coin,
    DomainAssigned,
    DomainPurchased,
    DomainRecord,
    EventLog,
    NullEventSink,
    PurchaseReceipt,
    normalize_domain_name,
    validate_amount,
)
from nameledger.core.errors import InsufficientFundsError


# =============================================================================
# RECORD TESTS
# =============================================================================


class TestAddressRecord:
    """Тесты для модели AddressRecord"""

    def test_create_valid(self):
        record = AddressRecord(
            address="192.168.1.1", content_reference="ipfs://site-v1", owner="USER1"
        )

        assert record.address == "192.168.1.1"
        assert record.content_reference == "ipfs://site-v1"
        assert record.owner == "USER1"

    def test_fields_are_stripped(self):
        record = AddressRecord(
            address="  10.0.0.1 ", content_reference=" pkg ", owner=" USER1 "
        )

        assert record.address == "10.0.0.1"
        assert record.content_reference == "pkg"
        assert record.owner == "USER1"

    @pytest.mark.parametrize("field", ["address", "content_reference", "owner"])
    def test_blank_field_rejected(self, field):
        data = {"address": "10.0.0.1", "content_reference": "pkg", "owner": "USER1"}
        data[field] = "   "

        with pytest.raises(ValidationError):
            AddressRecord(**data)

    def test_immutable(self):
        record = AddressRecord(address="10.0.0.1", content_reference="pkg", owner="USER1")

        with pytest.raises(ValidationError):
            record.owner = "USER2"


class TestDomainRecord:
    """Тесты для модели DomainRecord"""

    def test_domain_name_lowercased(self):
        record = DomainRecord(domain_name=" Example.COM ", address="10.0.0.1", owner="USER1")

        assert record.domain_name == "example.com"

    def test_address_case_preserved(self):
        record = DomainRecord(domain_name="a.io", address="FE80::1", owner="USER1")

        assert record.address == "FE80::1"

    def test_empty_domain_rejected(self):
        with pytest.raises(ValidationError):
            DomainRecord(domain_name="", address="10.0.0.1", owner="USER1")

    def test_is_owned_by(self):
        record = DomainRecord(domain_name="a.io", address="10.0.0.1", owner="USER1")

        assert record.is_owned_by("USER1")
        assert not record.is_owned_by("USER2")

    def test_is_owned_by_strips_principal(self):
        record = DomainRecord(domain_name="a.io", address="10.0.0.1", owner=" USER1 ")

        assert record.owner == "USER1"
        assert record.is_owned_by(" USER1\t")
        assert not record.is_owned_by("user1")

    def test_immutable(self):
        record = DomainRecord(domain_name="a.io", address="10.0.0.1", owner="USER1")

        with pytest.raises(ValidationError):
            record.address = "10.0.0.2"

    def test_normalize_domain_name_matches_model(self):
        record = DomainRecord(domain_name="MiXeD.Org", address="10.0.0.1", owner="USER1")

        assert normalize_domain_name("  MIXED.org") == record.domain_name


# =============================================================================
# COIN TESTS
# =============================================================================


class TestCoin:
    """Тесты для value token Coin"""

    def test_split_moves_exact_amount(self):
        coin = Coin(150)

        part = coin.split(100)

        assert part.value == 100
        assert coin.value == 50

    def test_split_more_than_value_leaves_coin_unchanged(self):
        coin = Coin(40)

        with pytest.raises(InsufficientFundsError) as exc_info:
            coin.split(41)

        assert coin.value == 40
        assert exc_info.value.required == 41
        assert exc_info.value.available == 40

    def test_merge_drains_other(self):
        a, b = Coin(10), Coin(5)

        a.merge(b)

        assert a.value == 15
        assert b.value == 0
        assert b.is_zero()

    def test_merge_into_itself_rejected(self):
        coin = Coin(10)

        with pytest.raises(ValueError):
            coin.merge(coin)

    def test_destroy_zero(self):
        Coin.zero().destroy_zero()

        with pytest.raises(ValueError, match="non-zero"):
            Coin(1).destroy_zero()

    @pytest.mark.parametrize("bad", [-1, 1.5, True, "10"])
    def test_invalid_value_rejected(self, bad):
        with pytest.raises(ValueError):
            Coin(bad)

    def test_validate_amount_returns_value(self):
        assert validate_amount(0) == 0
        assert validate_amount(7) == 7


# =============================================================================
# EVENT TESTS
# =============================================================================


class TestEvents:
    """Тесты для уведомлений и EventLog"""

    def test_event_json_dump_has_kind(self):
        event = DomainPurchased(domain_name="a.io", new_owner="USER2", price=100)

        assert event.model_dump(mode="json") == {
            "kind": "DomainPurchased",
            "domain_name": "a.io",
            "new_owner": "USER2",
            "price": 100,
        }

    def test_purchase_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            DomainPurchased(domain_name="a.io", new_owner="USER2", price=0)

    def test_event_log_append_only(self):
        log = EventLog()
        log.publish(AddressAllotted(address="10.0.0.1", owner="USER1"))
        log.publish(DomainAssigned(domain_name="a.io", address="10.0.0.1", owner="USER1"))

        assert len(log) == 2
        assert [e.kind for e in log.events] == ["AddressAllotted", "DomainAssigned"]
        assert len(log.of_type(DomainAssigned)) == 1

        log.clear()
        assert len(log) == 0

    def test_null_sink_accepts_events(self):
        NullEventSink().publish(AddressAllotted(address="10.0.0.1", owner="USER1"))


def test_purchase_receipt_refund_value():
    """refund_value = 0 при точной оплате (refund=None)."""
    exact = PurchaseReceipt(
        domain_name="a.io", previous_owner="U1", new_owner="U2", price=100, refund=None
    )
    excess = PurchaseReceipt(
        domain_name="a.io", previous_owner="U1", new_owner="U2", price=100, refund=Coin(25)
    )

    assert exact.refund_value == 0
    assert excess.refund_value == 25
