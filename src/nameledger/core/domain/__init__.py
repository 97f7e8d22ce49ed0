"""
Domain models and value objects.

Contains registry records, the Coin value token, notification events,
operation results and the state snapshot.
"""

from nameledger.core.domain.coin import Coin, validate_amount
from nameledger.core.domain.events import (
    AddressAllotted,
    DomainAssigned,
    DomainDeleted,
    DomainPurchased,
    DomainTransferred,
    DomainUpdated,
    EventLog,
    EventSink,
    FeesWithdrawn,
    NullEventSink,
    RegistryEvent,
)
from nameledger.core.domain.records import (
    AddressRecord,
    DomainRecord,
    Principal,
    normalize_address,
    normalize_domain_name,
    normalize_principal,
)
from nameledger.core.domain.results import (
    DomainResolution,
    PurchaseReceipt,
    WithdrawalReceipt,
)
from nameledger.core.domain.snapshot import SNAPSHOT_SCHEMA_VERSION, RegistrySnapshot

__all__ = [
    # Records
    "AddressRecord",
    "DomainRecord",
    "Principal",
    "normalize_address",
    "normalize_domain_name",
    "normalize_principal",
    # Value token
    "Coin",
    "validate_amount",
    # Events
    "AddressAllotted",
    "DomainAssigned",
    "DomainPurchased",
    "DomainUpdated",
    "DomainTransferred",
    "DomainDeleted",
    "FeesWithdrawn",
    "RegistryEvent",
    "EventSink",
    "EventLog",
    "NullEventSink",
    # Results
    "DomainResolution",
    "PurchaseReceipt",
    "WithdrawalReceipt",
    # Snapshot
    "RegistrySnapshot",
    "SNAPSHOT_SCHEMA_VERSION",
]
