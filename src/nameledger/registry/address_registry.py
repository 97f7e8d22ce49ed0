"""
AddressRegistry — хранилище выделенных адресов

Leaf-компонент: address → AddressRecord.

Записи write-once: выделяются один раз, путей обновления и удаления нет.
Хранилище не синхронизировано само по себе, сериализацию вызовов
обеспечивает RegistryService.
"""

from typing import Iterator, Optional

from nameledger.core.domain.records import AddressRecord, Principal, normalize_address
from nameledger.core.errors import AlreadyExistsError, NotFoundError


ADDRESS_KIND = "address"


class AddressRegistry:
    """Key-unique таблица address → AddressRecord."""

    def __init__(self) -> None:
        self._records: dict[str, AddressRecord] = {}

    def allot(self, address: str, content_reference: str, owner: Principal) -> AddressRecord:
        """
        Выделение адреса.

        Запись строится (и валидируется) до проверки уникальности, чтобы
        ключ проверялся в канонической форме.

        Raises:
            AlreadyExistsError: Если адрес уже выделен
            ValidationError: Если поля пустые
        """
        record = AddressRecord(
            address=address, content_reference=content_reference, owner=owner
        )
        self.insert(record)
        return record

    def insert(self, record: AddressRecord) -> None:
        if record.address in self._records:
            raise AlreadyExistsError(ADDRESS_KIND, record.address)
        self._records[record.address] = record

    def read(self, address: str) -> tuple[Principal, str]:
        """
        Чтение адреса.

        Returns:
            (owner, content_reference)

        Raises:
            NotFoundError: Если адрес не выделен
        """
        record = self.get(address)
        return record.owner, record.content_reference

    def get(self, address: str) -> AddressRecord:
        record = self.find(address)
        if record is None:
            raise NotFoundError(ADDRESS_KIND, normalize_address(address))
        return record

    def find(self, address: str) -> Optional[AddressRecord]:
        return self._records.get(normalize_address(address))

    def contains(self, address: str) -> bool:
        return normalize_address(address) in self._records

    def records(self) -> Iterator[AddressRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and self.contains(address)
