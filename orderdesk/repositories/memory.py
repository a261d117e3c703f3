"""
In-memory реализация хранилища

Используется в тестах и как облегчённая замена БД. Семантика совпадает с
SQLAlchemy-реализацией: сущности копируются при записи и чтении, update
проверяет существование и версию, transaction() откатывает все таблицы
при ошибке.
"""

import copy
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID

from orderdesk.core.constants import OrderStatus
from orderdesk.database.models import AuditRecord, Client, Order, Product
from orderdesk.repositories.base import (
    AuditRepository,
    ClientRepository,
    OrderRepository,
    Repository,
    T,
    clamp_paging,
)
from orderdesk.repositories.exceptions import ConcurrentModificationError, EntityNotFoundError
from orderdesk.utils.helpers import clean_cpf


logger = logging.getLogger(__name__)


class MemoryStorage:
    """
    Таблицы в памяти процесса

    Все операции выполняются под одной реентерабельной блокировкой, поэтому
    параллельные вызовы не портят внутреннее состояние.
    """

    def __init__(self):
        self._tables: dict[str, dict[Any, Any]] = {}
        self._lock = threading.RLock()
        self._in_transaction = False

    def table(self, name: str) -> dict[Any, Any]:
        """Таблица по имени (создаётся при первом обращении)"""
        return self._tables.setdefault(name, {})

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @contextmanager
    def transaction(self) -> Iterator["MemoryStorage"]:
        """
        Транзакция: при исключении все таблицы возвращаются к исходному состоянию

        Вложенные вызовы присоединяются к внешней транзакции.
        """
        with self._lock:
            if self._in_transaction:
                yield self
                return

            # Значения в таблицах не изменяются на месте, достаточно копии словарей
            saved = {name: dict(rows) for name, rows in self._tables.items()}
            self._in_transaction = True
            try:
                yield self
            except Exception:
                self._tables = saved
                logger.debug("Транзакция в памяти отменена (rollback)")
                raise
            finally:
                self._in_transaction = False

    def clear(self) -> None:
        """Очистка всех таблиц"""
        with self._lock:
            self._tables.clear()


class InMemoryRepository(Repository[T]):
    """Базовый in-memory репозиторий"""

    table_name: str = "entities"

    def __init__(self, storage: MemoryStorage | None = None):
        self.storage = storage or MemoryStorage()

    @property
    def _rows(self) -> dict[UUID, T]:
        return self.storage.table(self.table_name)

    def transaction(self):
        return self.storage.transaction()

    def add(self, entity: T) -> T:
        with self.storage.lock:
            self._rows[entity.identity()] = copy.deepcopy(entity)
        return entity

    def get(self, entity_id: UUID) -> T | None:
        with self.storage.lock:
            entity = self._rows.get(entity_id)
            return copy.deepcopy(entity) if entity is not None else None

    def get_all(self) -> list[T]:
        with self.storage.lock:
            return [copy.deepcopy(entity) for entity in self._rows.values()]

    def get_paged(self, page: int, page_size: int) -> tuple[list[T], int]:
        page, page_size = clamp_paging(page, page_size)
        with self.storage.lock:
            rows = list(self._rows.values())
        start = (page - 1) * page_size
        return [copy.deepcopy(entity) for entity in rows[start : start + page_size]], len(rows)

    def update(self, entity: T) -> None:
        entity_id = entity.identity()
        with self.storage.lock:
            stored = self._rows.get(entity_id)
            if stored is None:
                raise EntityNotFoundError(self.entity_type, entity_id)
            if stored.version != entity.version:
                raise ConcurrentModificationError(self.entity_type, entity_id, entity.version)

            replacement = copy.deepcopy(entity)
            replacement.version = entity.version + 1
            self._rows[entity_id] = replacement
        entity.version += 1

    def delete(self, entity_id: UUID) -> None:
        with self.storage.lock:
            self._rows.pop(entity_id, None)

    def _select(self, predicate) -> list[T]:
        with self.storage.lock:
            return [copy.deepcopy(entity) for entity in self._rows.values() if predicate(entity)]


class InMemoryClientRepository(InMemoryRepository[Client], ClientRepository):
    """In-memory репозиторий клиентов"""

    table_name = "clients"

    def exists_by_cpf(self, cpf: str, ignore_id: UUID | None = None) -> bool:
        cpf = clean_cpf(cpf)
        with self.storage.lock:
            return any(
                client.cpf == cpf and client.id != ignore_id for client in self._rows.values()
            )

    def get_by_cpf(self, cpf: str) -> Client | None:
        cpf = clean_cpf(cpf)
        matches = self._select(lambda client: client.cpf == cpf)
        return matches[0] if matches else None


class InMemoryProductRepository(InMemoryRepository[Product]):
    """In-memory репозиторий товаров"""

    table_name = "products"
    entity_type = Product.ENTITY_TYPE


class InMemoryOrderRepository(InMemoryRepository[Order], OrderRepository):
    """In-memory репозиторий заказов"""

    table_name = "orders"

    def get_by_status(self, status: OrderStatus) -> list[Order]:
        return self._select(lambda order: order.status == status)


class InMemoryAuditRepository(AuditRepository):
    """In-memory журнал аудита"""

    table_name = "audit_records"

    def __init__(self, storage: MemoryStorage | None = None):
        self.storage = storage or MemoryStorage()

    @property
    def _rows(self) -> dict[UUID, AuditRecord]:
        return self.storage.table(self.table_name)

    def transaction(self):
        return self.storage.transaction()

    def append(self, record: AuditRecord) -> None:
        with self.storage.lock:
            self._rows[record.id] = record

    def list_newest_first(self) -> list[AuditRecord]:
        with self.storage.lock:
            records = list(self._rows.values())
        # Сначала обратный порядок вставки, затем стабильная сортировка по времени
        records.reverse()
        return sorted(records, key=lambda record: record.timestamp, reverse=True)

    def page_newest_first(self, page: int, page_size: int) -> tuple[list[AuditRecord], int]:
        page, page_size = clamp_paging(page, page_size)
        records = self.list_newest_first()
        start = (page - 1) * page_size
        return records[start : start + page_size], len(records)

    def list_for_entity(self, entity_type: str, entity_id: str) -> list[AuditRecord]:
        return [
            record
            for record in self.list_newest_first()
            if record.entity_type == entity_type and record.entity_id == entity_id
        ]
