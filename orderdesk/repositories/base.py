"""
Базовый контракт репозиториев

Обе реализации (SQLAlchemy и in-memory) обязаны вести себя одинаково,
за исключением долговечности данных.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Generic, TypeVar
from uuid import UUID

from orderdesk.core.config import Config
from orderdesk.core.constants import OrderStatus
from orderdesk.database.models import AuditRecord, Client, Entity, Order


T = TypeVar("T", bound=Entity)


def clamp_paging(page: int, page_size: int, default_page_size: int | None = None) -> tuple[int, int]:
    """
    Нормализация параметров пагинации

    Args:
        page: Номер страницы (меньше 1 → 1)
        page_size: Размер страницы (меньше 1 → размер по умолчанию)
        default_page_size: Размер по умолчанию

    Returns:
        (page, page_size)
    """
    if default_page_size is None:
        default_page_size = Config.DEFAULT_PAGE_SIZE

    if page < 1:
        page = 1
    if page_size < 1:
        page_size = default_page_size
    return page, page_size


class Repository(ABC, Generic[T]):
    """
    Базовый класс для всех репозиториев сущностей
    """

    entity_type: str = "Entity"

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Общая транзакция хранилища (mutation + аудит фиксируются вместе)"""

    @abstractmethod
    def add(self, entity: T) -> T:
        """Вставка сущности; возвращает её без изменений"""

    @abstractmethod
    def get(self, entity_id: UUID) -> T | None:
        """Получение по ID; None если записи нет"""

    @abstractmethod
    def get_all(self) -> list[T]:
        """Все записи (порядок не гарантируется)"""

    @abstractmethod
    def get_paged(self, page: int, page_size: int) -> tuple[list[T], int]:
        """Страница записей и общее количество"""

    @abstractmethod
    def update(self, entity: T) -> None:
        """
        Полная замена записи по ID

        Raises:
            EntityNotFoundError: Записи с таким ID нет
            ConcurrentModificationError: Версия сущности устарела
        """

    @abstractmethod
    def delete(self, entity_id: UUID) -> None:
        """Удаление (отсутствующий ID - не ошибка)"""


class ClientRepository(Repository[Client]):
    """Репозиторий клиентов с поиском по CPF"""

    entity_type = Client.ENTITY_TYPE

    @abstractmethod
    def exists_by_cpf(self, cpf: str, ignore_id: UUID | None = None) -> bool:
        """Есть ли клиент с таким CPF (кроме ignore_id)"""

    @abstractmethod
    def get_by_cpf(self, cpf: str) -> Client | None:
        """Клиент по CPF"""


class OrderRepository(Repository[Order]):
    """Репозиторий заказов с фильтром по статусу"""

    entity_type = Order.ENTITY_TYPE

    @abstractmethod
    def get_by_status(self, status: OrderStatus) -> list[Order]:
        """Заказы в указанном статусе"""


class AuditRepository(ABC):
    """Журнал аудита: только добавление и чтение"""

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Общая транзакция хранилища"""

    @abstractmethod
    def append(self, record: AuditRecord) -> None:
        """Добавление записи"""

    @abstractmethod
    def list_newest_first(self) -> list[AuditRecord]:
        """Все записи, новые первыми"""

    @abstractmethod
    def page_newest_first(self, page: int, page_size: int) -> tuple[list[AuditRecord], int]:
        """Страница записей (новые первыми) и общее количество"""

    @abstractmethod
    def list_for_entity(self, entity_type: str, entity_id: str) -> list[AuditRecord]:
        """История одной сущности, новые первыми"""
