"""
Константы приложения - статусы заказов, действия аудита, лимиты
"""

from decimal import Decimal
from enum import IntEnum


# Пагинация
DEFAULT_PAGE_SIZE = 10

# Лимиты валидации
CLIENT_NAME_MAX_LENGTH = 100
PRODUCT_NAME_MAX_LENGTH = 200
NAME_MIN_LENGTH = 2
MAX_PRICE = Decimal("999999.99")
PRICE_QUANTUM = Decimal("0.01")  # Цены хранятся с точностью до копейки
CPF_LENGTH = 11


class OrderStatus(IntEnum):
    """Статусы заказов (в БД хранится целочисленный код)"""

    CREATED = 0  # Создан
    PAID = 1  # Оплачен
    CANCELED = 2  # Отменён

    @property
    def label(self) -> str:
        """Название статуса для журнала аудита: Created, Paid, Canceled"""
        return self.name.capitalize()

    @classmethod
    def all_statuses(cls) -> list["OrderStatus"]:
        """Список всех статусов"""
        return [cls.CREATED, cls.PAID, cls.CANCELED]

    @classmethod
    def get_status_name(cls, status: "OrderStatus") -> str:
        """Получение названия статуса на русском"""
        names = {
            cls.CREATED: "Создан",
            cls.PAID: "Оплачен",
            cls.CANCELED: "Отменён",
        }
        return names.get(status, str(status))

    @classmethod
    def parse(cls, value: "str | int | OrderStatus") -> "OrderStatus":
        """
        Разбор статуса из кода или названия (без учёта регистра)

        Raises:
            ValueError: Если статус неизвестен
        """
        if isinstance(value, OrderStatus):
            return value
        if isinstance(value, int):
            return cls(value)
        for status in cls:
            if status.label.lower() == value.strip().lower():
                return status
        raise ValueError(f"Неизвестный статус заказа: {value}")


class AuditAction:
    """Метки действий в журнале аудита"""

    CREATED = "Created"
    UPDATED = "Updated"
    DELETED = "Deleted"
    STATUS_CHANGED_PREFIX = "StatusChanged"

    @classmethod
    def status_changed(cls, status: OrderStatus) -> str:
        """Метка смены статуса, например StatusChanged:Paid"""
        return f"{cls.STATUS_CHANGED_PREFIX}:{status.label}"


class StorageBackend:
    """Реализации хранилища"""

    ORM = "orm"  # SQLAlchemy (SQLite / PostgreSQL)
    MEMORY = "memory"  # В памяти процесса

    @classmethod
    def all_backends(cls) -> list[str]:
        """Список всех реализаций"""
        return [cls.ORM, cls.MEMORY]
