"""
Модели данных

Все сущности, попадающие в журнал аудита, явно объявляют тип (ENTITY_TYPE)
и идентификатор (identity()), без поиска полей через интроспекцию.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID, uuid4

from orderdesk.core.constants import OrderStatus
from orderdesk.utils.helpers import get_now


class Entity:
    """Базовый класс сущностей с идентичностью"""

    ENTITY_TYPE: ClassVar[str] = "Entity"

    id: UUID
    version: int

    def identity(self) -> UUID:
        """Идентификатор сущности"""
        return self.id


@dataclass
class Client(Entity):
    """Модель клиента"""

    ENTITY_TYPE: ClassVar[str] = "Client"

    name: str = ""
    cpf: str = ""  # Хранится очищенным: 11 цифр
    id: UUID = field(default_factory=uuid4)
    version: int = 1


@dataclass
class Product(Entity):
    """Модель товара"""

    ENTITY_TYPE: ClassVar[str] = "Product"

    name: str = ""
    price: Decimal = Decimal("0")
    id: UUID = field(default_factory=uuid4)
    version: int = 1


@dataclass
class Order(Entity):
    """
    Модель заказа

    product_ids может содержать повторы: количество товара задаётся
    повторением ссылки. Итоговая сумма не хранится, а вычисляется.
    """

    ENTITY_TYPE: ClassVar[str] = "Order"

    client_id: UUID | None = None
    product_ids: list[UUID] = field(default_factory=list)
    created_at: datetime = field(default_factory=get_now)
    status: OrderStatus = OrderStatus.CREATED
    id: UUID = field(default_factory=uuid4)
    version: int = 1


@dataclass(frozen=True)
class AuditRecord:
    """Запись журнала аудита (неизменяема)"""

    entity_type: str
    entity_id: str
    action: str
    snapshot: str  # JSON-снимок сущности на момент действия
    timestamp: datetime = field(default_factory=get_now)
    id: UUID = field(default_factory=uuid4)

    def snapshot_data(self) -> dict[str, Any]:
        """Снимок сущности в виде словаря"""
        return json.loads(self.snapshot)
