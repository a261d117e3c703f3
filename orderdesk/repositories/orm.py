"""
Репозитории на SQLAlchemy ORM

Каждая операция вне transaction() фиксируется сразу (commit при выходе из
сессии). Внутри transaction() операции присоединяются к общей сессии.
"""

import logging
from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import and_, delete, func, select, update

from orderdesk.core.constants import OrderStatus
from orderdesk.database.models import AuditRecord, Client, Order, Product
from orderdesk.database.orm_models import AuditRecordRow, Base, ClientRow, OrderRow, ProductRow
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


if TYPE_CHECKING:
    from orderdesk.database.orm_database import ORMDatabase


logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Base)


class ORMRepository(Repository[T], Generic[T, R]):
    """
    Базовый ORM репозиторий

    Наследники задают модель строки и преобразования строка <-> сущность.
    """

    model: type[R]

    def __init__(self, db: "ORMDatabase"):
        """
        Инициализация репозитория

        Args:
            db: Подключенная ORM база данных
        """
        self.db = db

    def transaction(self):
        return self.db.transaction()

    @abstractmethod
    def _to_entity(self, row: R) -> T:
        """Строка таблицы -> сущность"""

    @abstractmethod
    def _to_values(self, entity: T) -> dict[str, Any]:
        """Значения колонок (кроме id и version)"""

    def add(self, entity: T) -> T:
        with self.db.get_session() as session:
            row = self.model(id=entity.identity(), version=entity.version, **self._to_values(entity))
            session.add(row)
            session.flush()
        logger.debug(f"{self.entity_type} #{entity.identity()} добавлен")
        return entity

    def get(self, entity_id: UUID) -> T | None:
        with self.db.get_session() as session:
            row = session.get(self.model, entity_id)
            return self._to_entity(row) if row is not None else None

    def get_all(self) -> list[T]:
        with self.db.get_session() as session:
            rows = session.execute(select(self.model)).scalars().all()
            return [self._to_entity(row) for row in rows]

    def get_paged(self, page: int, page_size: int) -> tuple[list[T], int]:
        page, page_size = clamp_paging(page, page_size)
        with self.db.get_session() as session:
            total = session.execute(select(func.count()).select_from(self.model)).scalar_one()
            stmt = (
                select(self.model)
                .order_by(self.model.id)
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            rows = session.execute(stmt).scalars().all()
            return [self._to_entity(row) for row in rows], total

    def update(self, entity: T) -> None:
        entity_id = entity.identity()
        with self.db.get_session() as session:
            stmt = (
                update(self.model)
                .where(and_(self.model.id == entity_id, self.model.version == entity.version))
                .values(version=entity.version + 1, **self._to_values(entity))
                .execution_options(synchronize_session="fetch")
            )
            result = session.execute(stmt)
            if result.rowcount == 0:
                exists = session.execute(
                    select(self.model.id).where(self.model.id == entity_id)
                ).first()
                if exists is None:
                    raise EntityNotFoundError(self.entity_type, entity_id)
                raise ConcurrentModificationError(self.entity_type, entity_id, entity.version)
        entity.version += 1

    def delete(self, entity_id: UUID) -> None:
        with self.db.get_session() as session:
            session.execute(
                delete(self.model)
                .where(self.model.id == entity_id)
                .execution_options(synchronize_session="fetch")
            )


class ORMClientRepository(ORMRepository[Client, ClientRow], ClientRepository):
    """ORM репозиторий клиентов"""

    model = ClientRow

    def _to_entity(self, row: ClientRow) -> Client:
        return Client(id=row.id, name=row.name, cpf=row.cpf, version=row.version)

    def _to_values(self, entity: Client) -> dict[str, Any]:
        return {"name": entity.name, "cpf": entity.cpf}

    def exists_by_cpf(self, cpf: str, ignore_id: UUID | None = None) -> bool:
        conditions = [ClientRow.cpf == clean_cpf(cpf)]
        if ignore_id is not None:
            conditions.append(ClientRow.id != ignore_id)
        with self.db.get_session() as session:
            stmt = select(func.count()).select_from(ClientRow).where(and_(*conditions))
            return session.execute(stmt).scalar_one() > 0

    def get_by_cpf(self, cpf: str) -> Client | None:
        with self.db.get_session() as session:
            stmt = select(ClientRow).where(ClientRow.cpf == clean_cpf(cpf))
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_entity(row) if row is not None else None


class ORMProductRepository(ORMRepository[Product, ProductRow]):
    """ORM репозиторий товаров"""

    model = ProductRow
    entity_type = Product.ENTITY_TYPE

    def _to_entity(self, row: ProductRow) -> Product:
        return Product(id=row.id, name=row.name, price=row.price, version=row.version)

    def _to_values(self, entity: Product) -> dict[str, Any]:
        return {"name": entity.name, "price": entity.price}


class ORMOrderRepository(ORMRepository[Order, OrderRow], OrderRepository):
    """ORM репозиторий заказов"""

    model = OrderRow

    def _to_entity(self, row: OrderRow) -> Order:
        return Order(
            id=row.id,
            client_id=row.client_id,
            product_ids=[UUID(product_id) for product_id in row.product_ids],
            created_at=row.created_at,
            status=OrderStatus(row.status),
            version=row.version,
        )

    def _to_values(self, entity: Order) -> dict[str, Any]:
        return {
            "client_id": entity.client_id,
            "product_ids": [str(product_id) for product_id in entity.product_ids],
            "created_at": entity.created_at,
            "status": int(entity.status),
        }

    def get_by_status(self, status: OrderStatus) -> list[Order]:
        with self.db.get_session() as session:
            stmt = select(OrderRow).where(OrderRow.status == int(status))
            rows = session.execute(stmt).scalars().all()
            return [self._to_entity(row) for row in rows]


class ORMAuditRepository(AuditRepository):
    """ORM журнал аудита"""

    def __init__(self, db: "ORMDatabase"):
        self.db = db

    def transaction(self):
        return self.db.transaction()

    @staticmethod
    def _to_record(row: AuditRecordRow) -> AuditRecord:
        return AuditRecord(
            id=row.id,
            entity_type=row.entity_type,
            entity_id=row.entity_id,
            action=row.action,
            snapshot=row.snapshot,
            timestamp=row.timestamp,
        )

    @staticmethod
    def _newest_first(stmt):
        return stmt.order_by(AuditRecordRow.timestamp.desc(), AuditRecordRow.seq.desc())

    def append(self, record: AuditRecord) -> None:
        with self.db.get_session() as session:
            session.add(
                AuditRecordRow(
                    id=record.id,
                    entity_type=record.entity_type,
                    entity_id=record.entity_id,
                    action=record.action,
                    snapshot=record.snapshot,
                    timestamp=record.timestamp,
                )
            )
            session.flush()

    def list_newest_first(self) -> list[AuditRecord]:
        with self.db.get_session() as session:
            rows = session.execute(self._newest_first(select(AuditRecordRow))).scalars().all()
            return [self._to_record(row) for row in rows]

    def page_newest_first(self, page: int, page_size: int) -> tuple[list[AuditRecord], int]:
        page, page_size = clamp_paging(page, page_size)
        with self.db.get_session() as session:
            total = session.execute(select(func.count()).select_from(AuditRecordRow)).scalar_one()
            stmt = (
                self._newest_first(select(AuditRecordRow))
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            rows = session.execute(stmt).scalars().all()
            return [self._to_record(row) for row in rows], total

    def list_for_entity(self, entity_type: str, entity_id: str) -> list[AuditRecord]:
        with self.db.get_session() as session:
            stmt = self._newest_first(
                select(AuditRecordRow).where(
                    and_(
                        AuditRecordRow.entity_type == entity_type,
                        AuditRecordRow.entity_id == entity_id,
                    )
                )
            )
            rows = session.execute(stmt).scalars().all()
            return [self._to_record(row) for row in rows]
