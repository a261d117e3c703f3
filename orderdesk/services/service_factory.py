"""
Factory для создания сервисов и репозиториев
"""

import logging

from orderdesk.core.config import Config
from orderdesk.core.constants import StorageBackend
from orderdesk.database.models import Product
from orderdesk.database.orm_database import ORMDatabase
from orderdesk.domain.order_state_machine import OrderStateMachine
from orderdesk.repositories import (
    AuditRepository,
    ClientRepository,
    InMemoryAuditRepository,
    InMemoryClientRepository,
    InMemoryOrderRepository,
    InMemoryProductRepository,
    MemoryStorage,
    ORMAuditRepository,
    ORMClientRepository,
    ORMOrderRepository,
    ORMProductRepository,
    OrderRepository,
    Repository,
)
from orderdesk.services.audit_service import AuditRecorder
from orderdesk.services.client_service import ClientService
from orderdesk.services.order_service import OrderService
from orderdesk.services.product_service import ProductService


logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory для создания сервисов с инжекцией зависимостей

    Все репозитории одной фабрики работают с одним хранилищем, поэтому
    изменение и запись аудита попадают в общую транзакцию.
    """

    def __init__(
        self,
        backend: str | None = None,
        database_url: str | None = None,
        db: ORMDatabase | None = None,
        storage: MemoryStorage | None = None,
    ):
        """
        Инициализация фабрики

        Args:
            backend: "orm" или "memory" (по умолчанию из Config.STORAGE_BACKEND)
            database_url: URL базы данных для ORM (по умолчанию из Config.DATABASE_URL)
            db: Готовое подключение ORMDatabase
            storage: Готовое in-memory хранилище
        """
        self.backend = backend or Config.STORAGE_BACKEND
        if self.backend not in StorageBackend.all_backends():
            raise ValueError(f"Неизвестный backend хранилища: {self.backend}")

        self.database_url = database_url
        self._db = db
        self._storage = storage
        self._client_repo = None
        self._product_repo = None
        self._order_repo = None
        self._audit_repo = None
        self._audit_recorder = None
        self._client_service = None
        self._product_service = None
        self._order_service = None
        self._state_machine = None

    @property
    def is_orm(self) -> bool:
        return self.backend == StorageBackend.ORM

    @property
    def db(self) -> ORMDatabase:
        """Ленивое подключение к БД (создаёт таблицы при первом обращении)"""
        if self._db is None:
            self._db = ORMDatabase(self.database_url)
            self._db.connect()
            self._db.init_db()
        return self._db

    @property
    def storage(self) -> MemoryStorage:
        """Ленивая инициализация MemoryStorage"""
        if self._storage is None:
            self._storage = MemoryStorage()
        return self._storage

    @property
    def client_repository(self) -> ClientRepository:
        """Ленивая инициализация ClientRepository"""
        if self._client_repo is None:
            if self.is_orm:
                self._client_repo = ORMClientRepository(self.db)
            else:
                self._client_repo = InMemoryClientRepository(self.storage)
        return self._client_repo

    @property
    def product_repository(self) -> Repository[Product]:
        """Ленивая инициализация репозитория товаров"""
        if self._product_repo is None:
            if self.is_orm:
                self._product_repo = ORMProductRepository(self.db)
            else:
                self._product_repo = InMemoryProductRepository(self.storage)
        return self._product_repo

    @property
    def order_repository(self) -> OrderRepository:
        """Ленивая инициализация OrderRepository"""
        if self._order_repo is None:
            if self.is_orm:
                self._order_repo = ORMOrderRepository(self.db)
            else:
                self._order_repo = InMemoryOrderRepository(self.storage)
        return self._order_repo

    @property
    def audit_repository(self) -> AuditRepository:
        """Ленивая инициализация AuditRepository"""
        if self._audit_repo is None:
            if self.is_orm:
                self._audit_repo = ORMAuditRepository(self.db)
            else:
                self._audit_repo = InMemoryAuditRepository(self.storage)
        return self._audit_repo

    @property
    def audit_recorder(self) -> AuditRecorder:
        if self._audit_recorder is None:
            self._audit_recorder = AuditRecorder(self.audit_repository)
        return self._audit_recorder

    @property
    def state_machine(self) -> OrderStateMachine:
        """Ленивая инициализация OrderStateMachine"""
        if self._state_machine is None:
            self._state_machine = OrderStateMachine()
        return self._state_machine

    @property
    def client_service(self) -> ClientService:
        """Получение Client Service"""
        if self._client_service is None:
            self._client_service = ClientService(
                client_repo=self.client_repository, audit=self.audit_recorder
            )
        return self._client_service

    @property
    def product_service(self) -> ProductService:
        """Получение Product Service"""
        if self._product_service is None:
            self._product_service = ProductService(
                product_repo=self.product_repository, audit=self.audit_recorder
            )
        return self._product_service

    @property
    def order_service(self) -> OrderService:
        """Получение Order Service"""
        if self._order_service is None:
            self._order_service = OrderService(
                order_repo=self.order_repository,
                audit=self.audit_recorder,
                state_machine=self.state_machine,
            )
        return self._order_service

    def close(self) -> None:
        """Закрытие подключения к БД, если оно открывалось"""
        if self._db is not None:
            self._db.disconnect()

    def reset(self):
        """Сброс кэшированных сервисов (для тестирования)"""
        self._client_repo = None
        self._product_repo = None
        self._order_repo = None
        self._audit_repo = None
        self._audit_recorder = None
        self._client_service = None
        self._product_service = None
        self._order_service = None
        self._state_machine = None
        logger.debug("ServiceFactory: сервисы сброшены")
