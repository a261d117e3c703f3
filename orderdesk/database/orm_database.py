"""
SQLAlchemy ORM Database класс
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError as SAIntegrityError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from orderdesk.core.config import Config
from orderdesk.core.exceptions import StorageError
from orderdesk.database.orm_models import Base
from orderdesk.repositories.exceptions import IntegrityError
from orderdesk.utils.pii_masking import sanitize_log_message


logger = logging.getLogger(__name__)


class ORMDatabase:
    """Класс для работы с базой данных через SQLAlchemy ORM"""

    def __init__(self, database_url: str | None = None):
        """
        Инициализация ORM Database

        Args:
            database_url: URL базы данных (SQLite или PostgreSQL)
        """
        self.database_url = database_url or Config.DATABASE_URL
        self.engine: Engine | None = None
        self.session_factory: sessionmaker[Session] | None = None
        self._is_sqlite = self.database_url.startswith("sqlite")
        # Сессия текущей транзакции (unit of work), общая для всех репозиториев
        self._current_session: ContextVar[Session | None] = ContextVar(
            f"orderdesk_session_{id(self)}", default=None
        )

    @property
    def _is_memory_sqlite(self) -> bool:
        return self._is_sqlite and (
            ":memory:" in self.database_url or self.database_url.rstrip("/") == "sqlite:"
        )

    def connect(self) -> None:
        """Подключение к базе данных"""
        try:
            logger.info("Инициализация подключения к БД...")
            logger.info(f"   Is SQLite: {self._is_sqlite}")

            engine_kwargs: dict = {"echo": Config.DATABASE_ECHO}
            if self._is_sqlite:
                engine_kwargs["connect_args"] = {"check_same_thread": False}
                if self._is_memory_sqlite:
                    # Одно соединение на весь процесс, иначе каждая сессия видит пустую БД
                    engine_kwargs["poolclass"] = StaticPool
            else:
                engine_kwargs["pool_pre_ping"] = True  # Проверка соединения перед использованием
                engine_kwargs["pool_recycle"] = 3600  # Переподключение каждый час

            self.engine = create_engine(self.database_url, **engine_kwargs)
            self.session_factory = sessionmaker(self.engine, expire_on_commit=False)

            logger.info("OK: Подключено к базе данных")
        except SQLAlchemyError as e:
            logger.error(f"ERROR: Ошибка подключения к БД: {e}")
            raise StorageError(f"Не удалось подключиться к БД: {e}") from e

    def init_db(self) -> None:
        """Создание таблиц (без миграций)"""
        if not self.engine:
            raise RuntimeError("База данных не подключена")
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StorageError(f"Не удалось создать схему БД: {e}") from e
        logger.info("OK: Схема БД создана")

    def disconnect(self) -> None:
        """Отключение от базы данных"""
        if self.engine:
            self.engine.dispose()
            self.engine = None
            self.session_factory = None
            logger.info("Отключено от базы данных")

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Context manager для транзакции (unit of work)

        Все репозитории этой БД внутри блока используют одну сессию и
        фиксируются одним commit. Вложенные вызовы присоединяются к внешней
        транзакции.

        Usage:
            with db.transaction():
                client_repo.add(client)
                audit_repo.append(record)
        """
        if not self.session_factory:
            raise RuntimeError("База данных не подключена")

        current = self._current_session.get()
        if current is not None:
            yield current
            return

        session = self.session_factory()
        token = self._current_session.set(session)
        try:
            yield session
            session.commit()
            logger.debug("OK: Транзакция успешно завершена (commit)")
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"ERROR: Транзакция отменена (rollback): {sanitize_log_message(str(e))}")
            raise self._translate_error(e) from e
        except Exception as e:
            session.rollback()
            logger.debug(f"Транзакция отменена (rollback): {type(e).__name__}")
            raise
        finally:
            self._current_session.reset(token)
            session.close()

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """
        Сессия для одной операции репозитория

        Вне transaction() операция фиксируется сразу (commit при выходе).
        """
        with self.transaction() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                raise self._translate_error(e) from e

    @staticmethod
    def _translate_error(error: SQLAlchemyError) -> StorageError:
        if isinstance(error, SAIntegrityError):
            return IntegrityError(f"Нарушение ограничения целостности: {error.orig}")
        return StorageError(f"Ошибка базы данных: {error}")
