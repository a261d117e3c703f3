"""
Сервис для работы с клиентами (бизнес-логика)
"""

import logging
from uuid import UUID

from orderdesk.core.constants import AuditAction
from orderdesk.core.exceptions import ConflictError, NotFoundError, ValidationError
from orderdesk.database.models import Client
from orderdesk.repositories.base import ClientRepository, clamp_paging
from orderdesk.services.audit_service import AuditRecorder
from orderdesk.services.paging import PagedResult
from orderdesk.utils.helpers import clean_cpf
from orderdesk.utils.pii_masking import mask_cpf, mask_name
from orderdesk.validators import ClientInput, ClientValidator, Validator


logger = logging.getLogger(__name__)


class ClientService:
    """
    Сервис для управления клиентами

    Порядок: валидация → проверка уникальности CPF → запись → аудит.
    CPF хранится очищенным (только цифры), имя - без крайних пробелов.
    """

    def __init__(
        self,
        client_repo: ClientRepository,
        audit: AuditRecorder,
        validator: Validator[ClientInput] | None = None,
    ):
        """
        Инициализация сервиса

        Args:
            client_repo: Репозиторий клиентов
            audit: Журнал аудита
            validator: Валидатор данных клиента
        """
        self.client_repo = client_repo
        self.audit = audit
        self.validator = validator or ClientValidator()

    def _validate(self, name: str | None, cpf: str | None) -> None:
        result = self.validator.validate(ClientInput(name=name, cpf=cpf))
        if not result.is_valid:
            logger.info(f"Данные клиента не прошли валидацию: {len(result.errors)} ошибок")
            raise ValidationError(result.errors)

    def _ensure_cpf_is_free(self, cpf: str, ignore_id: UUID | None = None) -> None:
        if self.client_repo.exists_by_cpf(cpf, ignore_id=ignore_id):
            logger.warning(f"Клиент с CPF {mask_cpf(cpf)} уже существует")
            raise ConflictError("Клиент с таким CPF уже существует")

    def create(self, name: str, cpf: str) -> Client:
        """
        Создание клиента

        Raises:
            ValidationError: Имя или CPF некорректны
            ConflictError: CPF уже принадлежит другому клиенту
        """
        self._validate(name, cpf)
        client = Client(name=name.strip(), cpf=clean_cpf(cpf))

        with self.client_repo.transaction():
            self._ensure_cpf_is_free(client.cpf)
            self.client_repo.add(client)
            self.audit.record(client, AuditAction.CREATED)

        logger.info(f"Клиент #{client.id} создан: {mask_name(client.name)}, CPF {mask_cpf(client.cpf)}")
        return client

    def get(self, client_id: UUID) -> Client | None:
        """Клиент по ID или None"""
        return self.client_repo.get(client_id)

    def get_by_cpf(self, cpf: str) -> Client | None:
        """Клиент по CPF в любом формате или None"""
        return self.client_repo.get_by_cpf(cpf)

    def get_all(self) -> list[Client]:
        """Все клиенты"""
        return self.client_repo.get_all()

    def get_paged(self, page: int, page_size: int) -> PagedResult[Client]:
        """Страница клиентов"""
        page, page_size = clamp_paging(page, page_size)
        items, total = self.client_repo.get_paged(page, page_size)
        return PagedResult(items=items, page=page, page_size=page_size, total_count=total)

    def update(self, client_id: UUID, name: str, cpf: str) -> Client:
        """
        Обновление клиента

        Raises:
            ValidationError: Имя или CPF некорректны
            NotFoundError: Клиент не найден
            ConflictError: CPF принадлежит другому клиенту
        """
        self._validate(name, cpf)

        with self.client_repo.transaction():
            client = self.client_repo.get(client_id)
            if client is None:
                raise NotFoundError(Client.ENTITY_TYPE, client_id)

            cleaned = clean_cpf(cpf)
            self._ensure_cpf_is_free(cleaned, ignore_id=client_id)

            client.name = name.strip()
            client.cpf = cleaned
            self.client_repo.update(client)
            self.audit.record(client, AuditAction.UPDATED)

        logger.info(f"Клиент #{client.id} обновлён")
        return client

    def delete(self, client_id: UUID) -> None:
        """Удаление клиента (отсутствующий ID - не ошибка)"""
        with self.client_repo.transaction():
            client = self.client_repo.get(client_id)
            if client is None:
                return

            self.client_repo.delete(client_id)
            self.audit.record(client, AuditAction.DELETED)

        logger.info(f"Клиент #{client_id} удалён")
