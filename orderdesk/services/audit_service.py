"""
Журнал аудита: снимки сущностей при каждом изменении
"""

import logging
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter

from orderdesk.core.exceptions import AuditWriteError, StorageError
from orderdesk.database.models import AuditRecord, Entity
from orderdesk.repositories.base import AuditRepository, clamp_paging
from orderdesk.services.paging import PagedResult
from orderdesk.utils.helpers import get_now


logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _adapter_for(entity_class: type) -> TypeAdapter[Any]:
    return TypeAdapter(entity_class)


def serialize_snapshot(entity: Entity) -> str:
    """JSON-снимок сущности (UUID, Decimal и datetime в строковом виде)"""
    return _adapter_for(type(entity)).dump_json(entity).decode("utf-8")


class AuditRecorder:
    """
    Запись действий над сущностями в неизменяемый журнал

    Вызывается сервисами внутри той же транзакции, что и изменение: если
    запись в журнал не удалась, изменение откатывается.
    """

    def __init__(self, audit_repo: AuditRepository):
        """
        Args:
            audit_repo: Хранилище журнала аудита
        """
        self.audit_repo = audit_repo

    def record(self, entity: Entity, action: str) -> None:
        """
        Добавление записи в журнал

        Args:
            entity: Изменённая сущность
            action: Метка действия (Created, Updated, Deleted, StatusChanged:<Status>)

        Raises:
            AuditWriteError: Если запись не удалось сохранить
        """
        record = AuditRecord(
            entity_type=entity.ENTITY_TYPE,
            entity_id=str(entity.identity()),
            action=action,
            snapshot=serialize_snapshot(entity),
            timestamp=get_now(),
        )
        try:
            self.audit_repo.append(record)
        except StorageError as e:
            logger.error(f"ERROR: Не удалось записать аудит {action} для {record.entity_type} #{record.entity_id}: {e}")
            raise AuditWriteError(f"Не удалось записать аудит: {e}") from e

        logger.debug(f"Аудит: {record.entity_type} #{record.entity_id} {action}")

    def get_all(self) -> list[AuditRecord]:
        """Все записи журнала, новые первыми"""
        return self.audit_repo.list_newest_first()

    def get_paged(self, page: int, page_size: int) -> PagedResult[AuditRecord]:
        """Страница журнала, новые первыми"""
        page, page_size = clamp_paging(page, page_size)
        items, total = self.audit_repo.page_newest_first(page, page_size)
        return PagedResult(items=items, page=page, page_size=page_size, total_count=total)

    def get_for_entity(self, entity_type: str, entity_id: object) -> list[AuditRecord]:
        """История одной сущности, новые первыми"""
        return self.audit_repo.list_for_entity(entity_type, str(entity_id))
