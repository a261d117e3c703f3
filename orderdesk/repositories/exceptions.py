"""
Исключения для работы с репозиториями
"""

from orderdesk.core.exceptions import ConflictError, NotFoundError, StorageError


class ConcurrentModificationError(ConflictError):
    """
    Исключение при конфликте версий (optimistic locking)

    Возникает когда запись была изменена другим процессом между
    чтением и попыткой обновления.
    """

    def __init__(self, entity_type: str, entity_id: object, expected_version: int):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected_version = expected_version
        super().__init__(
            f"{entity_type} #{entity_id} был изменён другим процессом "
            f"(ожидалась версия {expected_version}). Перечитайте запись и повторите"
        )


class EntityNotFoundError(NotFoundError):
    """
    Исключение при обновлении отсутствующей записи
    """


class IntegrityError(StorageError):
    """
    Исключение при нарушении целостности данных
    """
