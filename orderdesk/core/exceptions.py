"""
Исключения бизнес-логики

Каждый вид ошибки соответствует отдельной политике обработки на стороне
вызывающего кода (HTTP-оболочки): ошибки ввода, конфликты, отсутствие записи,
недопустимые переходы статусов и сбои хранилища.
"""

from collections.abc import Iterable


class OrderDeskError(Exception):
    """Базовое исключение приложения"""


class ValidationError(OrderDeskError):
    """Входные данные не прошли валидацию (содержит полный список нарушений)"""

    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Ошибка валидации")


class ConflictError(OrderDeskError):
    """Нарушение уникальности (например, повторный CPF)"""


class NotFoundError(OrderDeskError):
    """Запись не найдена"""

    def __init__(self, entity_type: str, entity_id: object):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} #{entity_id} не найден")


class StorageError(OrderDeskError):
    """Сбой хранилища (ввод-вывод, ограничения целостности)"""


class AuditWriteError(StorageError):
    """Не удалось записать событие в журнал аудита"""
