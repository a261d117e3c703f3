"""
Базовые классы валидации

Валидатор - чистая функция value -> ValidationResult без побочных эффектов
и без обращения к хранилищу.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class ValidationResult:
    """Результат валидации: валиден тогда и только тогда, когда ошибок нет"""

    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def failure(cls, *errors: str) -> "ValidationResult":
        return cls(errors=tuple(errors))

    @classmethod
    def from_errors(cls, errors: Iterable[str]) -> "ValidationResult":
        return cls(errors=tuple(errors))


class Validator(ABC, Generic[T]):
    """Базовый валидатор"""

    @abstractmethod
    def validate(self, value: T) -> ValidationResult:
        """Проверка значения"""

    def __call__(self, value: T) -> ValidationResult:
        return self.validate(value)


class CompositeValidator(Validator[T]):
    """
    Составной валидатор

    Запускает все зарегистрированные валидаторы (без остановки на первой
    ошибке) и объединяет ошибки в порядке регистрации.
    """

    def __init__(self, validators: Iterable[Validator[T]] | None = None):
        self._validators: list[Validator[T]] = list(validators or [])

    def add_validator(self, validator: Validator[T]) -> "CompositeValidator[T]":
        """Регистрация валидатора (можно вызывать цепочкой)"""
        self._validators.append(validator)
        return self

    @property
    def validators(self) -> list[Validator[T]]:
        return list(self._validators)

    def validate(self, value: T) -> ValidationResult:
        errors: list[str] = []
        for validator in self._validators:
            errors.extend(validator.validate(value).errors)
        return ValidationResult.from_errors(errors)


class FieldValidator(Validator[Any]):
    """Применяет валидатор значения к одному полю объекта"""

    def __init__(self, getter: Callable[[Any], Any], validator: Validator[Any]):
        self.getter = getter
        self.validator = validator

    def validate(self, value: Any) -> ValidationResult:
        return self.validator.validate(self.getter(value))
