"""
Простые валидаторы: имя, цена, CPF, список товаров
"""

import re
from decimal import Decimal, InvalidOperation

from orderdesk.core.constants import (
    CLIENT_NAME_MAX_LENGTH,
    CPF_LENGTH,
    MAX_PRICE,
    NAME_MIN_LENGTH,
    PRICE_QUANTUM,
)
from orderdesk.utils.helpers import clean_cpf
from orderdesk.validators.base import ValidationResult, Validator


class NameValidator(Validator[str | None]):
    """Валидация имени: обязательно, длина после обрезки пробелов в пределах"""

    def __init__(self, min_length: int = NAME_MIN_LENGTH, max_length: int = CLIENT_NAME_MAX_LENGTH):
        self.min_length = min_length
        self.max_length = max_length

    def validate(self, value: str | None) -> ValidationResult:
        if value is None or not value.strip():
            return ValidationResult.failure("Имя обязательно")

        errors = []
        trimmed = value.strip()
        if len(trimmed) < self.min_length:
            errors.append(f"Имя должно содержать минимум {self.min_length} символа")
        if len(trimmed) > self.max_length:
            errors.append(f"Имя должно содержать максимум {self.max_length} символов")
        return ValidationResult.from_errors(errors)


class PriceValidator(Validator[Decimal | int | str | None]):
    """
    Валидация цены: положительное число, не больше двух знаков после запятой

    Верхняя граница проверяется, только если задан max_price.
    """

    def __init__(self, max_price: Decimal | None = MAX_PRICE):
        self.max_price = max_price

    def validate(self, value: Decimal | int | str | None) -> ValidationResult:
        if value is None:
            return ValidationResult.failure("Цена обязательна")

        try:
            price = Decimal(str(value))
        except InvalidOperation:
            return ValidationResult.failure("Цена должна быть числом")

        if not price.is_finite():
            return ValidationResult.failure("Цена должна быть числом")

        errors = []
        if price <= 0:
            errors.append("Цена должна быть больше нуля")
        if price.normalize().as_tuple().exponent < PRICE_QUANTUM.as_tuple().exponent:
            errors.append("Цена должна содержать не больше двух знаков после запятой")
        if self.max_price is not None and price > self.max_price:
            errors.append(f"Цена должна быть не больше {self.max_price}")
        return ValidationResult.from_errors(errors)


def cpf_check_digit(digits: str, first_weight: int) -> int:
    """
    Контрольная цифра CPF (взвешенная сумма по модулю 11)

    Args:
        digits: Цифры, по которым считается сумма (9 или 10)
        first_weight: Вес первой цифры (10 или 11), далее по убыванию до 2

    Returns:
        Контрольная цифра (остаток 10 превращается в 0)
    """
    total = sum(int(digit) * (first_weight - i) for i, digit in enumerate(digits))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


class CpfValidator(Validator[str | None]):
    """
    Валидация CPF (11 цифр, не все одинаковые, две контрольные цифры)

    Форматирование (точки, дефис) игнорируется. Сообщаются все нарушенные
    правила, а не только первое.
    """

    ALL_SAME_PATTERN = re.compile(r"^(\d)\1{10}$")

    def validate(self, value: str | None) -> ValidationResult:
        if value is None or not value.strip():
            return ValidationResult.failure("CPF обязателен")

        cleaned = clean_cpf(value)
        errors = []

        if len(cleaned) != CPF_LENGTH:
            errors.append(f"CPF должен содержать ровно {CPF_LENGTH} цифр")

        if self.ALL_SAME_PATTERN.match(cleaned):
            errors.append("CPF не может состоять из одинаковых цифр")

        if len(cleaned) == CPF_LENGTH and not self.has_valid_checksum(cleaned):
            errors.append("CPF содержит неверные контрольные цифры")

        return ValidationResult.from_errors(errors)

    @staticmethod
    def has_valid_checksum(cpf: str) -> bool:
        """Проверка обеих контрольных цифр очищенного CPF"""
        first = cpf_check_digit(cpf[:9], 10)
        second = cpf_check_digit(cpf[:10], 11)
        return int(cpf[9]) == first and int(cpf[10]) == second


class ProductIdsValidator(Validator[list | None]):
    """Заказ должен содержать хотя бы один товар"""

    def validate(self, value: list | None) -> ValidationResult:
        if not value:
            return ValidationResult.failure("Заказ должен содержать хотя бы один товар")
        return ValidationResult.success()
