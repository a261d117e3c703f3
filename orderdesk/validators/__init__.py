"""
Композируемые валидаторы входных данных
"""

from orderdesk.validators.base import (
    CompositeValidator,
    FieldValidator,
    ValidationResult,
    Validator,
)
from orderdesk.validators.entity import (
    ClientInput,
    ClientValidator,
    OrderInput,
    OrderValidator,
    ProductInput,
    ProductValidator,
)
from orderdesk.validators.primitives import (
    CpfValidator,
    NameValidator,
    PriceValidator,
    ProductIdsValidator,
    cpf_check_digit,
)


__all__ = [
    "ClientInput",
    "ClientValidator",
    "CompositeValidator",
    "CpfValidator",
    "FieldValidator",
    "NameValidator",
    "OrderInput",
    "OrderValidator",
    "PriceValidator",
    "ProductIdsValidator",
    "ProductInput",
    "ProductValidator",
    "ValidationResult",
    "Validator",
    "cpf_check_digit",
]
