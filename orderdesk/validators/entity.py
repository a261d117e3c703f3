"""
Валидаторы сущностей, собранные из простых валидаторов
"""

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from orderdesk.core.constants import CLIENT_NAME_MAX_LENGTH, MAX_PRICE, PRODUCT_NAME_MAX_LENGTH
from orderdesk.validators.base import CompositeValidator, FieldValidator
from orderdesk.validators.primitives import (
    CpfValidator,
    NameValidator,
    PriceValidator,
    ProductIdsValidator,
)


@dataclass(frozen=True)
class ClientInput:
    """Данные клиента для валидации"""

    name: str | None
    cpf: str | None


@dataclass(frozen=True)
class ProductInput:
    """Данные товара для валидации"""

    name: str | None
    price: Decimal | int | str | None


@dataclass(frozen=True)
class OrderInput:
    """Данные заказа для валидации"""

    client_id: UUID | None
    product_ids: list[UUID] = field(default_factory=list)


class ClientValidator(CompositeValidator[ClientInput]):
    """Имя (2-100 символов) + CPF"""

    def __init__(self):
        super().__init__()
        self.add_validator(
            FieldValidator(lambda client: client.name, NameValidator(max_length=CLIENT_NAME_MAX_LENGTH))
        ).add_validator(FieldValidator(lambda client: client.cpf, CpfValidator()))


class ProductValidator(CompositeValidator[ProductInput]):
    """Имя (2-200 символов) + цена"""

    def __init__(self, max_price: Decimal | None = MAX_PRICE):
        super().__init__()
        self.add_validator(
            FieldValidator(
                lambda product: product.name, NameValidator(max_length=PRODUCT_NAME_MAX_LENGTH)
            )
        ).add_validator(FieldValidator(lambda product: product.price, PriceValidator(max_price)))


class OrderValidator(CompositeValidator[OrderInput]):
    """Заказ: минимум один товар (существование клиента не проверяется)"""

    def __init__(self):
        super().__init__()
        self.add_validator(FieldValidator(lambda order: order.product_ids, ProductIdsValidator()))
