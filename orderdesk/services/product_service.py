"""
Сервис для работы с товарами
"""

import logging
from decimal import Decimal
from uuid import UUID

from orderdesk.core.config import Config
from orderdesk.core.constants import PRICE_QUANTUM, AuditAction
from orderdesk.core.exceptions import NotFoundError, ValidationError
from orderdesk.database.models import Product
from orderdesk.repositories.base import Repository, clamp_paging
from orderdesk.services.audit_service import AuditRecorder
from orderdesk.services.paging import PagedResult
from orderdesk.validators import ProductInput, ProductValidator, Validator


logger = logging.getLogger(__name__)


class ProductService:
    """Сервис для управления товарами"""

    def __init__(
        self,
        product_repo: Repository[Product],
        audit: AuditRecorder,
        validator: Validator[ProductInput] | None = None,
    ):
        self.product_repo = product_repo
        self.audit = audit
        self.validator = validator or ProductValidator(max_price=Config.MAX_PRICE)

    def _validate(self, name: str | None, price: Decimal | int | str | None) -> Decimal:
        result = self.validator.validate(ProductInput(name=name, price=price))
        if not result.is_valid:
            raise ValidationError(result.errors)
        return Decimal(str(price)).quantize(PRICE_QUANTUM)

    def create(self, name: str, price: Decimal | int | str) -> Product:
        """
        Создание товара

        Raises:
            ValidationError: Имя или цена некорректны
        """
        product_price = self._validate(name, price)
        product = Product(name=name.strip(), price=product_price)

        with self.product_repo.transaction():
            self.product_repo.add(product)
            self.audit.record(product, AuditAction.CREATED)

        logger.info(f"Товар #{product.id} создан, цена {product.price}")
        return product

    def get(self, product_id: UUID) -> Product | None:
        return self.product_repo.get(product_id)

    def get_all(self) -> list[Product]:
        return self.product_repo.get_all()

    def get_paged(self, page: int, page_size: int) -> PagedResult[Product]:
        page, page_size = clamp_paging(page, page_size)
        items, total = self.product_repo.get_paged(page, page_size)
        return PagedResult(items=items, page=page, page_size=page_size, total_count=total)

    def get_price(self, product_id: UUID) -> Decimal:
        """
        Цена товара для расчёта суммы заказа

        Raises:
            NotFoundError: Товар не найден
        """
        product = self.product_repo.get(product_id)
        if product is None:
            raise NotFoundError(Product.ENTITY_TYPE, product_id)
        return product.price

    def update(self, product_id: UUID, name: str, price: Decimal | int | str) -> Product:
        """
        Обновление товара

        Raises:
            ValidationError: Имя или цена некорректны
            NotFoundError: Товар не найден
        """
        new_price = self._validate(name, price)

        with self.product_repo.transaction():
            product = self.product_repo.get(product_id)
            if product is None:
                raise NotFoundError(Product.ENTITY_TYPE, product_id)

            product.name = name.strip()
            product.price = new_price
            self.product_repo.update(product)
            self.audit.record(product, AuditAction.UPDATED)

        logger.info(f"Товар #{product.id} обновлён")
        return product

    def delete(self, product_id: UUID) -> None:
        """Удаление товара (отсутствующий ID - не ошибка)"""
        with self.product_repo.transaction():
            product = self.product_repo.get(product_id)
            if product is None:
                return

            self.product_repo.delete(product_id)
            self.audit.record(product, AuditAction.DELETED)

        logger.info(f"Товар #{product_id} удалён")
