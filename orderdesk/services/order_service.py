"""
Сервис для работы с заказами (бизнес-логика)
"""

import logging
from collections.abc import Callable
from decimal import Decimal
from uuid import UUID

from orderdesk.core.constants import AuditAction, OrderStatus
from orderdesk.core.exceptions import NotFoundError, ValidationError
from orderdesk.database.models import Order
from orderdesk.domain.order_state_machine import OrderStateMachine
from orderdesk.repositories.base import OrderRepository, clamp_paging
from orderdesk.services.audit_service import AuditRecorder
from orderdesk.services.paging import PagedResult
from orderdesk.validators import OrderInput, OrderValidator, Validator


logger = logging.getLogger(__name__)


class OrderService:
    """
    Сервис для управления заказами
    Инкапсулирует бизнес-логику работы с заказами
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        audit: AuditRecorder,
        state_machine: OrderStateMachine | None = None,
        validator: Validator[OrderInput] | None = None,
    ):
        """
        Инициализация сервиса

        Args:
            order_repo: Репозиторий заказов
            audit: Журнал аудита
            state_machine: State machine для валидации переходов
            validator: Валидатор данных заказа
        """
        self.order_repo = order_repo
        self.audit = audit
        self.state_machine = state_machine or OrderStateMachine()
        self.validator = validator or OrderValidator()

    def _validate(self, client_id: UUID | None, product_ids: list[UUID] | None) -> list[UUID]:
        product_ids = list(product_ids or [])
        result = self.validator.validate(OrderInput(client_id=client_id, product_ids=product_ids))
        if not result.is_valid:
            raise ValidationError(result.errors)
        return product_ids

    def _require(self, order_id: UUID) -> Order:
        order = self.order_repo.get(order_id)
        if order is None:
            logger.warning(f"Заказ #{order_id} не найден")
            raise NotFoundError(Order.ENTITY_TYPE, order_id)
        return order

    def create(self, client_id: UUID | None, product_ids: list[UUID]) -> Order:
        """
        Создание нового заказа

        Args:
            client_id: ID клиента
            product_ids: ID товаров (повтор = количество)

        Returns:
            Созданный заказ в статусе CREATED

        Raises:
            ValidationError: Список товаров пуст
        """
        order = Order(client_id=client_id, product_ids=self._validate(client_id, product_ids))

        with self.order_repo.transaction():
            self.order_repo.add(order)
            self.audit.record(order, AuditAction.CREATED)

        logger.info(f"Заказ #{order.id} создан, товаров: {len(order.product_ids)}")
        return order

    def get(self, order_id: UUID) -> Order | None:
        """
        Получение заказа по ID

        Args:
            order_id: ID заказа

        Returns:
            Заказ или None
        """
        return self.order_repo.get(order_id)

    def get_all(self) -> list[Order]:
        return self.order_repo.get_all()

    def get_by_status(self, status: OrderStatus | int | str) -> list[Order]:
        """
        Заказы в указанном статусе

        Args:
            status: Статус, его код или название (Paid, canceled, ...)

        Raises:
            ValueError: Если статус неизвестен
        """
        return self.order_repo.get_by_status(OrderStatus.parse(status))

    def get_paged(self, page: int, page_size: int) -> PagedResult[Order]:
        page, page_size = clamp_paging(page, page_size)
        items, total = self.order_repo.get_paged(page, page_size)
        return PagedResult(items=items, page=page, page_size=page_size, total_count=total)

    def update(self, order_id: UUID, client_id: UUID | None, product_ids: list[UUID]) -> Order:
        """
        Замена клиента и списка товаров (статус не меняется)

        Raises:
            ValidationError: Список товаров пуст
            NotFoundError: Заказ не найден
        """
        product_ids = self._validate(client_id, product_ids)

        with self.order_repo.transaction():
            order = self._require(order_id)
            order.client_id = client_id
            order.product_ids = product_ids
            self.order_repo.update(order)
            self.audit.record(order, AuditAction.UPDATED)

        logger.info(f"Заказ #{order.id} обновлён")
        return order

    def _change_status(self, order_id: UUID, new_status: OrderStatus) -> Order:
        with self.order_repo.transaction():
            order = self._require(order_id)
            old_status = order.status

            result = self.state_machine.validate_transition(old_status, new_status)
            if result.is_noop:
                logger.debug(f"Заказ #{order_id} уже в статусе {new_status.label}")
                return order

            order.status = new_status
            self.order_repo.update(order)
            self.audit.record(order, AuditAction.status_changed(new_status))

        logger.info(f"OK: Заказ #{order_id}: {old_status.label} → {new_status.label}")
        return order

    def pay(self, order_id: UUID) -> Order:
        """
        Оплата заказа

        Raises:
            NotFoundError: Заказ не найден
            InvalidStateTransitionError: Заказ отменён
        """
        return self._change_status(order_id, OrderStatus.PAID)

    def cancel(self, order_id: UUID) -> Order:
        """
        Отмена заказа

        Raises:
            NotFoundError: Заказ не найден
            InvalidStateTransitionError: Заказ оплачен
        """
        return self._change_status(order_id, OrderStatus.CANCELED)

    def delete(self, order_id: UUID) -> None:
        """Удаление заказа (отсутствующий ID - не ошибка)"""
        with self.order_repo.transaction():
            order = self.order_repo.get(order_id)
            if order is None:
                return

            self.order_repo.delete(order_id)
            self.audit.record(order, AuditAction.DELETED)

        logger.info(f"Заказ #{order_id} удалён")

    def get_total(self, order_id: UUID, price_resolver: Callable[[UUID], Decimal]) -> Decimal:
        """
        Итоговая сумма заказа

        Args:
            order_id: ID заказа
            price_resolver: Цена товара по его ID (вызывается для каждой ссылки)

        Returns:
            Сумма цен всех ссылок с учётом повторов

        Raises:
            NotFoundError: Заказ не найден
        """
        order = self._require(order_id)
        return sum((price_resolver(product_id) for product_id in order.product_ids), Decimal("0"))
