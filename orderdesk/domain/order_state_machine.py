"""
State Machine для валидации переходов статусов заказов
"""

from dataclasses import dataclass

from orderdesk.core.constants import OrderStatus
from orderdesk.core.exceptions import OrderDeskError


class InvalidStateTransitionError(OrderDeskError):
    """Исключение при попытке недопустимого перехода статуса"""

    def __init__(self, from_state: OrderStatus, to_state: OrderStatus, reason: str = ""):
        self.from_state = from_state
        self.to_state = to_state
        self.reason = reason
        message = f"Недопустимый переход из '{from_state.label}' в '{to_state.label}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


@dataclass
class OrderStateTransitionResult:
    """Результат валидации перехода статуса"""

    is_valid: bool
    error_message: str | None = None
    is_noop: bool = False


class OrderStateMachine:
    """
    State Machine для управления жизненным циклом заказа

    Граф переходов:

    CREATED → PAID
       ↓
    CANCELED

    PAID и CANCELED терминальные и взаимоисключающие. Повторный переход
    в текущий статус допустим и ничего не меняет (idempotent).
    """

    TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
        OrderStatus.CREATED: {OrderStatus.PAID, OrderStatus.CANCELED},
        OrderStatus.PAID: set(),  # Терминальное состояние
        OrderStatus.CANCELED: set(),  # Терминальное состояние
    }

    # Пояснения для запрещённых переходов
    FORBIDDEN_REASONS: dict[tuple[OrderStatus, OrderStatus], str] = {
        (OrderStatus.CANCELED, OrderStatus.PAID): "отменённый заказ не может быть оплачен",
        (OrderStatus.PAID, OrderStatus.CANCELED): "оплаченный заказ не может быть отменён",
        (OrderStatus.PAID, OrderStatus.CREATED): "оплаченный заказ нельзя вернуть в статус 'Создан'",
        (OrderStatus.CANCELED, OrderStatus.CREATED): "отменённый заказ нельзя вернуть в статус 'Создан'",
    }

    @classmethod
    def can_transition(cls, from_state: OrderStatus, to_state: OrderStatus) -> bool:
        """
        Проверка возможности перехода между статусами

        Args:
            from_state: Текущий статус
            to_state: Целевой статус

        Returns:
            True если переход допустим
        """
        if from_state == to_state:
            return True  # Переход в тот же статус всегда допустим (idempotent)

        return to_state in cls.TRANSITIONS.get(from_state, set())

    @classmethod
    def validate_transition(
        cls,
        from_state: OrderStatus,
        to_state: OrderStatus,
        raise_exception: bool = True,
    ) -> OrderStateTransitionResult:
        """
        Валидация перехода статуса

        Args:
            from_state: Текущий статус заказа
            to_state: Целевой статус
            raise_exception: Выбрасывать ли исключение при ошибке

        Returns:
            OrderStateTransitionResult с результатом валидации

        Raises:
            InvalidStateTransitionError: Если переход недопустим и raise_exception=True
        """
        if from_state == to_state:
            return OrderStateTransitionResult(is_valid=True, is_noop=True)

        if cls.can_transition(from_state, to_state):
            return OrderStateTransitionResult(is_valid=True)

        reason = cls.FORBIDDEN_REASONS.get((from_state, to_state))
        if reason is None:
            reason = f"статус '{OrderStatus.get_status_name(from_state)}' является терминальным"

        if raise_exception:
            raise InvalidStateTransitionError(from_state, to_state, reason)

        return OrderStateTransitionResult(is_valid=False, error_message=reason)

    @classmethod
    def get_available_transitions(cls, from_state: OrderStatus) -> list[OrderStatus]:
        """Список статусов, в которые можно перейти из текущего"""
        return sorted(cls.TRANSITIONS.get(from_state, set()))

    @classmethod
    def is_terminal_state(cls, state: OrderStatus) -> bool:
        """
        Проверка, является ли статус терминальным

        Returns:
            True если из этого статуса нельзя никуда перейти
        """
        return len(cls.TRANSITIONS.get(state, set())) == 0

    @classmethod
    def transition(cls, from_state: OrderStatus, to_state: OrderStatus) -> OrderStateTransitionResult:
        """
        Алиас для validate_transition с выбросом исключения

        Raises:
            InvalidStateTransitionError: Если переход недопустим
        """
        return cls.validate_transition(from_state=from_state, to_state=to_state, raise_exception=True)
