"""
Тесты для State Machine заказов
"""

import pytest

from orderdesk.core.constants import OrderStatus
from orderdesk.domain import InvalidStateTransitionError, OrderStateMachine


class TestOrderStateMachine:
    """Тесты переходов статусов"""

    @pytest.mark.parametrize("target", [OrderStatus.PAID, OrderStatus.CANCELED])
    def test_created_can_move(self, target):
        assert OrderStateMachine.can_transition(OrderStatus.CREATED, target)

    @pytest.mark.parametrize("status", OrderStatus.all_statuses())
    def test_same_state_is_noop(self, status):
        """Повторный переход в тот же статус допустим и ничего не меняет"""
        result = OrderStateMachine.validate_transition(status, status)
        assert result.is_valid
        assert result.is_noop

    def test_real_transition_not_noop(self):
        result = OrderStateMachine.validate_transition(OrderStatus.CREATED, OrderStatus.PAID)
        assert result.is_valid
        assert not result.is_noop

    def test_cancel_paid_forbidden(self):
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            OrderStateMachine.validate_transition(OrderStatus.PAID, OrderStatus.CANCELED)
        assert exc_info.value.reason == "оплаченный заказ не может быть отменён"
        assert exc_info.value.from_state == OrderStatus.PAID
        assert exc_info.value.to_state == OrderStatus.CANCELED

    def test_pay_canceled_forbidden(self):
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            OrderStateMachine.transition(OrderStatus.CANCELED, OrderStatus.PAID)
        assert "отменённый заказ не может быть оплачен" in str(exc_info.value)

    def test_back_to_created_forbidden(self):
        assert not OrderStateMachine.can_transition(OrderStatus.PAID, OrderStatus.CREATED)
        assert not OrderStateMachine.can_transition(OrderStatus.CANCELED, OrderStatus.CREATED)

    def test_without_exception(self):
        """raise_exception=False возвращает результат с причиной"""
        result = OrderStateMachine.validate_transition(
            OrderStatus.CANCELED, OrderStatus.PAID, raise_exception=False
        )
        assert not result.is_valid
        assert result.error_message == "отменённый заказ не может быть оплачен"

    def test_available_transitions(self):
        assert OrderStateMachine.get_available_transitions(OrderStatus.CREATED) == [
            OrderStatus.PAID,
            OrderStatus.CANCELED,
        ]
        assert OrderStateMachine.get_available_transitions(OrderStatus.PAID) == []

    def test_terminal_states(self):
        assert not OrderStateMachine.is_terminal_state(OrderStatus.CREATED)
        assert OrderStateMachine.is_terminal_state(OrderStatus.PAID)
        assert OrderStateMachine.is_terminal_state(OrderStatus.CANCELED)
