"""
Тесты сервисов на обеих реализациях хранилища
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from uuid import uuid4

import pytest

from orderdesk.core.constants import AuditAction, OrderStatus, StorageBackend
from orderdesk.core.exceptions import (
    AuditWriteError,
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from orderdesk.domain import InvalidStateTransitionError
from orderdesk.services import ServiceFactory


def _break_audit(monkeypatch, factory):
    """Запись в журнал аудита всегда завершается ошибкой"""

    def failing_append(record):
        raise StorageError("диск переполнен")

    monkeypatch.setattr(factory.audit_repository, "append", failing_append)


class TestClientService:
    """Тесты сервиса клиентов"""

    def test_create(self, client_service, audit):
        """Имя обрезается, CPF хранится очищенным"""
        client = client_service.create("  Maria Silva ", "529.982.247-25")

        assert client.name == "Maria Silva"
        assert client.cpf == "52998224725"
        assert client_service.get(client.id) == client

        records = audit.get_all()
        assert len(records) == 1
        assert records[0].action == AuditAction.CREATED
        assert records[0].entity_type == "Client"
        assert records[0].entity_id == str(client.id)
        assert records[0].snapshot_data()["cpf"] == "52998224725"

    def test_create_invalid(self, client_service, audit):
        """Все ошибки сообщаются сразу, ничего не записывается"""
        with pytest.raises(ValidationError) as exc_info:
            client_service.create("", "123")

        assert exc_info.value.errors == ["Имя обязательно", "CPF должен содержать ровно 11 цифр"]
        assert client_service.get_all() == []
        assert audit.get_all() == []

    def test_create_duplicate_cpf_any_format(self, client_service, audit, valid_cpf):
        """Один и тот же CPF в разном формате - конфликт"""
        client_service.create("Maria Silva", "529.982.247-25")

        with pytest.raises(ConflictError):
            client_service.create("João Souza", valid_cpf)

        assert len(client_service.get_all()) == 1
        assert len(audit.get_all()) == 1

    def test_get_by_cpf(self, client_service, valid_cpf):
        client = client_service.create("Maria Silva", valid_cpf)
        assert client_service.get_by_cpf("529.982.247-25").id == client.id
        assert client_service.get_by_cpf("11144477735") is None

    def test_update(self, client_service, audit, valid_cpf, other_valid_cpf):
        client = client_service.create("Maria Silva", valid_cpf)
        updated = client_service.update(client.id, "Maria Souza", other_valid_cpf)

        assert updated.name == "Maria Souza"
        assert updated.cpf == other_valid_cpf
        assert updated.version == 2
        assert client_service.get(client.id).cpf == other_valid_cpf
        assert audit.get_all()[0].action == AuditAction.UPDATED

    def test_update_keeps_own_cpf(self, client_service, valid_cpf):
        """Свой CPF не считается конфликтом"""
        client = client_service.create("Maria Silva", valid_cpf)
        updated = client_service.update(client.id, "Maria S.", "529.982.247-25")
        assert updated.name == "Maria S."

    def test_update_conflict(self, client_service, valid_cpf, other_valid_cpf):
        client_service.create("Maria Silva", valid_cpf)
        other = client_service.create("João Souza", other_valid_cpf)

        with pytest.raises(ConflictError):
            client_service.update(other.id, "João Souza", valid_cpf)
        assert client_service.get(other.id).cpf == other_valid_cpf

    def test_update_missing(self, client_service, valid_cpf):
        with pytest.raises(NotFoundError):
            client_service.update(uuid4(), "Maria Silva", valid_cpf)

    def test_update_invalid_before_lookup(self, client_service):
        """Валидация выполняется раньше поиска записи"""
        with pytest.raises(ValidationError):
            client_service.update(uuid4(), "M", "123")

    def test_delete(self, client_service, audit, valid_cpf):
        client = client_service.create("Maria Silva", valid_cpf)
        client_service.delete(client.id)

        assert client_service.get(client.id) is None
        records = audit.get_all()
        assert [r.action for r in records] == [AuditAction.DELETED, AuditAction.CREATED]

    def test_delete_missing_is_noop(self, client_service, audit):
        client_service.delete(uuid4())
        assert audit.get_all() == []

    def test_get_paged(self, client_service):
        cpfs = ["52998224725", "11144477735", "12345678909"]
        for i, cpf in enumerate(cpfs):
            client_service.create(f"Cliente {i}", cpf)

        page = client_service.get_paged(0, 0)
        assert page.page == 1
        assert page.page_size == 10
        assert page.total_count == 3
        assert len(page.items) == 3
        assert not page.has_next

    def test_audit_failure_rolls_back(self, monkeypatch, factory, client_service, valid_cpf):
        """Ошибка записи аудита отменяет создание клиента"""
        _break_audit(monkeypatch, factory)

        with pytest.raises(AuditWriteError):
            client_service.create("Maria Silva", valid_cpf)

        assert client_service.get_all() == []


class TestProductService:
    """Тесты сервиса товаров"""

    def test_create(self, product_service, audit):
        product = product_service.create(" Caneta ", "10.50")
        assert product.name == "Caneta"
        assert product.price == Decimal("10.50")
        assert product_service.get(product.id).price == Decimal("10.50")
        assert audit.get_all()[0].entity_type == "Product"

    @pytest.mark.parametrize("price", ["abc", 0, "-3", "1000000"])
    def test_create_invalid_price(self, product_service, price):
        with pytest.raises(ValidationError):
            product_service.create("Caneta", price)
        assert product_service.get_all() == []

    def test_update(self, product_service, audit):
        product = product_service.create("Caneta", Decimal("10.50"))
        updated = product_service.update(product.id, "Caneta azul", Decimal("11.00"))

        assert updated.version == 2
        assert product_service.get(product.id).name == "Caneta azul"
        assert audit.get_all()[0].action == AuditAction.UPDATED

    def test_update_missing(self, product_service):
        with pytest.raises(NotFoundError):
            product_service.update(uuid4(), "Caneta", "1")

    def test_delete(self, product_service, audit):
        product = product_service.create("Caneta", "1")
        product_service.delete(product.id)
        product_service.delete(product.id)

        assert product_service.get(product.id) is None
        assert [r.action for r in audit.get_all()] == [AuditAction.DELETED, AuditAction.CREATED]

    def test_get_price_missing(self, product_service):
        with pytest.raises(NotFoundError):
            product_service.get_price(uuid4())

    def test_price_stored_with_cents(self, product_service, order_service, audit):
        """Цена приводится к двум знакам одинаково в обеих реализациях"""
        product = product_service.create("Caneta", "10.5")

        assert str(product.price) == "10.50"
        assert str(product_service.get(product.id).price) == "10.50"
        assert audit.get_all()[0].snapshot_data()["price"] == "10.50"

        order = order_service.create(uuid4(), [product.id, product.id])
        total = order_service.get_total(order.id, product_service.get_price)
        assert str(total) == "21.00"

    def test_price_with_fraction_of_cent_rejected(self, product_service, audit):
        with pytest.raises(ValidationError) as exc_info:
            product_service.create("Caneta", "10.555")

        assert exc_info.value.errors == ["Цена должна содержать не больше двух знаков после запятой"]
        assert product_service.get_all() == []
        assert audit.get_all() == []

    def test_update_price_with_fraction_of_cent_rejected(self, product_service):
        product = product_service.create("Caneta", "10.50")
        with pytest.raises(ValidationError):
            product_service.update(product.id, "Caneta", "10.555")
        assert product_service.get(product.id).price == Decimal("10.50")


class TestOrderService:
    """Тесты сервиса заказов"""

    @pytest.fixture
    def prices(self, product_service):
        pen = product_service.create("Caneta", Decimal("10.50"))
        notebook = product_service.create("Caderno", Decimal("15.75"))
        return pen, notebook

    def test_create(self, order_service, audit):
        client_id, product_id = uuid4(), uuid4()
        order = order_service.create(client_id, [product_id])

        assert order.status == OrderStatus.CREATED
        assert order.client_id == client_id
        assert order.product_ids == [product_id]
        assert order_service.get(order.id) == order

        records = audit.get_for_entity("Order", order.id)
        assert [r.action for r in records] == [AuditAction.CREATED]

    def test_create_empty(self, order_service, audit):
        with pytest.raises(ValidationError) as exc_info:
            order_service.create(uuid4(), [])
        assert exc_info.value.errors == ["Заказ должен содержать хотя бы один товар"]
        assert order_service.get_all() == []
        assert audit.get_all() == []

    def test_total(self, order_service, product_service, prices):
        pen, notebook = prices
        order = order_service.create(uuid4(), [pen.id, notebook.id])
        assert order_service.get_total(order.id, product_service.get_price) == Decimal("26.25")

    def test_total_with_repeats(self, order_service, product_service, prices):
        """Повтор товара означает количество"""
        pen, notebook = prices
        order = order_service.create(uuid4(), [pen.id, pen.id, notebook.id])
        assert order_service.get_total(order.id, product_service.get_price) == Decimal("36.75")

    def test_total_missing(self, order_service, product_service):
        with pytest.raises(NotFoundError):
            order_service.get_total(uuid4(), product_service.get_price)

    def test_pay(self, order_service, audit):
        order = order_service.create(uuid4(), [uuid4()])
        paid = order_service.pay(order.id)

        assert paid.status == OrderStatus.PAID
        assert order_service.get(order.id).status == OrderStatus.PAID
        assert audit.get_all()[0].action == "StatusChanged:Paid"
        assert audit.get_all()[0].snapshot_data()["status"] == int(OrderStatus.PAID)

    def test_pay_twice_is_noop(self, order_service, audit):
        """Повторная оплата ничего не пишет"""
        order = order_service.create(uuid4(), [uuid4()])
        order_service.pay(order.id)
        again = order_service.pay(order.id)

        assert again.status == OrderStatus.PAID
        assert again.version == 2
        assert len(audit.get_all()) == 2

    def test_cancel(self, order_service, audit):
        order = order_service.create(uuid4(), [uuid4()])
        canceled = order_service.cancel(order.id)
        order_service.cancel(order.id)

        assert canceled.status == OrderStatus.CANCELED
        assert [r.action for r in audit.get_all()] == ["StatusChanged:Canceled", AuditAction.CREATED]

    def test_cancel_paid_forbidden(self, order_service, audit):
        order = order_service.create(uuid4(), [uuid4()])
        order_service.pay(order.id)

        with pytest.raises(InvalidStateTransitionError):
            order_service.cancel(order.id)
        assert order_service.get(order.id).status == OrderStatus.PAID
        assert len(audit.get_all()) == 2

    def test_pay_canceled_forbidden(self, order_service):
        order = order_service.create(uuid4(), [uuid4()])
        order_service.cancel(order.id)

        with pytest.raises(InvalidStateTransitionError):
            order_service.pay(order.id)
        assert order_service.get(order.id).status == OrderStatus.CANCELED

    @pytest.mark.parametrize("operation", ["pay", "cancel"])
    def test_status_change_missing(self, order_service, operation):
        with pytest.raises(NotFoundError):
            getattr(order_service, operation)(uuid4())

    def test_update_keeps_status(self, order_service, audit):
        """Обновление меняет клиента и товары, но не статус"""
        order = order_service.create(uuid4(), [uuid4()])
        order_service.pay(order.id)

        new_client, new_product = uuid4(), uuid4()
        updated = order_service.update(order.id, new_client, [new_product, new_product])

        assert updated.status == OrderStatus.PAID
        loaded = order_service.get(order.id)
        assert loaded.client_id == new_client
        assert loaded.product_ids == [new_product, new_product]
        assert loaded.created_at == order.created_at
        assert audit.get_all()[0].action == AuditAction.UPDATED

    def test_update_missing(self, order_service):
        with pytest.raises(NotFoundError):
            order_service.update(uuid4(), uuid4(), [uuid4()])

    def test_update_empty_products(self, order_service):
        """Ошибка валидации важнее отсутствия записи"""
        with pytest.raises(ValidationError):
            order_service.update(uuid4(), uuid4(), [])

    def test_delete(self, order_service, audit):
        order = order_service.create(uuid4(), [uuid4()])
        order_service.delete(order.id)
        order_service.delete(order.id)

        assert order_service.get(order.id) is None
        assert [r.action for r in audit.get_all()] == [AuditAction.DELETED, AuditAction.CREATED]

    def test_get_by_status(self, order_service):
        first = order_service.create(uuid4(), [uuid4()])
        second = order_service.create(uuid4(), [uuid4()])
        order_service.pay(second.id)

        assert [o.id for o in order_service.get_by_status(OrderStatus.CREATED)] == [first.id]
        assert [o.id for o in order_service.get_by_status(OrderStatus.PAID)] == [second.id]

    def test_get_by_status_name_or_code(self, order_service):
        """Статус можно передать названием или кодом"""
        order = order_service.create(uuid4(), [uuid4()])
        order_service.cancel(order.id)

        assert [o.id for o in order_service.get_by_status("canceled")] == [order.id]
        assert [o.id for o in order_service.get_by_status(2)] == [order.id]
        assert order_service.get_by_status("Paid") == []

    def test_get_by_status_unknown(self, order_service):
        with pytest.raises(ValueError):
            order_service.get_by_status("shipped")

    def test_get_paged(self, order_service):
        for _ in range(11):
            order_service.create(uuid4(), [uuid4()])

        first = order_service.get_paged(1, 10)
        second = order_service.get_paged(2, 10)
        assert first.total_count == 11
        assert first.total_pages == 2
        assert first.has_next
        assert len(second.items) == 1

    def test_audit_failure_keeps_status(self, monkeypatch, factory, order_service):
        """Ошибка аудита при оплате откатывает смену статуса"""
        order = order_service.create(uuid4(), [uuid4()])
        _break_audit(monkeypatch, factory)

        with pytest.raises(AuditWriteError):
            order_service.pay(order.id)

        loaded = order_service.get(order.id)
        assert loaded.status == OrderStatus.CREATED
        assert loaded.version == 1


class TestAuditTrail:
    """Журнал аудита через сервисы"""

    def test_newest_first_and_paged(self, order_service, audit):
        order = order_service.create(uuid4(), [uuid4()])
        order_service.update(order.id, uuid4(), [uuid4()])
        order_service.pay(order.id)

        actions = [r.action for r in audit.get_all()]
        assert actions == ["StatusChanged:Paid", AuditAction.UPDATED, AuditAction.CREATED]

        page = audit.get_paged(2, 2)
        assert page.total_count == 3
        assert [r.action for r in page.items] == [AuditAction.CREATED]

    def test_one_record_per_mutation(self, client_service, product_service, order_service, audit):
        client = client_service.create("Maria Silva", "52998224725")
        product = product_service.create("Caneta", "10.50")
        order = order_service.create(client.id, [product.id])
        order_service.cancel(order.id)

        assert len(audit.get_all()) == 4
        assert len(audit.get_for_entity("Client", client.id)) == 1
        assert len(audit.get_for_entity("Order", order.id)) == 2


class TestServiceFactory:
    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            ServiceFactory(backend="redis")

    def test_services_cached(self, factory):
        assert factory.order_service is factory.order_service
        assert factory.client_service.audit is factory.order_service.audit

    def test_reset(self, factory):
        service = factory.order_service
        factory.reset()
        assert factory.order_service is not service

    def test_shared_storage(self, factory):
        """Все репозитории фабрики видят одно хранилище"""
        if factory.backend == StorageBackend.ORM:
            assert factory.client_repository.db is factory.audit_repository.db
        else:
            assert factory.client_repository.storage is factory.audit_repository.storage


class TestConcurrency:
    def test_concurrent_pay_and_cancel(self, memory_factory):
        """Из параллельных оплаты и отмены успешна ровно одна"""
        service = memory_factory.order_service
        order = service.create(uuid4(), [uuid4()])

        def attempt(operation):
            try:
                return getattr(service, operation)(order.id).status
            except InvalidStateTransitionError:
                return None

        with ThreadPoolExecutor(max_workers=2) as executor:
            results = list(executor.map(attempt, ["pay", "cancel"]))

        succeeded = [status for status in results if status is not None]
        assert len(succeeded) == 1
        assert service.get(order.id).status == succeeded[0]

        status_records = [
            r for r in memory_factory.audit_recorder.get_all() if r.action.startswith("StatusChanged")
        ]
        assert len(status_records) == 1
