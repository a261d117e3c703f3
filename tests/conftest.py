"""
Pytest fixtures и конфигурация для тестов
"""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest


# Добавляем корневую директорию в PYTHONPATH
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))

from orderdesk.core.constants import StorageBackend
from orderdesk.services import ServiceFactory


# Корректные CPF для тестов
VALID_CPF = "52998224725"
VALID_CPF_FORMATTED = "529.982.247-25"
OTHER_VALID_CPF = "11144477735"


@pytest.fixture(params=[StorageBackend.MEMORY, StorageBackend.ORM])
def factory(request) -> Generator[ServiceFactory, None, None]:
    """
    Фабрика сервисов для каждой реализации хранилища

    ORM работает с SQLite в памяти: у каждого теста своя пустая БД.
    """
    if request.param == StorageBackend.ORM:
        service_factory = ServiceFactory(backend=StorageBackend.ORM, database_url="sqlite:///:memory:")
    else:
        service_factory = ServiceFactory(backend=StorageBackend.MEMORY)
    yield service_factory
    service_factory.close()


@pytest.fixture
def memory_factory() -> ServiceFactory:
    """Фабрика только с in-memory хранилищем"""
    return ServiceFactory(backend=StorageBackend.MEMORY)


@pytest.fixture
def client_service(factory):
    return factory.client_service


@pytest.fixture
def product_service(factory):
    return factory.product_service


@pytest.fixture
def order_service(factory):
    return factory.order_service


@pytest.fixture
def audit(factory):
    """Журнал аудита той же фабрики"""
    return factory.audit_recorder


@pytest.fixture
def valid_cpf() -> str:
    return VALID_CPF


@pytest.fixture
def other_valid_cpf() -> str:
    return OTHER_VALID_CPF
