"""
Repository layer для абстракции работы с хранилищем
"""

from orderdesk.repositories.base import (
    AuditRepository,
    ClientRepository,
    OrderRepository,
    Repository,
    clamp_paging,
)
from orderdesk.repositories.memory import (
    InMemoryAuditRepository,
    InMemoryClientRepository,
    InMemoryOrderRepository,
    InMemoryProductRepository,
    MemoryStorage,
)
from orderdesk.repositories.orm import (
    ORMAuditRepository,
    ORMClientRepository,
    ORMOrderRepository,
    ORMProductRepository,
)


__all__ = [
    "AuditRepository",
    "ClientRepository",
    "InMemoryAuditRepository",
    "InMemoryClientRepository",
    "InMemoryOrderRepository",
    "InMemoryProductRepository",
    "MemoryStorage",
    "ORMAuditRepository",
    "ORMClientRepository",
    "ORMOrderRepository",
    "ORMProductRepository",
    "OrderRepository",
    "Repository",
    "clamp_paging",
]
