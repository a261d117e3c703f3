"""
Database package: модели данных и SQLAlchemy-подключение
"""

from orderdesk.database.models import AuditRecord, Client, Entity, Order, Product
from orderdesk.database.orm_database import ORMDatabase


__all__ = [
    "AuditRecord",
    "Client",
    "Entity",
    "ORMDatabase",
    "Order",
    "Product",
]
