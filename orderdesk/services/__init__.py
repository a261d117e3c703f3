"""
Service layer для бизнес-логики
"""

from orderdesk.services.audit_service import AuditRecorder, serialize_snapshot
from orderdesk.services.client_service import ClientService
from orderdesk.services.order_service import OrderService
from orderdesk.services.paging import PagedResult
from orderdesk.services.product_service import ProductService
from orderdesk.services.service_factory import ServiceFactory


__all__ = [
    "AuditRecorder",
    "ClientService",
    "OrderService",
    "PagedResult",
    "ProductService",
    "ServiceFactory",
    "serialize_snapshot",
]
