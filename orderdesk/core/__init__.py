"""Ядро приложения - конфигурация, константы и исключения"""

from orderdesk.core.config import Config
from orderdesk.core.constants import AuditAction, OrderStatus, StorageBackend


__all__ = [
    "AuditAction",
    "Config",
    "OrderStatus",
    "StorageBackend",
]
