"""
orderdesk - ядро системы учёта клиентов, товаров и заказов
"""

__version__ = "1.0.0"
