"""
Конфигурация приложения из переменных окружения
"""

import os
from decimal import Decimal

from dotenv import load_dotenv

from orderdesk.core.constants import DEFAULT_PAGE_SIZE, MAX_PRICE, StorageBackend


load_dotenv()


class Config:
    """Конфигурация приложения"""

    # База данных
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///orderdesk.db")
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", StorageBackend.ORM).lower()
    DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "false").lower() in ("1", "true", "yes")

    # Логирование
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOGS_DIR: str | None = os.getenv("LOGS_DIR")

    # Бизнес-лимиты
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)))
    MAX_PRICE: Decimal = Decimal(os.getenv("MAX_PRICE", str(MAX_PRICE)))

    @classmethod
    def validate(cls) -> bool:
        """
        Проверка корректности конфигурации

        Returns:
            True если конфигурация корректна

        Raises:
            ValueError: Если параметр конфигурации недопустим
        """
        if cls.STORAGE_BACKEND not in StorageBackend.all_backends():
            raise ValueError(
                f"STORAGE_BACKEND '{cls.STORAGE_BACKEND}' не поддерживается. "
                f"Допустимые: {', '.join(StorageBackend.all_backends())}"
            )

        if cls.STORAGE_BACKEND == StorageBackend.ORM and not cls.DATABASE_URL:
            raise ValueError("DATABASE_URL не установлен")

        if cls.DEFAULT_PAGE_SIZE < 1:
            raise ValueError("DEFAULT_PAGE_SIZE должен быть больше нуля")

        if cls.MAX_PRICE <= 0:
            raise ValueError("MAX_PRICE должен быть больше нуля")

        return True
