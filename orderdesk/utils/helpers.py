"""
Вспомогательные функции
"""

import re
from datetime import datetime, timezone


def get_now() -> datetime:
    """
    Получить текущее время в UTC

    Returns:
        datetime объект с timezone UTC
    """
    return datetime.now(timezone.utc)


def clean_cpf(cpf: str | None) -> str:
    """
    Очистка CPF от форматирования (оставляем только цифры)

    Примеры:
        529.982.247-25 → 52998224725

    Args:
        cpf: CPF в любом формате

    Returns:
        Строка из цифр
    """
    if not cpf:
        return ""
    return re.sub(r"\D", "", cpf)


def format_cpf(cpf: str | None) -> str:
    """
    Форматирование CPF для отображения: 000.000.000-00

    Args:
        cpf: CPF в любом формате

    Returns:
        Отформатированный CPF (или исходная строка, если цифр не 11)
    """
    if not cpf:
        return ""

    cleaned = clean_cpf(cpf)
    if len(cleaned) != 11:
        return cpf

    return f"{cleaned[:3]}.{cleaned[3:6]}.{cleaned[6:9]}-{cleaned[9:]}"
