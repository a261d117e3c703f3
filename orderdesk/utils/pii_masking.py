"""
Утилиты для маскирования персональных данных (PII) в логах

Маскируются:
- CPF клиентов
- Имена клиентов
"""

import re

from orderdesk.utils.helpers import clean_cpf


# CPF в сыром (11 цифр) или форматированном (000.000.000-00) виде
CPF_PATTERN = re.compile(r"(?<!\d)(\d{3})\.?(\d{3})\.?(\d{3})-?(\d{2})(?!\d)")


def mask_cpf(cpf: str | None) -> str:
    """
    Маскирует CPF

    Примеры:
        52998224725 → 529.***.***-25
        529.982.247-25 → 529.***.***-25
        123 → ***

    Args:
        cpf: CPF в любом формате

    Returns:
        Маскированный CPF (видны первые 3 и последние 2 цифры)
    """
    if not cpf:
        return "[no cpf]"

    cleaned = clean_cpf(cpf)
    if len(cleaned) != 11:
        return "***"

    return f"{cleaned[:3]}.***.***-{cleaned[-2:]}"


def mask_name(name: str | None) -> str:
    """
    Маскирует имя клиента

    Примеры:
        Maria Silva → M***a S***a
        Jo → J*
        A → *

    Args:
        name: Имя клиента

    Returns:
        Маскированное имя
    """
    if not name:
        return "[no name]"

    masked_parts = []
    for part in name.strip().split():
        if len(part) <= 1:
            masked_parts.append("*")
        elif len(part) == 2:
            masked_parts.append(f"{part[0]}*")
        else:
            masked_parts.append(f"{part[0]}***{part[-1]}")

    return " ".join(masked_parts)


def sanitize_log_message(message: str) -> str:
    """
    Маскирует все CPF, найденные в произвольном сообщении

    Args:
        message: Сообщение для лога

    Returns:
        Сообщение с маскированными CPF
    """
    return CPF_PATTERN.sub(lambda m: f"{m.group(1)}.***.***-{m.group(4)}", message)
