"""Утилиты"""

from orderdesk.utils.helpers import clean_cpf, format_cpf, get_now
from orderdesk.utils.pii_masking import mask_cpf, mask_name, sanitize_log_message


__all__ = [
    "clean_cpf",
    "format_cpf",
    "get_now",
    "mask_cpf",
    "mask_name",
    "sanitize_log_message",
]
