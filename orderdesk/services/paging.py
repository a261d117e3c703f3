"""
Результат постраничной выборки
"""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar


T = TypeVar("T")


@dataclass
class PagedResult(Generic[T]):
    """Страница записей с метаданными"""

    items: list[T] = field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total_count: int = 0

    @property
    def total_pages(self) -> int:
        """Количество страниц"""
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages
