from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy.orm import Query

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass
class Page(Generic[T]):
    items: list[T]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
        }


def paginate(qry: Query, *, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> Page:
    """
    1-indexed page/limit pagination. `qry` must already carry its ordering.
    """
    normalized_page = max(1, int(DEFAULT_PAGE if page is None else page))
    normalized_limit = max(1, min(int(DEFAULT_LIMIT if limit is None else limit), MAX_LIMIT))

    total = qry.order_by(None).count()
    items = qry.offset((normalized_page - 1) * normalized_limit).limit(normalized_limit).all()
    return Page(items=items, page=normalized_page, limit=normalized_limit, total=total)
