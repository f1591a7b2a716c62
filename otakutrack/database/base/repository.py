"""Generic database repository utilities.

These functions provide common query helpers that are shared by the
resource packages without duplication.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sqlalchemy.orm import Query, Session

logger = logging.getLogger(__name__)

# Defaults shared by every paginated listing
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass
class Page[T]:
    """A single page of query results."""

    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def pages(self) -> int:
        """Total number of pages for the current limit."""
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)


def page_offset(page: int, limit: int) -> int:
    """Compute the row offset for a 1-based page number.

    :param page: Page number, starting at 1.
    :param limit: Page size.
    :returns: Number of rows to skip.
    """
    return (max(page, 1) - 1) * limit


def paginate[T](query: Query[T], page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Page[T]:
    """Apply offset/limit pagination to an ordered query.

    :param query: The (already ordered) query.
    :param page: Page number, starting at 1.
    :param limit: Page size, capped at MAX_PAGE_SIZE.
    :returns: The requested page with the unpaginated total.
    """
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    total = query.count()
    items = query.offset(page_offset(page, limit)).limit(limit).all()
    return Page(items=list(items), total=total, page=max(page, 1), limit=limit)


def paginate_list[T](items: list[T], page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> Page[T]:
    """Paginate an in-memory list the same way as paginate.

    :param items: All items, already ordered.
    :param page: Page number, starting at 1.
    :param limit: Page size, capped at MAX_PAGE_SIZE.
    :returns: The requested page.
    """
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    start = page_offset(page, limit)
    page_items = items[start : start + limit]
    return Page(items=page_items, total=len(items), page=max(page, 1), limit=limit)


def record_exists_by_field[T](
    session: Session,
    model_class: type[T],
    field_name: str,
    field_value: Any,
) -> bool:
    """Check if a record exists with a specific field value.

    :param session: The database session.
    :param model_class: The SQLAlchemy model class.
    :param field_name: The name of the field to filter by.
    :param field_value: The value to match.
    :returns: True if a matching record exists.
    """
    column = getattr(model_class, field_name)
    return session.query(model_class).filter(column == field_value).first() is not None
