"""Base database utilities and repository patterns."""

from otakutrack.database.base.repository import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    Page,
    page_offset,
    paginate,
    paginate_list,
    record_exists_by_field,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "Page",
    "page_offset",
    "paginate",
    "paginate_list",
    "record_exists_by_field",
]
