"""Page/per_page pagination shared by the client list and the audit log."""

from dataclasses import dataclass
from typing import Any

from fastapi import Query
from sqlalchemy.orm import Query as SQLAlchemyQuery

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100


@dataclass
class PaginationParams:
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    def pages(self, total: int) -> int:
        # Ceiling division; an empty result has zero pages
        return -(-total // self.per_page)


def get_pagination(
    page: int = Query(DEFAULT_PAGE, ge=1, description="1-indexed page"),
    per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE, description=f"Rows per page, at most {MAX_PER_PAGE}"),
) -> PaginationParams:
    """FastAPI dependency reading ?page= and ?per_page=."""
    return PaginationParams(page=page, per_page=per_page)


def paginate_query(query: SQLAlchemyQuery, pagination: PaginationParams) -> tuple[list, int]:
    """Return one page of rows plus the unpaginated row count."""
    total = query.count()
    rows = query.offset(pagination.offset).limit(pagination.per_page).all()
    return rows, total


def page_envelope(items: list[Any], total: int, pagination: PaginationParams) -> dict[str, Any]:
    """The {items, total, page, per_page, pages} body every list endpoint returns."""
    return {
        "items": items,
        "total": total,
        "page": pagination.page,
        "per_page": pagination.per_page,
        "pages": pagination.pages(total),
    }
