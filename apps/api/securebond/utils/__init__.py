"""Utility modules."""

from securebond.utils.normalization import (
    normalize_email,
    normalize_name,
    normalize_phone,
)
from securebond.utils.pagination import (
    PaginationParams,
    get_pagination,
    page_envelope,
    paginate_query,
)

__all__ = [
    # Normalization
    "normalize_email",
    "normalize_name",
    "normalize_phone",
    # Pagination
    "PaginationParams",
    "get_pagination",
    "page_envelope",
    "paginate_query",
]
