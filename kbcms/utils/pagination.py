"""Pagination Utilities - DRY Implementation for Consistent Pagination (SoC)"""
from math import ceil
from typing import Dict, Optional, Tuple

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def get_pagination_params(page_param: Optional[str], limit_param: Optional[str]) -> Tuple[int, int]:
    """
    Extract and validate pagination parameters

    Args:
        page_param: Page parameter as string
        limit_param: Limit parameter as string

    Returns:
        Tuple of (page, limit) as integers
    """
    try:
        page = int(page_param) if page_param else 1
        page = max(1, page)
    except (ValueError, TypeError):
        page = 1

    try:
        limit = int(limit_param) if limit_param else DEFAULT_PAGE_SIZE
        limit = max(1, min(limit, MAX_PAGE_SIZE))
    except (ValueError, TypeError):
        limit = DEFAULT_PAGE_SIZE

    return page, limit


def build_pagination(page: int, limit: int, total: int) -> Dict:
    """Pagination metadata returned by the ORM layer"""
    total_pages = ceil(total / limit) if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def to_list_pagination(pagination: Dict) -> Dict:
    """Reshape ORM pagination into the list endpoints' response block"""
    return {
        "currentPage": pagination["page"],
        "totalPages": pagination["totalPages"],
        "totalCount": pagination["total"],
        "hasNextPage": pagination["hasNext"],
        "hasPreviousPage": pagination["hasPrev"],
    }
