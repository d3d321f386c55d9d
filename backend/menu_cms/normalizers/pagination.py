# menu_cms/normalizers/pagination.py
from typing import Any, Callable, Dict


def normalize_pagination(
    pagination,
    normalize_fn: Callable[[Any], Dict[str, Any]],
) -> Dict[str, Any]:
    """
    Offset-paginated list response.

    ``pagination`` is a Flask-SQLAlchemy Pagination object. Shape:
    {success, data, pagination: {current, pages, total, limit}}
    """
    return {
        "success": True,
        "data": [normalize_fn(item) for item in pagination.items],
        "pagination": {
            "current": pagination.page,
            "pages": pagination.pages,
            "total": pagination.total,
            "limit": pagination.per_page,
        },
    }
