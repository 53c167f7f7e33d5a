# blockcms/normalizers/pagination.py
from typing import Callable, Any, Dict


def normalize_pagination(
    pagination: Any,
    normalize_fn: Callable[[Any], Dict[str, Any]],
) -> Dict[str, Any]:
    """
    Normalize an offset-paginated listing (Flask-SQLAlchemy Pagination).
    """

    # Normalize ORM objects → dicts
    normalized_items = [normalize_fn(item) for item in pagination.items]

    response: Dict[str, Any] = {
        "items": normalized_items,
        "pagination": {
            "page": pagination.page,
            "per_page": pagination.per_page,
        },
    }

    if pagination.total is not None:
        response["pagination"]["total"] = pagination.total
        response["pagination"]["total_pages"] = (
            (pagination.total + pagination.per_page - 1) // pagination.per_page
        )

    return response
