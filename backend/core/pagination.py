# core/pagination.py
"""
Page/limit pagination used by the list endpoints.

List responses have the shape:
    {"data": [...], "meta": {"page": 1, "limit": 50, "total": 120, "totalPages": 3}}
"""

import math

MAX_LIMIT = 500


def _positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def page_params(request, default_limit: int = 50) -> tuple[int, int]:
    """Read ?page=&limit= from the query string with sane fallbacks."""
    page = _positive_int(request.query_params.get("page"), 1)
    limit = min(_positive_int(request.query_params.get("limit"), default_limit), MAX_LIMIT)
    return page, limit


def paginate(queryset, page: int = 1, limit: int = 50):
    """
    Slice a queryset (or list) and build the meta block.

    Returns:
        (items, meta) where items is a list
    """
    total = queryset.count() if hasattr(queryset, "count") and not isinstance(queryset, list) else len(queryset)
    offset = (page - 1) * limit
    items = list(queryset[offset:offset + limit])
    meta = {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }
    return items, meta


def paginated_response_data(items, meta, serializer_class) -> dict:
    return {"data": serializer_class(items, many=True).data, "meta": meta}
