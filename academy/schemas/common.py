from typing import Optional, List, Generic, TypeVar, Any, Dict
from pydantic import BaseModel

T = TypeVar("T")


# Paginated response wrapper: used by all list endpoints
class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


# Error body rendered for every DomainError
class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None


def paginate(query, page: int, limit: int, order_by, serialize=None) -> Dict[str, Any]:
    """Count, slice and (optionally) serialize a query into PaginatedResponse fields."""
    total = query.count()
    rows = query.order_by(*order_by).offset((page - 1) * limit).limit(limit).all()
    return {
        "data": [serialize(r) for r in rows] if serialize else rows,
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": -(-total // limit) if total else 0,
    }
