from pydantic import BaseModel
from typing import TypeVar, Generic, Any

T = TypeVar("T")


# ─── Envelope ─────────────────────────────────────────────────────────────────
class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrev: bool


class SuccessResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None


# ─── Helpers ──────────────────────────────────────────────────────────────────
def success_response(message: str, data: Any = None) -> dict:
    return {"success": True, "message": message, "data": data}


def paginated_response(message: str, data: list, total: int, page: int, limit: int) -> dict:
    total_pages = (total + limit - 1) // limit if limit > 0 else 0
    meta = PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        totalPages=total_pages,
        hasNext=page < total_pages,
        hasPrev=page > 1,
    )
    return {"success": True, "message": message, "data": data, "meta": meta.model_dump()}
