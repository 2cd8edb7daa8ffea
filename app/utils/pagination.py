from typing import Callable, Optional

from sqlalchemy import func
from sqlmodel import Session, select

MAX_PAGE_SIZE = 100


def paginate(
    *,
    session: Session,
    query,
    page: int = 1,
    limit: int = 10,
    serialize: Optional[Callable] = None,
):
    """Count + slice a select; `serialize` maps each row for the response."""
    page = max(page, 1)
    if limit < 1:
        limit = 10
    limit = min(limit, MAX_PAGE_SIZE)

    total = session.exec(
        select(func.count()).select_from(query.subquery())
    ).one()

    rows = session.exec(
        query.offset((page - 1) * limit).limit(limit)
    ).all()

    return {
        "total_items": total,
        "total_pages": (total + limit - 1) // limit,
        "current_page": page,
        "limit": limit,
        "results": [serialize(r) for r in rows] if serialize else rows,
    }
