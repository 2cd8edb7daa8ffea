import logging

from fastapi import Depends, HTTPException, Request

from app.models.user import User
from app.utils.token import get_current_user

logger = logging.getLogger(__name__)


def require_admin(request: Request, current_user: User = Depends(get_current_user)) -> User:
    """Gate for every /admin route; clients get 403, not 404."""
    if not current_user.is_admin:
        logger.warning(
            "User %s denied admin access to %s %s",
            current_user.id, request.method, request.url.path,
        )
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user
