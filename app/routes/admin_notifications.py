from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.user import User
from app.services.notification_service import (
    list_admin_notifications,
    mark_notification_read,
)

router = APIRouter()


@router.get("")
def admin_notifications(
    unread_only: bool = False,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return list_admin_notifications(session, unread_only)


@router.patch("/{notification_id}/read")
def read_notification(
    notification_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    notification = mark_notification_read(session, notification_id)
    if not notification:
        raise HTTPException(404, "Notification not found")
    return notification
