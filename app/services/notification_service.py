from typing import List, Optional

from sqlmodel import Session, select
from app.models.notifications import (
    Notification,
    RecipientRole,
    NotificationChannel,
    NotificationStatus,
)
from app.models.user import User


def create_notification(
    *,
    session: Session,
    recipient_role: RecipientRole,
    user: User | None,
    trigger_source: str,
    related_id: Optional[int],
    title: str,
    content: str,
    channel: NotificationChannel = NotificationChannel.system,
):
    notification = Notification(
        recipient_role=recipient_role,
        user_id=user.id if user else None,
        trigger_source=trigger_source,
        related_id=related_id,
        title=title,
        content=content,
        channel=channel,
        status=NotificationStatus.sent,
    )
    session.add(notification)
    session.flush()
    return notification


def list_admin_notifications(session: Session, unread_only: bool = False) -> List[Notification]:
    query = select(Notification).where(Notification.recipient_role == RecipientRole.admin)
    if unread_only:
        query = query.where(Notification.is_read == False)  # noqa: E712
    return session.exec(query.order_by(Notification.created_at.desc())).all()


def mark_notification_read(session: Session, notification_id: int) -> Optional[Notification]:
    notification = session.get(Notification, notification_id)
    if not notification:
        return None
    notification.is_read = True
    session.add(notification)
    session.commit()
    session.refresh(notification)
    return notification
