import logging

from app.config import settings
from app.notifications.rules import ADMIN_MESSAGES, EMAIL_TEMPLATES, NOTIFICATION_RULES
from app.notifications.channels import Channel
from app.notifications.email_handlers import send_user_email, send_admin_email
from app.services.notification_service import create_notification
from app.models.notifications import RecipientRole
from app.notifications.events import NotificationEvent

logger = logging.getLogger(__name__)


def _context(order, extra: dict) -> dict:
    return {
        "order": order,
        "order_id": getattr(order, "id", None),
        "service_name": getattr(order, "service_name", ""),
        "total_price": getattr(order, "total_price", 0),
        "currency": getattr(order, "currency", ""),
        "store_name": settings.store_name,
        **extra,
    }


def _notify(
    *,
    event: NotificationEvent,
    session,
    user,
    related_id,
    ctx: dict,
    notify_user: bool,
    notify_admin: bool,
):
    rules = NOTIFICATION_RULES.get(event, {})
    templates = EMAIL_TEMPLATES.get(event, {})

    # -------------------------
    # ADMIN IN-APP NOTIFICATION
    # -------------------------
    if notify_admin and rules.get(Channel.INAPP_ADMIN):
        title, content = ADMIN_MESSAGES.get(event, ("Update", ""))
        create_notification(
            session=session,
            recipient_role=RecipientRole.admin,
            user=None,
            trigger_source=event.value,
            related_id=related_id,
            title=title,
            content=content.format(**ctx),
        )
        session.commit()

    # -------------------------
    # USER EMAIL
    # -------------------------
    if notify_user and rules.get(Channel.EMAIL_USER) and user and "user" in templates:
        template, subject = templates["user"]
        try:
            send_user_email(template=template, subject=subject.format(**ctx), user=user, **ctx)
        except Exception:
            logger.exception("User email failed for %s (%s)", event.value, related_id)

    # -------------------------
    # ADMIN EMAIL
    # -------------------------
    if notify_admin and rules.get(Channel.EMAIL_ADMIN) and "admin" in templates:
        template, subject = templates["admin"]
        try:
            send_admin_email(template=template, subject=subject.format(**ctx), customer=user, **ctx)
        except Exception:
            logger.exception("Admin email failed for %s (%s)", event.value, related_id)


def dispatch_order_event(
    *,
    event: NotificationEvent,
    order,
    user,
    session,
    extra: dict | None = None,
    notify_user: bool = True,
    notify_admin: bool = True,
):
    """
    Central notification dispatcher.

    Handles:
    - admin in-app notifications
    - user email
    - admin email

    Runs after the order change is committed. Delivery failures are logged
    and never undo or fail the request that triggered them.
    """
    ctx = _context(order, extra or {})
    _notify(
        event=event,
        session=session,
        user=user,
        related_id=ctx["order_id"],
        ctx=ctx,
        notify_user=notify_user,
        notify_admin=notify_admin,
    )


def dispatch_inquiry_event(
    *,
    event: NotificationEvent,
    session,
    related_id: int,
    context: dict,
    user=None,
    notify_user: bool = True,
    notify_admin: bool = True,
):
    """Same channels as orders, for quote requests, contact messages and support tickets."""
    ctx = {"store_name": settings.store_name, **context}
    _notify(
        event=event,
        session=session,
        user=user,
        related_id=related_id,
        ctx=ctx,
        notify_user=notify_user,
        notify_admin=notify_admin,
    )
