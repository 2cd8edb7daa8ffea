import logging
from datetime import datetime
from typing import List, Optional, Type, Union

from sqlmodel import Session, select

from app.constants.inquiry_status import (
    InquiryStatus,
    SupportStatus,
    can_change_support_status,
)
from app.exceptions import InvalidTransitionError, NotFoundError
from app.models.inquiry import ContactMessage, QuoteRequest, SupportRequest
from app.models.project import Project
from app.models.user import User
from app.notifications import NotificationEvent, dispatch_inquiry_event

logger = logging.getLogger(__name__)


# -------- QUOTE REQUESTS / CONTACT --------

def create_quote_request(session: Session, data: dict, user: Optional[User] = None) -> QuoteRequest:
    """Store a custom project brief and tell the admins about it."""
    now = datetime.utcnow()
    quote = QuoteRequest(
        **data,
        user_id=user.id if user else None,
        created_at=now,
        updated_at=now,
    )
    session.add(quote)
    session.commit()
    session.refresh(quote)

    logger.info("Quote request %s received (%s, %s)", quote.id, quote.project_type, quote.budget_range)
    dispatch_inquiry_event(
        event=NotificationEvent.QUOTE_REQUESTED,
        session=session,
        related_id=quote.id,
        user=user,
        context={"quote_id": quote.id, **quote.model_dump(exclude={"id"})},
    )
    return quote


def create_contact_message(session: Session, data: dict, user: Optional[User] = None) -> ContactMessage:
    now = datetime.utcnow()
    message = ContactMessage(
        **data,
        user_id=user.id if user else None,
        created_at=now,
        updated_at=now,
    )
    session.add(message)
    session.commit()
    session.refresh(message)

    logger.info("Contact message %s received from %s", message.id, message.email)
    dispatch_inquiry_event(
        event=NotificationEvent.CONTACT_RECEIVED,
        session=session,
        related_id=message.id,
        user=user,
        context={
            "name": message.name,
            "email": message.email,
            "topic": message.subject,
            "message": message.message,
        },
    )
    return message


InquiryModel = Union[Type[QuoteRequest], Type[ContactMessage]]


def list_inquiries(session: Session, model: InquiryModel, status: Optional[InquiryStatus] = None):
    query = select(model)
    if status:
        query = query.where(model.status == status)
    return query.order_by(model.created_at.desc())


def update_inquiry_status(session: Session, model: InquiryModel, inquiry_id: int, status: InquiryStatus):
    inquiry = session.get(model, inquiry_id)
    if not inquiry:
        raise NotFoundError("Inquiry not found", inquiry_id=inquiry_id)

    inquiry.status = status
    inquiry.updated_at = datetime.utcnow()
    session.add(inquiry)
    session.commit()
    session.refresh(inquiry)
    return inquiry


# -------- SUPPORT REQUESTS --------

def create_support_request(
    session: Session,
    user: User,
    subject: str,
    description: str,
    project_id: Optional[int] = None,
) -> SupportRequest:
    """A client can only attach a ticket to one of their own projects."""
    if project_id is not None:
        project = session.get(Project, project_id)
        if not project or project.user_id != user.id:
            raise NotFoundError("Project not found", project_id=project_id)

    now = datetime.utcnow()
    ticket = SupportRequest(
        user_id=user.id,
        project_id=project_id,
        subject=subject,
        description=description,
        status=SupportStatus.open,
        created_at=now,
        updated_at=now,
    )
    session.add(ticket)
    session.commit()
    session.refresh(ticket)

    logger.info("Support request %s opened by user %s", ticket.id, user.id)
    dispatch_inquiry_event(
        event=NotificationEvent.SUPPORT_REQUESTED,
        session=session,
        related_id=ticket.id,
        user=user,
        context={
            "support_id": ticket.id,
            "topic": ticket.subject,
            "description": ticket.description,
            "project_id": ticket.project_id,
        },
        notify_user=False,
    )
    return ticket


def list_support_requests(
    session: Session,
    user: User,
    status: Optional[SupportStatus] = None,
) -> List[SupportRequest]:
    """Admins see every ticket; clients see their own."""
    query = select(SupportRequest)
    if not user.is_admin:
        query = query.where(SupportRequest.user_id == user.id)
    if status:
        query = query.where(SupportRequest.status == status)
    return session.exec(query.order_by(SupportRequest.created_at.desc())).all()


def get_support_request(session: Session, ticket_id: int, user: User) -> SupportRequest:
    ticket = session.get(SupportRequest, ticket_id)
    if not ticket or (not user.is_admin and ticket.user_id != user.id):
        raise NotFoundError("Support request not found", support_id=ticket_id)
    return ticket


def update_support_status(
    session: Session,
    ticket_id: int,
    status: SupportStatus,
    admin: User,
) -> SupportRequest:
    ticket = get_support_request(session, ticket_id, admin)

    if ticket.status == status:
        return ticket

    if not can_change_support_status(ticket.status, status):
        raise InvalidTransitionError(
            f"Cannot change support request from {ticket.status.value} to {status.value}",
            current_status=ticket.status.value,
        )

    now = datetime.utcnow()
    ticket.status = status
    ticket.resolved_at = now if status == SupportStatus.resolved else None
    ticket.updated_at = now
    session.add(ticket)
    session.commit()
    session.refresh(ticket)

    logger.info("Support request %s set to %s by admin %s", ticket.id, status.value, admin.id)
    dispatch_inquiry_event(
        event=NotificationEvent.SUPPORT_UPDATED,
        session=session,
        related_id=ticket.id,
        user=session.get(User, ticket.user_id),
        context={
            "support_id": ticket.id,
            "topic": ticket.subject,
            "status": status.value,
            "status_label": status.value.replace("_", " "),
        },
        notify_admin=False,
    )
    return ticket
