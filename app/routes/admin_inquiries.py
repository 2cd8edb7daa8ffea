# -------- ADMIN INQUIRIES --------
from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.constants.inquiry_status import InquiryStatus
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.inquiry import ContactMessage, QuoteRequest
from app.models.user import User
from app.schemas.inquiry_schemas import (
    ContactMessageResponse,
    InquiryStatusUpdate,
    QuoteRequestResponse,
    SupportRequestResponse,
    SupportStatusUpdate,
)
from app.services.inquiry_service import (
    list_inquiries,
    update_inquiry_status,
    update_support_status,
)
from app.utils.pagination import paginate

router = APIRouter()


@router.get("/quote-requests")
def list_quote_requests(
    page: int = 1,
    limit: int = 10,
    status: Optional[InquiryStatus] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return paginate(
        session=session,
        query=list_inquiries(session, QuoteRequest, status),
        page=page,
        limit=limit,
        serialize=lambda q: QuoteRequestResponse.model_validate(q).model_dump(),
    )


@router.patch("/quote-requests/{quote_id}", response_model=QuoteRequestResponse)
def set_quote_request_status(
    quote_id: int,
    payload: InquiryStatusUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return update_inquiry_status(session, QuoteRequest, quote_id, payload.status)


@router.get("/contact-messages")
def list_contact_messages(
    page: int = 1,
    limit: int = 10,
    status: Optional[InquiryStatus] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return paginate(
        session=session,
        query=list_inquiries(session, ContactMessage, status),
        page=page,
        limit=limit,
        serialize=lambda m: ContactMessageResponse.model_validate(m).model_dump(),
    )


@router.patch("/contact-messages/{message_id}", response_model=ContactMessageResponse)
def set_contact_message_status(
    message_id: int,
    payload: InquiryStatusUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return update_inquiry_status(session, ContactMessage, message_id, payload.status)


@router.patch("/support-requests/{support_id}", response_model=SupportRequestResponse)
def set_support_request_status(
    support_id: int,
    payload: SupportStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return update_support_status(session, support_id, payload.status, admin)
