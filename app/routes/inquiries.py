from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.database import get_session
from app.models.user import User
from app.schemas.inquiry_schemas import (
    ContactMessageCreate,
    ContactMessageResponse,
    QuoteRequestCreate,
    QuoteRequestResponse,
)
from app.services.inquiry_service import create_contact_message, create_quote_request
from app.utils.token import get_optional_user

router = APIRouter()


# -------- PUBLIC FORMS --------

@router.post("/quote-request", response_model=QuoteRequestResponse, status_code=201)
def submit_quote_request(
    payload: QuoteRequestCreate,
    session: Session = Depends(get_session),
    current_user: Optional[User] = Depends(get_optional_user),
):
    return create_quote_request(session, payload.model_dump(), current_user)


@router.post("/contact", response_model=ContactMessageResponse, status_code=201)
def submit_contact_message(
    payload: ContactMessageCreate,
    session: Session = Depends(get_session),
    current_user: Optional[User] = Depends(get_optional_user),
):
    return create_contact_message(session, payload.model_dump(), current_user)
