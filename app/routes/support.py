from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.constants.inquiry_status import SupportStatus
from app.database import get_session
from app.models.user import User
from app.schemas.inquiry_schemas import SupportRequestCreate, SupportRequestResponse
from app.services.inquiry_service import (
    create_support_request,
    get_support_request,
    list_support_requests,
)
from app.utils.token import get_current_user

router = APIRouter()


@router.get("", response_model=List[SupportRequestResponse])
def my_support_requests(
    status: Optional[SupportStatus] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return list_support_requests(session, current_user, status)


@router.post("", response_model=SupportRequestResponse, status_code=201)
def open_support_request(
    payload: SupportRequestCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return create_support_request(
        session,
        current_user,
        subject=payload.subject,
        description=payload.description,
        project_id=payload.project_id,
    )


@router.get("/{support_id}", response_model=SupportRequestResponse)
def support_request_detail(
    support_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return get_support_request(session, support_id, current_user)
