from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.database import get_session
from app.models.user import User
from app.schemas.project_schemas import ProjectResponse
from app.services.project_service import (
    ensure_projects_for_paid_orders,
    get_project,
    list_projects,
)
from app.utils.token import get_current_user

router = APIRouter()


@router.get("", response_model=List[ProjectResponse])
def my_projects(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    ensure_projects_for_paid_orders(session, current_user.id)
    return list_projects(session, current_user.id)


@router.get("/{project_id}", response_model=ProjectResponse)
def project_detail(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return get_project(session, project_id, current_user.id)
