from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from app.constants.order_status import ProjectStatus
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.project import Project
from app.models.user import User
from app.schemas.project_schemas import ProjectResponse, ProjectUpdate
from app.services.project_service import update_project
from app.utils.pagination import paginate

router = APIRouter()


@router.get("")
def list_all_projects(
    page: int = 1,
    limit: int = 10,
    status: Optional[ProjectStatus] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    query = select(Project)
    if status:
        query = query.where(Project.status == status)

    return paginate(
        session=session,
        query=query.order_by(Project.created_at.desc()),
        page=page,
        limit=limit,
        serialize=lambda p: ProjectResponse.model_validate(p).model_dump(),
    )


@router.patch("/{project_id}", response_model=ProjectResponse)
def edit_project(
    project_id: int,
    payload: ProjectUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return update_project(session, project_id, payload.model_dump(exclude_unset=True))
