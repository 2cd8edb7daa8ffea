from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.service import Service
from app.models.user import User
from app.routes.services import serialize_service
from app.schemas.service_schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from app.services.catalog_service import (
    create_service,
    deactivate_service,
    get_service,
    update_service,
)

router = APIRouter()


# -------- ADMIN SERVICES --------

@router.get("", response_model=List[ServiceResponse])
def list_all_services(
    include_inactive: bool = True,
    category: Optional[str] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    query = select(Service)
    if not include_inactive:
        query = query.where(Service.is_active == True)  # noqa: E712
    if category:
        query = query.where(Service.category == category)
    services = session.exec(query.order_by(Service.price)).all()
    return [serialize_service(s) for s in services]


@router.get("/{service_id}", response_model=ServiceResponse)
def get_any_service(
    service_id: str,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return serialize_service(get_service(session, service_id, include_inactive=True))


@router.post("", response_model=ServiceResponse, status_code=201)
def add_service(
    payload: ServiceCreate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return serialize_service(create_service(session, payload.model_dump()))


@router.patch("/{service_id}", response_model=ServiceResponse)
def edit_service(
    service_id: str,
    payload: ServiceUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    updates = payload.model_dump(exclude_unset=True)
    return serialize_service(update_service(session, service_id, updates))


@router.delete("/{service_id}")
def remove_service(
    service_id: str,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    service = deactivate_service(session, service_id)
    return {"message": "Service deactivated", "service_id": service.id}
