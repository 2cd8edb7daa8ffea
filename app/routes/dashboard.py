from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.database import get_session
from app.models.user import User
from app.schemas.summary_schemas import ClientStats
from app.services.dashboard_service import client_stats
from app.services.project_service import ensure_projects_for_paid_orders
from app.utils.token import get_current_user

router = APIRouter()


@router.get("/stats", response_model=ClientStats)
def dashboard_stats(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    ensure_projects_for_paid_orders(session, current_user.id)
    return client_stats(session, current_user.id)
