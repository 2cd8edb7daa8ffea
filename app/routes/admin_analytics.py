from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.user import User
from app.services.dashboard_service import admin_summary

router = APIRouter()


@router.get("/summary")
def analytics_summary(
    recent: int = Query(5, ge=1, le=50),
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    return admin_summary(session, recent_limit=recent)
