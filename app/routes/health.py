import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, text

from app.config import settings
from app.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/check")
def health_check(session: Session = Depends(get_session)):
    db_status = "ok"
    try:
        session.exec(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Database health check failed: %s", exc)
        db_status = "failed"

    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "env": settings.ENV,
        "database": db_status,
        "payment_gateway_configured": bool(settings.payment_gateway_secret_key),
        "timestamp": datetime.utcnow().isoformat(),
    }
