import logging

from sqlmodel import Session

from app.database import engine
from app.services.checkout_session_service import purge_expired_checkout_sessions

logger = logging.getLogger(__name__)


def purge_checkout_sessions() -> int:
    """Drop checkout sessions past their expiry. Meant for cron."""
    with Session(engine) as session:
        removed = purge_expired_checkout_sessions(session)

    logger.info("Purged %s expired checkout sessions", removed)
    return removed


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    purge_checkout_sessions()
