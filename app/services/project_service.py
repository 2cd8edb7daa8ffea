import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.constants.order_status import OrderStatus, ProjectStatus
from app.exceptions import NotFoundError, ValidationError
from app.models.order import Order
from app.models.project import Project

logger = logging.getLogger(__name__)

DEFAULT_TIMELINE_WEEKS = 4
TIMELINE_WEEKS_BY_KEYWORD = (
    ("landing", 2),
    ("e-commerce", 6),
    ("ecommerce", 6),
    ("custom", 8),
)


def timeline_weeks(service_name: Optional[str]) -> int:
    name = (service_name or "").lower()
    for keyword, weeks in TIMELINE_WEEKS_BY_KEYWORD:
        if keyword in name:
            return weeks
    return DEFAULT_TIMELINE_WEEKS


def project_from_order(order: Order, now: Optional[datetime] = None) -> Project:
    now = now or datetime.utcnow()
    return Project(
        order_id=order.id,
        user_id=order.user_id,
        project_name=order.service_name or order.custom_request or "New Project",
        current_stage="Discovery",
        notes=f"Project created from order #{order.id}",
        start_date=now,
        due_date=now + timedelta(weeks=timeline_weeks(order.service_name)),
        progress_percentage=0,
        status=ProjectStatus.active,
        created_at=now,
        updated_at=now,
    )


def get_project_for_order(session: Session, order_id: int) -> Optional[Project]:
    return session.exec(select(Project).where(Project.order_id == order_id)).first()


def create_project_for_order(session: Session, order: Order) -> Optional[Project]:
    """
    Add the project for a paid order unless one exists. Returns the new
    project, or None when it was already there. The caller commits; the
    unique order_id column rejects a concurrent duplicate at commit.
    """
    if get_project_for_order(session, order.id):
        return None
    project = project_from_order(order)
    session.add(project)
    return project


def ensure_projects_for_paid_orders(session: Session, user_id: int) -> int:
    """Backfill projects for paid orders that are missing one."""
    paid_orders = session.exec(
        select(Order)
        .where(Order.user_id == user_id)
        .where(Order.status == OrderStatus.paid)
    ).all()

    created = 0
    for order in paid_orders:
        if create_project_for_order(session, order) is None:
            continue
        try:
            session.commit()
            created += 1
        except IntegrityError:
            # another request created it first
            session.rollback()

    if created:
        logger.info("Backfilled %s projects for user %s", created, user_id)
    return created


def list_projects(session: Session, user_id: Optional[int] = None) -> List[Project]:
    query = select(Project)
    if user_id is not None:
        query = query.where(Project.user_id == user_id)
    return session.exec(query.order_by(Project.created_at.desc())).all()


def get_project(session: Session, project_id: int, user_id: Optional[int] = None) -> Project:
    project = session.get(Project, project_id)
    if not project or (user_id is not None and project.user_id != user_id):
        raise NotFoundError("Project not found")
    return project


def update_project(session: Session, project_id: int, updates: dict) -> Project:
    project = get_project(session, project_id)

    progress = updates.get("progress_percentage")
    if progress is not None and not 0 <= progress <= 100:
        raise ValidationError("progress_percentage must be between 0 and 100")

    for key, value in updates.items():
        setattr(project, key, value)

    if project.status == ProjectStatus.completed:
        project.progress_percentage = 100
    project.updated_at = datetime.utcnow()

    session.add(project)
    session.commit()
    session.refresh(project)

    logger.info("Project %s updated (%s)", project.id, ", ".join(sorted(updates)))
    return project
