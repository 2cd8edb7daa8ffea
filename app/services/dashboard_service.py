from sqlalchemy import func
from sqlmodel import Session, select

from app.constants.order_status import OrderStatus, ProjectStatus
from app.models.order import Order
from app.models.project import Project


def _count(session: Session, query) -> int:
    return session.exec(select(func.count()).select_from(query.subquery())).one()


def client_stats(session: Session, user_id: int) -> dict:
    """Recomputed on every request, no caching."""
    active_projects = _count(
        session,
        select(Project.id)
        .where(Project.user_id == user_id)
        .where(Project.status == ProjectStatus.active),
    )
    completed_projects = _count(
        session,
        select(Project.id)
        .where(Project.user_id == user_id)
        .where(Project.status == ProjectStatus.completed),
    )
    pending_orders = _count(
        session,
        select(Order.id)
        .where(Order.user_id == user_id)
        .where(Order.status == OrderStatus.pending),
    )
    total_spent = session.exec(
        select(func.coalesce(func.sum(Order.total_price), 0))
        .where(Order.user_id == user_id)
        .where(Order.status == OrderStatus.paid)
    ).one()

    return {
        "active_projects": active_projects,
        "completed_projects": completed_projects,
        "pending_orders": pending_orders,
        "total_spent": int(total_spent),
    }


def admin_summary(session: Session, recent_limit: int = 5) -> dict:
    rows = session.exec(
        select(Order.status, func.count(Order.id)).group_by(Order.status)
    ).all()
    orders_by_status = {status.value: 0 for status in OrderStatus}
    for status, count in rows:
        orders_by_status[OrderStatus(status).value] = count

    revenue = session.exec(
        select(func.coalesce(func.sum(Order.total_price), 0))
        .where(Order.status == OrderStatus.paid)
    ).one()

    projects_by_status = {status.value: 0 for status in ProjectStatus}
    for status, count in session.exec(
        select(Project.status, func.count(Project.id)).group_by(Project.status)
    ).all():
        projects_by_status[ProjectStatus(status).value] = count

    recent = session.exec(
        select(Order).order_by(Order.created_at.desc()).limit(recent_limit)
    ).all()

    return {
        "total_orders": sum(orders_by_status.values()),
        "orders_by_status": orders_by_status,
        "revenue": int(revenue),
        "active_projects": projects_by_status[ProjectStatus.active.value],
        "projects_by_status": projects_by_status,
        "recent_orders": [
            {
                "order_id": o.id,
                "service_name": o.service_name,
                "total_price": o.total_price,
                "status": o.status.value,
                "created_at": o.created_at,
            }
            for o in recent
        ],
    }
