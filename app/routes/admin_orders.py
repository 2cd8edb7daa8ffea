# -------- ADMIN ORDERS --------
from datetime import date, datetime, time
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import String, cast
from sqlmodel import Session, select

from app.constants.order_status import OrderStatus
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.order import Order
from app.models.payment import Payment
from app.models.user import User
from app.schemas.orders_schemas import OrderResponse, OrderStatusUpdate
from app.services.order_event_service import list_order_events
from app.services.order_service import get_order, payment_status, update_order_status
from app.services.project_service import get_project_for_order
from app.utils.pagination import paginate

router = APIRouter()


def _order_row(row) -> dict:
    order, user = row
    return {
        "order_id": order.id,
        "customer": (order.contact or {}).get("full_name")
        or (f"{user.first_name} {user.last_name}".strip() if user else None),
        "email": (order.contact or {}).get("email") or (user.email if user else None),
        "service_name": order.service_name,
        "total_price": order.total_price,
        "installment": order.installment,
        "status": order.status.value,
        "payment_reference": order.payment_reference,
        "created_at": order.created_at,
    }


@router.get("")
def list_orders(
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    query = select(Order, User).join(User, User.id == Order.user_id, isouter=True)

    if search:
        query = query.where(
            (User.first_name.ilike(f"%{search}%"))
            | (User.last_name.ilike(f"%{search}%"))
            | (User.email.ilike(f"%{search}%"))
            | (Order.service_name.ilike(f"%{search}%"))
            | (cast(Order.id, String).ilike(f"%{search}%"))
        )

    if status:
        query = query.where(Order.status == status)

    if start_date:
        query = query.where(Order.created_at >= datetime.combine(start_date, time.min))

    if end_date:
        query = query.where(Order.created_at <= datetime.combine(end_date, time.max))

    return paginate(
        session=session,
        query=query.order_by(Order.created_at.desc()),
        page=page,
        limit=limit,
        serialize=_order_row,
    )


@router.get("/{order_id}")
def admin_order_detail(
    order_id: int,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    order = get_order(session, order_id)
    payment = session.exec(select(Payment).where(Payment.order_id == order.id)).first()
    project = get_project_for_order(session, order.id)

    return {
        "order": OrderResponse.model_validate(order).model_dump(),
        "payment_status": payment_status(order),
        "payment": payment.model_dump() if payment else None,
        "project_id": project.id if project else None,
        "events": [e.model_dump() for e in list_order_events(session, order.id)],
    }


@router.patch("/{order_id}/status", response_model=OrderResponse)
def change_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return update_order_status(
        session=session,
        order_id=order_id,
        status=payload.status,
        admin=admin,
        reference=payload.reference,
        reason=payload.reason,
    )
