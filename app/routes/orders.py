from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.constants.order_status import OrderStatus
from app.database import get_session
from app.models.user import User
from app.schemas.orders_schemas import (
    OrderCreate,
    OrderEventResponse,
    OrderResponse,
    PaymentStatusResponse,
    ReactivatePaymentResponse,
)
from app.services.catalog_service import get_service
from app.services.order_event_service import list_order_events
from app.services.order_service import (
    cancel_order,
    create_order,
    get_order,
    list_user_orders,
    payment_status,
    reactivate_payment,
)
from app.services.payment_gateway import PaymentGateway, get_payment_gateway
from app.utils.token import get_current_user

router = APIRouter()


# -------- PLACE ORDER --------

@router.post("", status_code=201)
def place_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    current_user: User = Depends(get_current_user),
):
    service = None
    if not payload.session_token:
        service = get_service(session, payload.service_id)

    order = create_order(
        session=session,
        gateway=gateway,
        user=current_user,
        contact=payload.contact.model_dump(exclude_none=True),
        session_token=payload.session_token,
        service=service,
        selected_add_ons=payload.selected_add_ons,
        installment=payload.installment,
        custom_request=payload.project_description,
        timeline=payload.timeline,
    )

    return {
        "message": "Order created",
        "order_id": order.id,
        "status": order.status.value,
        "total_price": order.total_price,
        "currency": order.currency,
        "payment_url": order.payment_url,
        "payment_reference": order.payment_reference,
        "payment_link_expires_at": order.payment_link_expires_at,
    }


# -------- MY ORDERS --------

@router.get("", response_model=List[OrderResponse])
def my_orders(
    status: Optional[OrderStatus] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return list_user_orders(session, current_user.id, status)


@router.get("/{order_id}", response_model=OrderResponse)
def order_detail(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return get_order(session, order_id, current_user)


@router.get("/{order_id}/events", response_model=List[OrderEventResponse])
def order_timeline(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    order = get_order(session, order_id, current_user)
    return list_order_events(session, order.id)


# -------- PAYMENT --------

@router.get("/{order_id}/payment-status", response_model=PaymentStatusResponse)
def order_payment_status(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return payment_status(get_order(session, order_id, current_user))


@router.post("/{order_id}/reactivate-payment", response_model=ReactivatePaymentResponse)
def reactivate_order_payment(
    order_id: int,
    session: Session = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    current_user: User = Depends(get_current_user),
):
    order = reactivate_payment(
        session=session,
        gateway=gateway,
        order_id=order_id,
        user=current_user,
    )
    return {
        "order_id": order.id,
        "payment_url": order.payment_url,
        "payment_reference": order.payment_reference,
        "payment_link_expires_at": order.payment_link_expires_at,
    }


# -------- CANCEL --------

@router.delete("/{order_id}")
def cancel_my_order(
    order_id: int,
    reason: Optional[str] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    order = cancel_order(
        session=session,
        order_id=order_id,
        user=current_user,
        reason=reason,
    )
    return {
        "message": "Order cancelled",
        "order_id": order.id,
        "status": order.status.value,
    }
