import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from app.config import settings
from app.constants.order_status import OrderEventType, OrderStatus, can_transition
from app.exceptions import (
    GatewayError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from app.models.order import Order
from app.models.service import Service
from app.models.user import User
from app.notifications import NotificationEvent, dispatch_order_event
from app.services.checkout_session_service import (
    complete_checkout_session,
    get_checkout_session,
)
from app.services.order_event_service import log_order_event
from app.services.payment_gateway import PaymentGateway
from app.services.payment_service import mark_order_paid
from app.services.pricing import calculate_total, select_add_ons

logger = logging.getLogger(__name__)


def _validate_amount(amount: int) -> None:
    if amount < settings.min_order_amount or amount > settings.max_order_amount:
        raise ValidationError(
            "Invalid order amount",
            min_amount=settings.min_order_amount,
            max_amount=settings.max_order_amount,
        )


def _link_expiry(now: datetime) -> datetime:
    return now + timedelta(minutes=settings.payment_link_ttl_minutes)


def _request_payment_link(gateway: PaymentGateway, order: Order, email: str):
    return gateway.initialize(
        reference=gateway.generate_reference(),
        amount=order.total_price,
        email=email,
        metadata={"order_id": order.id, "user_id": order.user_id},
    )


def _contact_email(order: Order, user: Optional[User]) -> Optional[str]:
    if order.contact and order.contact.get("email"):
        return order.contact["email"]
    return user.email if user else None


def create_order(
    *,
    session: Session,
    gateway: PaymentGateway,
    user: User,
    contact: dict,
    session_token: Optional[str] = None,
    service: Optional[Service] = None,
    selected_add_ons: Iterable[str] = (),
    installment: bool = False,
    custom_request: Optional[str] = None,
    timeline: Optional[str] = None,
) -> Order:
    """
    Persist a pending order at the price fixed during checkout and ask the
    gateway for a payment URL.

    When the gateway fails the order is kept (still pending) and a
    GatewayError carrying the order id is raised, so the client can retry
    with a payment reactivation instead of placing a second order.
    """
    checkout = None
    if session_token:
        checkout = get_checkout_session(session, session_token)
        if checkout.is_completed:
            raise InvalidTransitionError(
                "Checkout session already used", order_id=checkout.order_id
            )
        snapshot = checkout.service_data
        add_ons = list(checkout.selected_add_ons)
        installment = checkout.installment
        total = checkout.total_price
        contact = {**(checkout.contact_data or {}), **{k: v for k, v in contact.items() if v}}
    elif service is not None:
        snapshot = {"id": service.id, "name": service.name, "price": service.price, "add_ons": service.add_ons}
        add_ons = [a["name"] for a in select_add_ons(service, selected_add_ons)]
        total = calculate_total(service, add_ons, installment)
    else:
        raise ValidationError("A service or checkout session is required")

    contact = dict(contact)
    if not contact.get("email"):
        contact["email"] = user.email
    if not contact.get("full_name"):
        contact["full_name"] = f"{user.first_name} {user.last_name}".strip()

    if not contact.get("email"):
        raise ValidationError("Contact email is required")
    if not contact.get("full_name"):
        raise ValidationError("Contact name is required")

    _validate_amount(total)

    now = datetime.utcnow()
    order = Order(
        user_id=user.id,
        service_id=snapshot["id"],
        service_name=snapshot["name"],
        selected_add_ons=add_ons,
        installment=installment,
        total_price=total,
        currency=settings.payment_currency,
        status=OrderStatus.pending,
        custom_request=custom_request or contact.get("project_description"),
        timeline=timeline or contact.get("timeline"),
        contact=contact,
        checkout_token=session_token,
        created_at=now,
        updated_at=now,
    )
    session.add(order)
    session.flush()

    if checkout is not None:
        complete_checkout_session(session, checkout, order.id)

    log_order_event(
        session, order.id, OrderEventType.order_placed,
        order_status=OrderStatus.pending,
        created_by=f"user:{user.id}",
        meta={"total_price": total, "add_ons": add_ons, "installment": installment},
    )
    session.commit()
    session.refresh(order)

    logger.info(
        "Order %s created for user %s (service %s, total %s)",
        order.id, user.id, order.service_id, order.total_price,
    )

    try:
        checkout_link = _request_payment_link(gateway, order, contact["email"])
    except GatewayError as exc:
        log_order_event(
            session, order.id, OrderEventType.payment_init_failed,
            order_status=OrderStatus.pending,
            meta={"error": exc.message},
        )
        session.commit()
        exc.extra["order_id"] = order.id
        raise

    order.payment_reference = checkout_link.reference
    order.payment_url = checkout_link.authorization_url
    order.payment_link_expires_at = _link_expiry(datetime.utcnow())
    log_order_event(
        session, order.id, OrderEventType.payment_initialized,
        order_status=OrderStatus.pending,
        meta={"reference": checkout_link.reference},
    )
    session.add(order)
    session.commit()
    session.refresh(order)

    dispatch_order_event(
        event=NotificationEvent.ORDER_PLACED,
        order=order,
        user=user,
        session=session,
    )
    return order


def get_order(session: Session, order_id: int, user: Optional[User] = None) -> Order:
    """Fetch an order; non-admin users only see their own."""
    order = session.get(Order, order_id)
    if not order or (user is not None and not user.is_admin and order.user_id != user.id):
        raise NotFoundError("Order not found", order_id=order_id)
    return order


def list_user_orders(session: Session, user_id: int, status: Optional[OrderStatus] = None) -> List[Order]:
    query = select(Order).where(Order.user_id == user_id)
    if status:
        query = query.where(Order.status == status)
    return session.exec(query.order_by(Order.created_at.desc())).all()


def reactivate_payment(
    *,
    session: Session,
    gateway: PaymentGateway,
    order_id: int,
    user: User,
) -> Order:
    """
    Fresh payment URL for a pending order whose link expired or was
    abandoned. Paid and cancelled orders are rejected without calling
    the gateway.
    """
    order = get_order(session, order_id, user)

    if order.status != OrderStatus.pending:
        raise InvalidTransitionError(
            "Payment cannot be reactivated for this order",
            current_status=order.status.value,
        )

    owner = session.get(User, order.user_id) if order.user_id else user
    email = _contact_email(order, owner)
    checkout_link = _request_payment_link(gateway, order, email)

    now = datetime.utcnow()
    # the webhook may have paid or a user cancelled while we waited on the gateway
    result = session.exec(
        update(Order)
        .where(Order.id == order.id)
        .where(Order.status == OrderStatus.pending)
        .values(
            payment_reference=checkout_link.reference,
            payment_url=checkout_link.authorization_url,
            payment_link_expires_at=_link_expiry(now),
            updated_at=now,
        )
    )
    if result.rowcount != 1:
        session.rollback()
        session.refresh(order)
        raise InvalidTransitionError(
            "Payment cannot be reactivated for this order",
            current_status=order.status.value,
        )

    log_order_event(
        session, order.id, OrderEventType.payment_reactivated,
        order_status=OrderStatus.pending,
        created_by=f"user:{user.id}",
        meta={"reference": checkout_link.reference},
    )
    session.commit()
    session.refresh(order)

    logger.info("Payment reactivated for order %s", order.id)
    dispatch_order_event(
        event=NotificationEvent.PAYMENT_REACTIVATED,
        order=order,
        user=owner,
        session=session,
    )
    return order


def cancel_order(
    *,
    session: Session,
    order_id: int,
    user: User,
    reason: Optional[str] = None,
) -> Order:
    order = get_order(session, order_id, user)

    if order.status != OrderStatus.pending:
        raise InvalidTransitionError(
            "Order cannot be cancelled", current_status=order.status.value
        )

    now = datetime.utcnow()
    result = session.exec(
        update(Order)
        .where(Order.id == order.id)
        .where(Order.status == OrderStatus.pending)
        .values(status=OrderStatus.cancelled, processed_at=now, updated_at=now)
    )
    if result.rowcount != 1:
        session.rollback()
        session.refresh(order)
        raise InvalidTransitionError(
            "Order cannot be cancelled", current_status=order.status.value
        )

    actor = "admin" if user.is_admin else "user"
    log_order_event(
        session, order.id, OrderEventType.order_cancelled,
        order_status=OrderStatus.cancelled,
        created_by=f"{actor}:{user.id}",
        meta={"reason": reason} if reason else None,
    )
    session.commit()
    session.refresh(order)

    logger.info("Order %s cancelled by %s %s", order.id, actor, user.id)
    owner = session.get(User, order.user_id) if order.user_id else None
    dispatch_order_event(
        event=NotificationEvent.ORDER_CANCELLED,
        order=order,
        user=owner,
        session=session,
        extra={"reason": reason},
    )
    return order


def update_order_status(
    *,
    session: Session,
    order_id: int,
    status: OrderStatus,
    admin: User,
    reference: Optional[str] = None,
    reason: Optional[str] = None,
) -> Order:
    """Admin status change, limited to the lifecycle's allowed transitions."""
    order = get_order(session, order_id)

    if order.status == status:
        return order

    if not can_transition(order.status, status):
        raise InvalidTransitionError(
            f"Cannot change order from {order.status.value} to {status.value}",
            current_status=order.status.value,
        )

    if status == OrderStatus.cancelled:
        return cancel_order(session=session, order_id=order_id, user=admin, reason=reason)

    result = mark_order_paid(
        session=session,
        order_id=order_id,
        reference=reference or order.payment_reference or f"manual_{order.id}",
        created_by=f"admin:{admin.id}",
    )
    return result.order


def payment_status(order: Order, now: Optional[datetime] = None) -> dict:
    """Server-side view of whether a payment is still in progress."""
    now = now or datetime.utcnow()
    link_active = bool(
        order.status == OrderStatus.pending
        and order.payment_url
        and order.payment_link_expires_at
        and order.payment_link_expires_at > now
    )
    return {
        "order_id": order.id,
        "status": order.status.value,
        "payment_in_progress": link_active,
        "can_reactivate": order.status == OrderStatus.pending,
        "can_cancel": order.status == OrderStatus.pending,
        "payment_url": order.payment_url if link_active else None,
        "payment_link_expires_at": order.payment_link_expires_at,
    }
