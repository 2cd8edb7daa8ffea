import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlmodel import Session, select

from app.constants.order_status import OrderEventType, OrderStatus, PaymentStatus
from app.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from app.models.order import Order
from app.models.payment import Payment
from app.models.project import Project
from app.models.user import User
from app.notifications import NotificationEvent, dispatch_order_event
from app.services.order_event_service import log_order_event
from app.services.payment_gateway import GatewayVerification
from app.services.project_service import create_project_for_order, get_project_for_order

logger = logging.getLogger(__name__)


@dataclass
class PaymentResult:
    order: Order
    payment: Optional[Payment]
    project: Optional[Project]
    created: bool


def _existing_result(session: Session, order: Order) -> PaymentResult:
    payment = session.exec(select(Payment).where(Payment.order_id == order.id)).first()
    return PaymentResult(
        order=order,
        payment=payment,
        project=get_project_for_order(session, order.id),
        created=False,
    )


def mark_order_paid(
    *,
    session: Session,
    order_id: int,
    reference: str,
    amount: Optional[int] = None,
    gateway_response: Optional[Dict[str, Any]] = None,
    created_by: str = "gateway",
) -> PaymentResult:
    """
    Single source of truth for completing payments.

    Webhooks are delivered at least once, so this keys on the order id:
    the status flips pending -> paid through one conditional UPDATE, and
    only the request that wins that update records the payment and creates
    the project. A repeated callback for a paid order is a no-op.
    """

    order = session.get(Order, order_id)
    if not order:
        raise NotFoundError("Order not found", order_id=order_id)

    if order.status == OrderStatus.paid:
        logger.info("Duplicate payment callback ignored for order %s", order_id)
        return _existing_result(session, order)

    if order.status == OrderStatus.cancelled:
        raise InvalidTransitionError(
            "Cancelled orders cannot be paid", current_status=order.status.value
        )

    if amount is not None and int(amount) != order.total_price:
        log_order_event(
            session, order.id, OrderEventType.payment_amount_mismatch,
            order_status=order.status,
            created_by=created_by,
            meta={"reference": reference, "amount": amount, "expected": order.total_price},
        )
        session.commit()
        raise ValidationError(
            "Payment amount does not match order total",
            order_id=order_id,
            expected_total=order.total_price,
        )

    now = datetime.utcnow()

    # 🔒 Atomic state change
    result = session.exec(
        update(Order)
        .where(Order.id == order_id)
        .where(Order.status == OrderStatus.pending)
        .values(
            status=OrderStatus.paid,
            payment_reference=reference,
            processed_at=now,
            updated_at=now,
        )
    )

    if result.rowcount != 1:
        # lost the race to another callback or a cancellation
        session.rollback()
        session.refresh(order)
        if order.status == OrderStatus.paid:
            return _existing_result(session, order)
        raise InvalidTransitionError(
            "Order is no longer pending", current_status=order.status.value
        )

    payment = Payment(
        order_id=order.id,
        user_id=order.user_id,
        reference=reference,
        amount=order.total_price,
        currency=order.currency,
        status=PaymentStatus.succeeded,
        gateway_response=gateway_response,
        paid_at=now,
        created_at=now,
    )
    session.add(payment)

    project = create_project_for_order(session, order)

    log_order_event(
        session, order.id, OrderEventType.payment_success,
        order_status=OrderStatus.paid,
        created_by=created_by,
        meta={"reference": reference, "amount": order.total_price},
    )
    if project is not None:
        log_order_event(
            session, order.id, OrderEventType.project_created,
            created_by=created_by, order_status=OrderStatus.paid,
        )

    session.commit()
    session.refresh(order)
    session.refresh(payment)
    if project is not None:
        session.refresh(project)

    logger.info("Order %s marked paid (reference %s)", order.id, reference)

    user = session.get(User, order.user_id) if order.user_id else None
    dispatch_order_event(
        event=NotificationEvent.PAYMENT_SUCCESS,
        order=order,
        user=user,
        session=session,
    )
    if project is not None:
        dispatch_order_event(
            event=NotificationEvent.PROJECT_CREATED,
            order=order,
            user=user,
            session=session,
            extra={"project": project},
        )

    return PaymentResult(order=order, payment=payment, project=project, created=True)


def record_failed_payment(
    *,
    session: Session,
    order_id: int,
    reference: Optional[str],
    reason: str = "Payment failed",
    created_by: str = "gateway",
) -> Order:
    """A failed charge leaves the order pending so it can be reactivated."""
    order = session.get(Order, order_id)
    if not order:
        raise NotFoundError("Order not found", order_id=order_id)

    log_order_event(
        session, order.id, OrderEventType.payment_failed, reason,
        order_status=order.status,
        created_by=created_by,
        meta={"reference": reference},
    )
    session.commit()

    logger.info("Payment failed for order %s (reference %s)", order.id, reference)
    return order


def find_order_for_verification(session: Session, verification: GatewayVerification) -> Optional[Order]:
    if verification.order_id is not None:
        order = session.get(Order, verification.order_id)
        if order:
            return order
    if verification.reference:
        return session.exec(
            select(Order).where(Order.payment_reference == verification.reference)
        ).first()
    return None


def apply_verification(
    session: Session,
    verification: GatewayVerification,
    created_by: str = "gateway",
) -> PaymentResult:
    order = find_order_for_verification(session, verification)
    if not order:
        raise NotFoundError("Order not found for payment reference", reference=verification.reference)

    if not verification.success:
        record_failed_payment(
            session=session,
            order_id=order.id,
            reference=verification.reference,
            created_by=created_by,
        )
        return PaymentResult(order=order, payment=None, project=None, created=False)

    return mark_order_paid(
        session=session,
        order_id=order.id,
        reference=verification.reference,
        amount=verification.amount,
        gateway_response=verification.raw,
        created_by=created_by,
    )
