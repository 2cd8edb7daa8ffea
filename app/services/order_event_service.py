# app/services/order_event_service.py

from datetime import datetime
from typing import List, Optional
from uuid import uuid4
from sqlmodel import Session, select

from app.constants.order_status import EVENT_LABELS, OrderEventType, OrderStatus
from app.models.order_event import OrderEvent


def log_order_event(
    session: Session,
    order_id: int,
    event_type: OrderEventType,
    label: Optional[str] = None,
    created_by: str = "system",
    meta: Optional[dict] = None,
    order_status: Optional[OrderStatus] = None,
) -> OrderEvent:
    """
    Append-only event log for order timeline.

    The caller owns the transaction; the event is committed together with
    the state change it describes. Unknown event types raise ValueError.
    """
    event_type = OrderEventType(event_type)

    event = OrderEvent(
        id=str(uuid4()),
        order_id=order_id,
        event_type=event_type,
        label=label or EVENT_LABELS[event_type],
        order_status=order_status,
        meta=meta,
        created_by=created_by,
        created_at=datetime.utcnow(),
    )

    session.add(event)
    return event


def list_order_events(
    session: Session,
    order_id: int,
    event_type: Optional[OrderEventType] = None,
) -> List[OrderEvent]:
    query = select(OrderEvent).where(OrderEvent.order_id == order_id)
    if event_type:
        query = query.where(OrderEvent.event_type == event_type)
    return session.exec(query.order_by(OrderEvent.created_at)).all()
