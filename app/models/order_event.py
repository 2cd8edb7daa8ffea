from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional
from datetime import datetime
from uuid import uuid4

from app.constants.order_status import OrderEventType, OrderStatus


class OrderEvent(SQLModel, table=True):
    """One entry of an order's append-only timeline."""

    __tablename__ = "order_event"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)

    event_type: OrderEventType = Field(index=True)
    label: str
    # order status once the event was applied
    order_status: Optional[OrderStatus] = None
    meta: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # "system", "webhook", "callback", "user:<id>" or "admin:<id>"
    created_by: str = Field(default="system")
    created_at: datetime = Field(default_factory=datetime.utcnow)
