from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import Optional
from datetime import datetime

from app.constants.order_status import PaymentStatus


class Payment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # one successful payment per order
    order_id: int = Field(foreign_key="order.id", index=True, unique=True)
    user_id: Optional[int] = Field(default=None, index=True)

    reference: str = Field(index=True)

    amount: int
    currency: str = "NGN"
    status: PaymentStatus = PaymentStatus.succeeded
    provider: str = "gateway"
    gateway_response: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    paid_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
