from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime

from app.constants.order_status import OrderStatus


class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)

    service_id: Optional[str] = Field(default=None, foreign_key="service.id")
    service_name: str
    selected_add_ons: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    installment: bool = False

    # frozen at checkout, never recomputed
    total_price: int
    currency: str = "NGN"

    status: OrderStatus = Field(default=OrderStatus.pending, index=True)

    custom_request: Optional[str] = None
    timeline: Optional[str] = None
    contact: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    checkout_token: Optional[str] = Field(default=None, index=True)

    payment_reference: Optional[str] = Field(default=None, index=True)
    payment_url: Optional[str] = None
    payment_link_expires_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    processed_at: Optional[datetime] = None
