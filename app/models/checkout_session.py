from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime


class CheckoutSession(SQLModel, table=True):
    __tablename__ = "checkout_session"

    id: Optional[int] = Field(default=None, primary_key=True)
    token: str = Field(index=True, unique=True)

    service_id: str = Field(foreign_key="service.id")
    # price list as it was when the session started
    service_data: dict = Field(sa_column=Column(JSON, nullable=False))

    selected_add_ons: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    installment: bool = False
    total_price: int

    contact_data: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    user_id: Optional[int] = Field(default=None, foreign_key="user.id")

    is_completed: bool = False
    order_id: Optional[int] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    expires_at: datetime = Field(index=True)
