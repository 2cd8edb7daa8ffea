from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime

from app.constants.order_status import OrderEventType, OrderStatus
from app.schemas.checkout_schemas import clean_add_on_names


class ContactInfo(BaseModel):
    full_name: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=40)
    company: Optional[str] = Field(None, max_length=200)


class OrderCreate(BaseModel):
    session_token: Optional[str] = None
    service_id: Optional[str] = None
    selected_add_ons: List[str] = []
    installment: bool = False

    contact: ContactInfo = Field(default_factory=ContactInfo)
    project_description: Optional[str] = Field(None, max_length=5000)
    timeline: Optional[str] = Field(None, max_length=200)

    clean_add_ons = field_validator("selected_add_ons")(clean_add_on_names)

    @model_validator(mode="after")
    def require_source(self):
        if not self.session_token and not self.service_id:
            raise ValueError("session_token or service_id is required")
        return self


class OrderResponse(BaseModel):
    id: int
    user_id: Optional[int]
    service_id: Optional[str]
    service_name: str
    selected_add_ons: List[str]
    installment: bool
    total_price: int
    currency: str
    status: OrderStatus
    custom_request: Optional[str]
    timeline: Optional[str]
    contact: Optional[dict]
    payment_reference: Optional[str]
    payment_url: Optional[str]
    payment_link_expires_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    processed_at: Optional[datetime]

    class Config:
        from_attributes = True


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    reference: Optional[str] = None
    reason: Optional[str] = Field(None, max_length=500)


class PaymentStatusResponse(BaseModel):
    order_id: int
    status: OrderStatus
    payment_in_progress: bool
    can_reactivate: bool
    can_cancel: bool
    payment_url: Optional[str]
    payment_link_expires_at: Optional[datetime]


class ReactivatePaymentResponse(BaseModel):
    order_id: int
    payment_url: str
    payment_reference: str
    payment_link_expires_at: datetime


class OrderEventResponse(BaseModel):
    event_type: OrderEventType
    label: str
    order_status: Optional[OrderStatus] = None
    meta: Optional[dict]
    created_by: str
    created_at: datetime

    class Config:
        from_attributes = True
