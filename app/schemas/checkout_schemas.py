# app/schemas/checkout_schemas.py
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime


def clean_add_on_names(names):
    if names is None:
        return names
    return [n.strip() for n in names if isinstance(n, str) and n.strip()]


class ContactDraft(BaseModel):
    full_name: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=40)
    company: Optional[str] = Field(None, max_length=200)
    project_description: Optional[str] = Field(None, max_length=5000)
    timeline: Optional[str] = Field(None, max_length=200)


class CheckoutSessionCreate(BaseModel):
    service_id: str
    selected_add_ons: List[str] = []
    installment: bool = False
    # optional client-side total, checked against the server's price
    total_price: Optional[int] = Field(None, ge=0)
    contact_data: Optional[ContactDraft] = None

    clean_add_ons = field_validator("selected_add_ons")(clean_add_on_names)


class CheckoutSessionUpdate(BaseModel):
    selected_add_ons: Optional[List[str]] = None
    installment: Optional[bool] = None
    contact_data: Optional[ContactDraft] = None

    clean_add_ons = field_validator("selected_add_ons")(clean_add_on_names)


class CheckoutSessionCreated(BaseModel):
    session_token: str
    total_price: int
    expires_at: datetime
    checkout_query: str


class CheckoutSessionResponse(BaseModel):
    session_token: str
    service_id: str
    service_data: dict
    selected_add_ons: List[str]
    installment: bool
    total_price: int
    contact_data: Optional[dict]
    user_id: Optional[int]
    is_completed: bool
    order_id: Optional[int]
    expires_at: datetime
    checkout_query: str


class ResumeCheckoutResponse(BaseModel):
    found: bool
    message: Optional[str] = None
    service_id: Optional[str] = None
    selected_add_ons: List[str] = []
    installment: bool = False
    total_price: Optional[int] = None
    session_token: Optional[str] = None
    contact_data: Optional[dict] = None
