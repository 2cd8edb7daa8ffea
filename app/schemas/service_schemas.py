from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime


class AddOnSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    price: int = Field(..., ge=0)


def _unique_names(add_ons):
    if add_ons is None:
        return add_ons
    names = [a.name.strip() for a in add_ons]
    if len(names) != len(set(names)):
        raise ValueError("Add-on names must be unique within a service")
    return add_ons


class ServiceCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=80, pattern=r"^[a-z0-9][a-z0-9-]*$")
    name: str = Field(..., min_length=1, max_length=200)
    description: str
    price: int = Field(..., ge=0)
    original_price: Optional[int] = Field(None, ge=0)
    duration: str
    spots_remaining: int = Field(default=0, ge=0)
    total_spots: int = Field(default=0, ge=0)
    add_ons: List[AddOnSchema] = []
    features: List[str] = []
    industry: List[str] = []
    category: str = Field(default="launch", pattern=r"^(launch|growth|elite|custom)$")
    recommended: bool = False
    is_active: bool = True

    check_add_ons = field_validator("add_ons")(_unique_names)


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[int] = Field(None, ge=0)
    original_price: Optional[int] = Field(None, ge=0)
    duration: Optional[str] = None
    spots_remaining: Optional[int] = Field(None, ge=0)
    total_spots: Optional[int] = Field(None, ge=0)
    add_ons: Optional[List[AddOnSchema]] = None
    features: Optional[List[str]] = None
    industry: Optional[List[str]] = None
    category: Optional[str] = Field(None, pattern=r"^(launch|growth|elite|custom)$")
    recommended: Optional[bool] = None
    is_active: Optional[bool] = None

    check_add_ons = field_validator("add_ons")(_unique_names)


class ServiceResponse(BaseModel):
    id: str
    name: str
    description: str
    price: int
    original_price: Optional[int]
    duration: str
    delivery_date: Optional[datetime] = None
    spots_remaining: int
    total_spots: int
    add_ons: List[AddOnSchema]
    features: List[str]
    industry: List[str]
    category: str
    recommended: bool
    is_active: bool

    class Config:
        from_attributes = True


class QuoteResponse(BaseModel):
    service_id: str
    base_price: int
    add_ons: List[AddOnSchema]
    ignored_add_ons: List[str]
    add_ons_total: int
    subtotal: int
    installment: bool
    surcharge: float
    total: int
    installment_count: Optional[int] = None
    installment_amount: Optional[int] = None
    checkout_query: str
