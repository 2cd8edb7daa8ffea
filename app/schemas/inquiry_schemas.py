from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Literal, Optional
from datetime import date, datetime

from app.constants.inquiry_status import InquiryStatus, SupportStatus


ProjectType = Literal["website", "ecommerce", "webapp", "redesign", "mobile", "other"]
BudgetRange = Literal["5k-10k", "10k-25k", "25k-50k", "50k+"]
Timeline = Literal["asap", "1-2months", "3-4months", "6months+"]


def _strip_blank(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


# -------- PUBLIC FORMS --------

class QuoteRequestCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=40)
    company: Optional[str] = Field(None, max_length=200)
    project_type: ProjectType
    budget_range: BudgetRange
    timeline: Timeline
    description: str = Field(..., min_length=50, max_length=5000)
    features: List[str] = []
    preferred_start_date: Optional[date] = None

    clean_optional = field_validator("phone", "company", mode="before")(_strip_blank)

    @field_validator("full_name", "description")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("features")
    @classmethod
    def clean_features(cls, value: List[str]) -> List[str]:
        seen = []
        for name in value:
            name = name.strip()
            if name and name not in seen:
                seen.append(name)
        return seen


class ContactMessageCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)


class QuoteRequestResponse(BaseModel):
    id: int
    full_name: str
    email: str
    phone: Optional[str]
    company: Optional[str]
    project_type: str
    budget_range: str
    timeline: str
    description: str
    features: List[str]
    preferred_start_date: Optional[date]
    status: InquiryStatus
    created_at: datetime

    class Config:
        from_attributes = True


class ContactMessageResponse(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    status: InquiryStatus
    created_at: datetime

    class Config:
        from_attributes = True


class InquiryStatusUpdate(BaseModel):
    status: InquiryStatus


# -------- SUPPORT --------

class SupportRequestCreate(BaseModel):
    subject: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    project_id: Optional[int] = None


class SupportRequestResponse(BaseModel):
    id: int
    user_id: int
    project_id: Optional[int]
    subject: str
    description: str
    status: SupportStatus
    resolved_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SupportStatusUpdate(BaseModel):
    status: SupportStatus
