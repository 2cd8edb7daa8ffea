from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import date, datetime

from app.constants.inquiry_status import InquiryStatus, SupportStatus


class QuoteRequest(SQLModel, table=True):
    """Custom project brief sent from the public quote form."""

    __tablename__ = "quote_request"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)

    full_name: str
    email: str = Field(index=True)
    phone: Optional[str] = None
    company: Optional[str] = None

    # website | ecommerce | webapp | redesign | mobile | other
    project_type: str
    budget_range: str
    timeline: str
    description: str
    features: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    preferred_start_date: Optional[date] = None

    status: InquiryStatus = Field(default=InquiryStatus.new, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class ContactMessage(SQLModel, table=True):
    __tablename__ = "contact_message"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)

    name: str
    email: str = Field(index=True)
    subject: str
    message: str

    status: InquiryStatus = Field(default=InquiryStatus.new, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class SupportRequest(SQLModel, table=True):
    __tablename__ = "support_request"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    project_id: Optional[int] = Field(default=None, foreign_key="project.id", index=True)

    subject: str
    description: str

    status: SupportStatus = Field(default=SupportStatus.open, index=True)
    resolved_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
