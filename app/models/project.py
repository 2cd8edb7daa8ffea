from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from app.constants.order_status import ProjectStatus


class Project(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    # unique: at most one project per paid order
    order_id: int = Field(foreign_key="order.id", unique=True, index=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)

    project_name: str
    current_stage: str = "Discovery"
    notes: Optional[str] = None

    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    progress_percentage: int = 0

    status: ProjectStatus = Field(default=ProjectStatus.active, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
