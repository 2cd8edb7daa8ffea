from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.constants.order_status import ProjectStatus


class ProjectResponse(BaseModel):
    id: int
    order_id: int
    user_id: Optional[int]
    project_name: str
    current_stage: str
    notes: Optional[str]
    start_date: Optional[datetime]
    due_date: Optional[datetime]
    progress_percentage: int
    status: ProjectStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectUpdate(BaseModel):
    project_name: Optional[str] = Field(None, min_length=1, max_length=200)
    current_stage: Optional[str] = Field(None, min_length=1, max_length=100)
    notes: Optional[str] = None
    due_date: Optional[datetime] = None
    progress_percentage: Optional[int] = Field(None, ge=0, le=100)
    status: Optional[ProjectStatus] = None
