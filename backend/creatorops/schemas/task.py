"""
Task schemas for API validation.
"""
from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from ..models.task import TaskStatus, TaskPriority


class TaskBase(BaseModel):
    """Base schema for Task."""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None
    assigned_to: Optional[str] = None
    creator_id: Optional[str] = None
    campaign_id: Optional[str] = None

    class Config:
        use_enum_values = True

class TaskCreate(TaskBase):
    """Schema for creating a new Task."""


class TaskUpdate(BaseModel):
    """Schema for updating a Task."""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None
    assigned_to: Optional[str] = None
    creator_id: Optional[str] = None
    campaign_id: Optional[str] = None

    class Config:
        use_enum_values = True

class TaskResponse(TaskBase):
    """Schema for Task API response."""
    id: str
    status: str
    priority: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TaskListResponse(BaseModel):
    """Paginated task list."""
    total: int
    page: int
    page_size: int
    tasks: List[TaskResponse]
