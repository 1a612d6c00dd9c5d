"""
Task model - a unit of work ("requirement") assigned to a team member.
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Date, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base


class TaskStatus(str, Enum):
    """Workflow status for tasks."""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    BLOCKED = "blocked"
    DONE = "done"


class TaskPriority(str, Enum):
    """Task priority."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Statuses counted as open work on the dashboard
OPEN_TASK_STATUSES = (TaskStatus.TODO.value, TaskStatus.IN_PROGRESS.value)


class Task(Base):
    """Task assigned to a team member, optionally tied to a creator or campaign."""

    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=TaskStatus.TODO.value)
    priority = Column(String(10), nullable=True)
    due_date = Column(Date, nullable=True)

    # Links
    assigned_to = Column(String(36), ForeignKey("users.id"), nullable=True)
    creator_id = Column(String(36), ForeignKey("creators.id"), nullable=True)
    campaign_id = Column(String(36), ForeignKey("campaigns.id"), nullable=True)
    assignee = relationship("User", foreign_keys=[assigned_to])
    creator = relationship("Creator")
    campaign = relationship("Campaign")

    # Ownership
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Task {self.title} [{self.status}]>"
