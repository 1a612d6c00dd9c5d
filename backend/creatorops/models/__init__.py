"""
SQLAlchemy models for the CreatorOps application.
"""
from .user import User, UserRole
from .creator import Creator
from .campaign import Campaign, CampaignStatus
from .task import Task, TaskStatus, TaskPriority
from .payment import Payment, PaymentCreator, PaymentStatus, PaymentMethod

__all__ = [
    "User",
    "UserRole",
    "Creator",
    "Campaign",
    "CampaignStatus",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "Payment",
    "PaymentCreator",
    "PaymentStatus",
    "PaymentMethod",
]
