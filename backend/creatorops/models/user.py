"""
Team members and their roles.

Admins and managers run campaigns and bulk imports; associates work the
tasks assigned to them.
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Boolean, DateTime

from ..database import Base


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    ASSOCIATE = "associate"


# Roles allowed to create, edit and import campaigns, creators and tasks
MANAGER_ROLES = (UserRole.ADMIN.value, UserRole.MANAGER.value)


class User(Base):
    """Team member account (one row per login)."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)  # Display name, also matched by CSV imports

    role = Column(String(20), nullable=False, default=UserRole.ASSOCIATE.value)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
