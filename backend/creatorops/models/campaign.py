"""
Campaign model - a brand execution tracked from planning to completion.
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Date, DateTime, Text, ForeignKey, Integer, JSON
from sqlalchemy.orm import relationship

from ..database import Base


class CampaignStatus(str, Enum):
    """Lifecycle status for campaigns."""
    PLANNING = "planning"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Badge configuration used by the dashboard tables
CAMPAIGN_STATUS_CONFIG = {
    CampaignStatus.PLANNING: {"label": "Planning", "color": "gray", "order": 1},
    CampaignStatus.ACTIVE: {"label": "Active", "color": "green", "order": 2},
    CampaignStatus.PAUSED: {"label": "Paused", "color": "yellow", "order": 3},
    CampaignStatus.COMPLETED: {"label": "Completed", "color": "blue", "order": 4},
    CampaignStatus.CANCELLED: {"label": "Cancelled", "color": "red", "order": 5},
}


class Campaign(Base):
    """Campaign ("execution") for a brand."""

    __tablename__ = "campaigns"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Brand info
    brand_name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)

    # Budget
    budget_min = Column(Integer, nullable=True)
    budget_max = Column(Integer, nullable=True)

    # Lifecycle
    status = Column(String(20), nullable=False, default=CampaignStatus.PLANNING.value)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    # Assignment
    assigned_creator = Column(String(36), ForeignKey("creators.id"), nullable=True)
    assigned_team_member = Column(String(36), ForeignKey("users.id"), nullable=True)
    creator = relationship("Creator", foreign_keys=[assigned_creator])
    team_member = relationship("User", foreign_keys=[assigned_team_member])

    # Targeting
    target_niches = Column(JSON, nullable=False, default=list)
    target_regions = Column(JSON, nullable=False, default=list)
    required_platforms = Column(JSON, nullable=False, default=list)

    # Notes
    status_notes = Column(Text, nullable=True)
    campaign_notes = Column(Text, nullable=True)

    # Ownership
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Campaign {self.brand_name}>"
