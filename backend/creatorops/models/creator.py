"""
Creator model - an external content creator profiled for brand matching.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey, Integer, JSON

from ..database import Base


class Creator(Base):
    """Influencer / content creator profile."""

    __tablename__ = "creators"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Contact info
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=True, unique=True)
    phone = Column(String(50), nullable=True)

    # Market
    country = Column(String(100), nullable=True)
    primary_market = Column(String(100), nullable=True)
    primary_category = Column(String(100), nullable=False)
    secondary_categories = Column(JSON, nullable=False, default=list)
    sub_niches = Column(JSON, nullable=False, default=list)
    typical_deliverables = Column(JSON, nullable=False, default=list)

    # Commercials
    past_rate_notes = Column(Text, nullable=True)
    brand_friendly_score = Column(Integer, nullable=True)  # 1-5
    management_type = Column(String(50), nullable=True)    # self/agency/exclusive

    # Audience
    content_language = Column(String(100), nullable=True)
    audience_geo_split = Column(Text, nullable=True)

    # Review state
    status = Column(String(20), nullable=False, default="pending")
    is_verified = Column(Boolean, nullable=False, default=False)

    # Ownership
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Creator {self.name}>"
