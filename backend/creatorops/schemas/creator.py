"""
Creator schemas for API validation.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class CreatorBase(BaseModel):
    """Base schema for Creator."""
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    primary_market: Optional[str] = None
    primary_category: str = Field(..., min_length=1)
    secondary_categories: List[str] = []
    sub_niches: List[str] = []
    typical_deliverables: List[str] = []
    past_rate_notes: Optional[str] = None
    brand_friendly_score: Optional[int] = Field(None, ge=1, le=5)
    management_type: Optional[str] = None
    content_language: Optional[str] = None
    audience_geo_split: Optional[str] = None


class CreatorCreate(CreatorBase):
    """Schema for creating a new Creator."""


class CreatorUpdate(BaseModel):
    """Schema for updating a Creator."""
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    primary_market: Optional[str] = None
    primary_category: Optional[str] = Field(None, min_length=1)
    secondary_categories: Optional[List[str]] = None
    sub_niches: Optional[List[str]] = None
    typical_deliverables: Optional[List[str]] = None
    past_rate_notes: Optional[str] = None
    brand_friendly_score: Optional[int] = Field(None, ge=1, le=5)
    management_type: Optional[str] = None
    content_language: Optional[str] = None
    audience_geo_split: Optional[str] = None
    status: Optional[str] = None
    is_verified: Optional[bool] = None


class CreatorResponse(CreatorBase):
    """Schema for Creator API response."""
    id: str
    status: str = "pending"
    is_verified: bool = False
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CreatorListResponse(BaseModel):
    """Paginated creator list."""
    total: int
    page: int
    page_size: int
    creators: List[CreatorResponse]
