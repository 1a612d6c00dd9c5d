"""
Campaign schemas for API validation.
"""
from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from ..models.campaign import CampaignStatus


class CampaignBase(BaseModel):
    """Base schema for Campaign."""
    brand_name: str = Field(..., min_length=1)
    description: Optional[str] = None
    budget_min: Optional[int] = Field(None, ge=0)
    budget_max: Optional[int] = Field(None, ge=0)
    status: CampaignStatus = CampaignStatus.PLANNING
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    assigned_creator: Optional[str] = None
    assigned_team_member: Optional[str] = None
    target_niches: List[str] = []
    target_regions: List[str] = []
    required_platforms: List[str] = []
    status_notes: Optional[str] = None
    campaign_notes: Optional[str] = None

    class Config:
        use_enum_values = True

class CampaignCreate(CampaignBase):
    """Schema for creating a new Campaign."""


class CampaignUpdate(BaseModel):
    """Schema for updating a Campaign."""
    brand_name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    budget_min: Optional[int] = Field(None, ge=0)
    budget_max: Optional[int] = Field(None, ge=0)
    status: Optional[CampaignStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    assigned_creator: Optional[str] = None
    assigned_team_member: Optional[str] = None
    target_niches: Optional[List[str]] = None
    target_regions: Optional[List[str]] = None
    required_platforms: Optional[List[str]] = None
    status_notes: Optional[str] = None
    campaign_notes: Optional[str] = None

    class Config:
        use_enum_values = True

class CampaignResponse(CampaignBase):
    """Schema for Campaign API response."""
    id: str
    status: str
    created_by: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CampaignListResponse(BaseModel):
    """Paginated campaign list."""
    total: int
    page: int
    page_size: int
    campaigns: List[CampaignResponse]
