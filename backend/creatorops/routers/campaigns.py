"""
Campaigns router for CRUD operations.
"""
import logging
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from sqlalchemy import desc

from ..database import get_db
from ..dependencies import get_current_user, require_manager
from ..schemas.campaign import (
    CampaignCreate, CampaignResponse, CampaignUpdate, CampaignListResponse
)
from ..models import Campaign, User
from ..models.campaign import CAMPAIGN_STATUS_CONFIG
from ..services.csv_export_service import export_campaign, export_filename

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/campaigns", tags=["campaigns"])


def _get_campaign_or_404(db: Session, campaign_id: str) -> Campaign:
    campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
    if not campaign:
        raise HTTPException(status_code=404, detail="Campaign not found")
    return campaign


@router.get("/", response_model=CampaignListResponse)
def list_campaigns(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    status: Optional[str] = None,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List campaigns with pagination, status filter and brand search."""
    query = db.query(Campaign)

    if status:
        query = query.filter(Campaign.status == status)
    if search:
        query = query.filter(Campaign.brand_name.ilike(f"%{search}%"))

    total = query.count()

    campaigns = (
        query
        .order_by(desc(Campaign.created_at))
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )

    return CampaignListResponse(
        total=total,
        page=page,
        page_size=page_size,
        campaigns=[CampaignResponse.model_validate(c) for c in campaigns]
    )


# NOTE: This route MUST come BEFORE /{campaign_id}
@router.get("/statuses", response_model=List[dict])
def get_campaign_statuses():
    """Available campaign statuses with their badge configuration."""
    return [
        {"value": status.value, **config}
        for status, config in sorted(CAMPAIGN_STATUS_CONFIG.items(), key=lambda x: x[1]["order"])
    ]


@router.get("/{campaign_id}", response_model=CampaignResponse)
def get_campaign(
    campaign_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a single campaign by ID."""
    return _get_campaign_or_404(db, campaign_id)


@router.get("/{campaign_id}/export")
def export_campaign_csv(
    campaign_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Download one campaign as a Field/Value CSV sheet."""
    campaign = _get_campaign_or_404(db, campaign_id)
    filename = export_filename("execution", campaign.brand_name)
    return Response(
        content=export_campaign(campaign),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/", response_model=CampaignResponse, status_code=201)
def create_campaign(
    campaign: CampaignCreate,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """Create a new campaign (admin/manager)."""
    db_campaign = Campaign(
        **campaign.model_dump(),
        created_by=current_user.id
    )
    db.add(db_campaign)
    db.commit()
    db.refresh(db_campaign)
    logger.info(f"Campaign {db_campaign.brand_name} created by {current_user.email}")
    return db_campaign


@router.patch("/{campaign_id}", response_model=CampaignResponse)
def update_campaign(
    campaign_id: str,
    update: CampaignUpdate,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """Update a campaign (admin/manager)."""
    campaign = _get_campaign_or_404(db, campaign_id)

    for key, value in update.model_dump(exclude_unset=True).items():
        setattr(campaign, key, value)

    db.commit()
    db.refresh(campaign)
    return campaign


@router.delete("/{campaign_id}")
def delete_campaign(
    campaign_id: str,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """Delete a campaign (admin/manager)."""
    campaign = _get_campaign_or_404(db, campaign_id)
    db.delete(campaign)
    db.commit()
    logger.info(f"Campaign {campaign_id} deleted by {current_user.email}")
    return {"message": "Campaign deleted"}
