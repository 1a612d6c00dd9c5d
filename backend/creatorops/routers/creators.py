"""
Creators router for CRUD operations.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy import desc, or_

from ..database import get_db
from ..dependencies import get_current_user, require_manager
from ..schemas.creator import (
    CreatorCreate, CreatorResponse, CreatorUpdate, CreatorListResponse
)
from ..models import Creator, User

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/creators", tags=["creators"])


def _get_creator_or_404(db: Session, creator_id: str) -> Creator:
    creator = db.query(Creator).filter(Creator.id == creator_id).first()
    if not creator:
        raise HTTPException(status_code=404, detail="Creator not found")
    return creator


def _commit_or_conflict(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Creator with this email already exists.")


@router.get("/", response_model=CreatorListResponse)
def list_creators(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    category: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List creators with pagination and filters."""
    query = db.query(Creator)

    if category:
        query = query.filter(Creator.primary_category == category)
    if status:
        query = query.filter(Creator.status == status)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Creator.name.ilike(pattern), Creator.email.ilike(pattern)))

    total = query.count()

    creators = (
        query
        .order_by(desc(Creator.created_at))
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )

    return CreatorListResponse(
        total=total,
        page=page,
        page_size=page_size,
        creators=[CreatorResponse.model_validate(c) for c in creators]
    )


@router.get("/{creator_id}", response_model=CreatorResponse)
def get_creator(
    creator_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a single creator by ID."""
    return _get_creator_or_404(db, creator_id)


@router.post("/", response_model=CreatorResponse, status_code=201)
def create_creator(
    creator: CreatorCreate,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """Create a new creator (admin/manager)."""
    db_creator = Creator(**creator.model_dump(), created_by=current_user.id)
    db.add(db_creator)
    _commit_or_conflict(db)
    db.refresh(db_creator)
    return db_creator


@router.patch("/{creator_id}", response_model=CreatorResponse)
def update_creator(
    creator_id: str,
    update: CreatorUpdate,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """Update a creator (admin/manager)."""
    creator = _get_creator_or_404(db, creator_id)

    for key, value in update.model_dump(exclude_unset=True).items():
        setattr(creator, key, value)

    _commit_or_conflict(db)
    db.refresh(creator)
    return creator


@router.delete("/{creator_id}")
def delete_creator(
    creator_id: str,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """Delete a creator (admin/manager)."""
    creator = _get_creator_or_404(db, creator_id)
    db.delete(creator)
    db.commit()
    return {"message": "Creator deleted"}
