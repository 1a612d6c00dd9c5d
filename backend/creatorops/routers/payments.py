"""
Payments router: creator payouts with per-creator splits.

Any team member may record a payment; changing or deleting one is limited
to admins and managers.
"""
import logging
import random
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from sqlalchemy import desc, func, case, or_

from ..database import get_db
from ..dependencies import get_current_user, require_manager
from ..schemas.payment import (
    PaymentCreate, PaymentUpdate, PaymentResponse, PaymentListResponse, PaymentTotals
)
from ..models import Campaign, Creator, Payment, PaymentCreator, User
from ..models.payment import PaymentStatus, OUTSTANDING_STATUSES
from ..services.csv_export_service import export_payments, export_filename

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/payments", tags=["payments"])


def generate_invoice_number(today: Optional[date] = None) -> str:
    """``INV-YYMM-NNN`` with a random three-digit suffix."""
    today = today or date.today()
    return f"INV-{today:%y%m}-{random.randint(0, 999):03d}"


def _get_payment_or_404(db: Session, payment_id: str) -> Payment:
    payment = db.query(Payment).filter(Payment.id == payment_id).first()
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


def _filtered_payments(
    db: Session,
    status: Optional[str] = None,
    campaign_id: Optional[str] = None,
    creator_id: Optional[str] = None,
    search: Optional[str] = None,
):
    query = db.query(Payment)
    if status:
        query = query.filter(Payment.status == status)
    if campaign_id:
        query = query.filter(Payment.campaign_id == campaign_id)
    if creator_id:
        query = query.filter(Payment.creators.any(PaymentCreator.creator_id == creator_id))
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Payment.payment_title.ilike(pattern),
            Payment.invoice_number.ilike(pattern),
            Payment.campaign.has(Campaign.brand_name.ilike(pattern)),
            Payment.creators.any(PaymentCreator.creator.has(Creator.name.ilike(pattern))),
        ))
    return query


def _totals(query) -> PaymentTotals:
    """Amount sums over the whole filtered set."""
    amount = Payment.payment_amount
    total, completed, pending = query.with_entities(
        func.coalesce(func.sum(amount), 0),
        func.coalesce(func.sum(case((Payment.status == PaymentStatus.COMPLETED.value, amount), else_=0)), 0),
        func.coalesce(func.sum(case((Payment.status.in_(OUTSTANDING_STATUSES), amount), else_=0)), 0),
    ).one()
    return PaymentTotals(total_amount=total, completed_amount=completed, pending_amount=pending)


@router.get("/", response_model=PaymentListResponse)
def list_payments(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
    status: Optional[str] = None,
    campaign_id: Optional[str] = None,
    creator_id: Optional[str] = None,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List payments with filters, pagination and amount totals."""
    query = _filtered_payments(db, status, campaign_id, creator_id, search)

    total = query.count()
    payments = (
        query
        .order_by(desc(Payment.created_at))
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )

    return PaymentListResponse(
        total=total,
        page=page,
        page_size=page_size,
        totals=_totals(query),
        payments=[PaymentResponse.model_validate(p) for p in payments]
    )


# NOTE: This route MUST come BEFORE /{payment_id}
@router.get("/export")
def export_payments_csv(
    status: Optional[str] = None,
    campaign_id: Optional[str] = None,
    creator_id: Optional[str] = None,
    search: Optional[str] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Download the filtered payments as CSV."""
    payments = (
        _filtered_payments(db, status, campaign_id, creator_id, search)
        .order_by(desc(Payment.created_at))
        .all()
    )
    return Response(
        content=export_payments(payments),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename("payments")}"'},
    )


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(
    payment_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return _get_payment_or_404(db, payment_id)


@router.post("/", response_model=PaymentResponse, status_code=201)
def create_payment(
    payment: PaymentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Record a payment and its creator splits in one transaction.

    The total defaults to the sum of the splits.
    """
    if payment.campaign_id and not db.query(Campaign.id).filter(Campaign.id == payment.campaign_id).first():
        raise HTTPException(status_code=400, detail="Unknown campaign")

    creator_ids = {split.creator_id for split in payment.creators}
    known = {row.id for row in db.query(Creator.id).filter(Creator.id.in_(list(creator_ids))).all()}
    if creator_ids - known:
        raise HTTPException(status_code=400, detail=f"Unknown creator(s): {', '.join(sorted(creator_ids - known))}")

    data = payment.model_dump(exclude={"creators"})
    if data["payment_amount"] is None:
        data["payment_amount"] = sum(split.amount for split in payment.creators)
    if not data["invoice_number"]:
        data["invoice_number"] = generate_invoice_number()

    db_payment = Payment(**data, created_by=current_user.id)
    db_payment.creators = [
        PaymentCreator(
            creator_id=split.creator_id,
            amount=split.amount,
            commission_percentage=split.commission_percentage,
            status=db_payment.status,
            created_by=current_user.id,
        )
        for split in payment.creators
    ]
    db.add(db_payment)
    db.commit()
    db.refresh(db_payment)

    logger.info(
        f"Payment {db_payment.invoice_number} ({db_payment.payment_amount} {db_payment.currency}, "
        f"{len(db_payment.creators)} creators) recorded by {current_user.email}"
    )
    return db_payment


@router.patch("/{payment_id}", response_model=PaymentResponse)
def update_payment(
    payment_id: str,
    update: PaymentUpdate,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """
    Update a payment (admin/manager). A status change also moves the creator
    splits and records the approver.
    """
    payment = _get_payment_or_404(db, payment_id)
    update_data = update.model_dump(exclude_unset=True)

    for key, value in update_data.items():
        setattr(payment, key, value)

    if "status" in update_data:
        payment.approved_by = current_user.id if payment.status == PaymentStatus.APPROVED.value else None
        for split in payment.creators:
            split.status = payment.status

    db.commit()
    db.refresh(payment)
    return payment


@router.delete("/{payment_id}")
def delete_payment(
    payment_id: str,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """Delete a payment and its creator splits (admin/manager)."""
    payment = _get_payment_or_404(db, payment_id)
    db.delete(payment)
    db.commit()
    logger.info(f"Payment {payment_id} deleted by {current_user.email}")
    return {"message": "Payment deleted"}
