"""
Payment schemas for API validation.
"""
from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from ..models.payment import PaymentStatus, PaymentMethod


class PaymentCreatorIn(BaseModel):
    """One creator's share when creating a payment."""
    creator_id: str
    amount: float = Field(..., gt=0)
    commission_percentage: Optional[float] = Field(None, ge=0, le=100)


class PaymentCreatorResponse(BaseModel):
    id: str
    creator_id: str
    amount: float
    commission_percentage: Optional[float] = None
    status: str

    class Config:
        from_attributes = True


class PaymentCreate(BaseModel):
    """
    New payment. ``payment_amount`` defaults to the sum of the creator
    shares and ``invoice_number`` is generated when omitted.
    """
    payment_title: str = Field(..., min_length=1)
    payment_description: Optional[str] = None
    invoice_number: Optional[str] = None
    payment_amount: Optional[float] = Field(None, ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    payment_reference: Optional[str] = None
    status: PaymentStatus = PaymentStatus.DRAFT
    payment_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    campaign_id: Optional[str] = None
    paid_by: Optional[str] = None
    creators: List[PaymentCreatorIn] = []

    class Config:
        use_enum_values = True


class PaymentUpdate(BaseModel):
    payment_title: Optional[str] = Field(None, min_length=1)
    payment_description: Optional[str] = None
    payment_amount: Optional[float] = Field(None, ge=0)
    payment_method: Optional[PaymentMethod] = None
    payment_reference: Optional[str] = None
    status: Optional[PaymentStatus] = None
    payment_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    paid_by: Optional[str] = None

    class Config:
        use_enum_values = True


class PaymentResponse(BaseModel):
    id: str
    payment_title: str
    payment_description: Optional[str] = None
    invoice_number: Optional[str] = None
    payment_amount: float
    currency: str
    payment_method: str
    payment_reference: Optional[str] = None
    status: str
    payment_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    campaign_id: Optional[str] = None
    paid_by: Optional[str] = None
    approved_by: Optional[str] = None
    created_by: str
    creators: List[PaymentCreatorResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PaymentTotals(BaseModel):
    """Sums over every payment matching the list filters, not just the page."""
    total_amount: float
    completed_amount: float
    pending_amount: float


class PaymentListResponse(BaseModel):
    total: int
    page: int
    page_size: int
    totals: PaymentTotals
    payments: List[PaymentResponse]
