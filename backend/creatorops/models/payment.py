"""
Payment model - a creator payout, optionally tied to a campaign and split
across one or more creators.
"""
import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Date, DateTime, Text, ForeignKey, Float
from sqlalchemy.orm import relationship

from ..database import Base


class PaymentStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    UPI = "upi"
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"
    CASH = "cash"
    CHEQUE = "cheque"
    OTHER = "other"


# Statuses still awaiting money out of the door
OUTSTANDING_STATUSES = (PaymentStatus.PENDING.value, PaymentStatus.APPROVED.value)


class Payment(Base):
    """One payout (invoice) with its per-creator splits."""

    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    payment_title = Column(String(255), nullable=False)
    payment_description = Column(Text, nullable=True)
    invoice_number = Column(String(50), nullable=True, index=True)

    # Money
    payment_amount = Column(Float, nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")
    payment_method = Column(String(20), nullable=False, default=PaymentMethod.BANK_TRANSFER.value)
    payment_reference = Column(String(255), nullable=True)

    # Lifecycle
    status = Column(String(20), nullable=False, default=PaymentStatus.DRAFT.value)
    payment_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    # Links
    campaign_id = Column(String(36), ForeignKey("campaigns.id"), nullable=True)
    paid_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    approved_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)

    campaign = relationship("Campaign")
    creators = relationship(
        "PaymentCreator",
        back_populates="payment",
        cascade="all, delete-orphan",
        order_by="PaymentCreator.created_at",
    )

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Payment {self.invoice_number} {self.payment_amount} {self.currency}>"


class PaymentCreator(Base):
    """A creator's share of a payment."""

    __tablename__ = "payment_creators"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    payment_id = Column(String(36), ForeignKey("payments.id", ondelete="CASCADE"), nullable=False, index=True)
    creator_id = Column(String(36), ForeignKey("creators.id"), nullable=False)

    amount = Column(Float, nullable=False)
    commission_percentage = Column(Float, nullable=True)
    status = Column(String(20), nullable=False, default=PaymentStatus.DRAFT.value)

    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    payment = relationship("Payment", back_populates="creators")
    creator = relationship("Creator")
