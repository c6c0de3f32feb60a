"""
Pydantic schemas for payments and AR/AP update results.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from factoryflow.models.enums import PaymentType, PaymentStatus


class PaymentCreate(BaseModel):
    linked_transaction_id: str = Field(min_length=1, max_length=32)
    payment_type: PaymentType
    amount: Decimal = Field(gt=0, decimal_places=2)
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    date: datetime = Field(default_factory=datetime.utcnow)
    notes: str | None = Field(default=None, max_length=500)


class PaymentResponse(BaseModel):
    id: int
    linked_transaction_id: str
    payment_type: PaymentType
    amount: Decimal
    discount_amount: Decimal
    date: datetime
    notes: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ARAPUpdateResult(BaseModel):
    """
    Outcome of an AR/AP update.

    Failures are reported here with success=False rather than
    raised, so the caller can show the message to the user.
    """
    success: bool
    message: str
    new_total_paid: Decimal | None = None
    new_total_discount: Decimal | None = None
    new_remaining_balance: Decimal | None = None
    new_status: PaymentStatus | None = None


class PaymentResult(BaseModel):
    payment: PaymentResponse | None
    arap: ARAPUpdateResult
