"""
Pydantic schemas for ledger entries.

LedgerEntryCreate is the ledger entry validator's first line:
required fields, amount bounds and transaction id format are
checked here before the service sees the request.
"""

import re
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from factoryflow.config import get_settings
from factoryflow.models.enums import TransactionType, PaymentStatus

settings = get_settings()

TRANSACTION_ID_PATTERN = re.compile(r"^TXN-\d{8}-\d{6}-\d{3}$")


# --- Request Schemas ---

class LedgerEntryCreate(BaseModel):
    """A new income, expense or capital movement."""
    transaction_id: str | None = None
    date: datetime = Field(default_factory=datetime.utcnow)
    type: TransactionType
    amount: Decimal = Field(gt=0, le=settings.MAX_AMOUNT, decimal_places=2)
    category: str = Field(min_length=1, max_length=100)
    subcategory: str | None = Field(default=None, max_length=100)
    associated_party: str | None = Field(default=None, max_length=255)
    description: str = Field(min_length=1, max_length=500)
    is_arap_entry: bool = False
    # Paid in full at creation time even though it is AR/AP tracked
    immediate_settlement: bool = False
    initial_payment: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)

    @field_validator("category", "description")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        v = " ".join(v.split())
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("transaction_id")
    @classmethod
    def transaction_id_format(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not TRANSACTION_ID_PATTERN.match(v):
            raise ValueError(
                "transaction_id must match TXN-YYYYMMDD-HHMMSS-NNN"
            )
        return v

    @model_validator(mode="after")
    def initial_payment_within_amount(self):
        if self.initial_payment > self.amount:
            raise ValueError("initial_payment cannot exceed amount")
        return self


class WriteOffCreate(BaseModel):
    """Part of a receivable written off as uncollectible."""
    amount: Decimal = Field(gt=0, le=settings.MAX_AMOUNT, decimal_places=2)
    reason: str = Field(min_length=1, max_length=255)

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, v: str) -> str:
        v = " ".join(v.split())
        if not v:
            raise ValueError("must not be blank")
        return v


# --- Response Schemas ---

class LedgerEntryResponse(BaseModel):
    id: int
    owner_id: str
    transaction_id: str
    date: datetime
    type: TransactionType
    amount: Decimal
    category: str
    subcategory: str | None
    associated_party: str | None
    description: str
    is_arap_entry: bool
    total_paid: Decimal
    total_discount: Decimal
    writeoff_amount: Decimal
    writeoff_reason: str | None
    remaining_balance: Decimal
    payment_status: PaymentStatus
    is_deleted: bool
    created_at: datetime

    model_config = {"from_attributes": True}
