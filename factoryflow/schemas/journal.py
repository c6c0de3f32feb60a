"""
Pydantic schemas for journal entries, balance checks
and the trial balance.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from factoryflow.models.enums import (
    AccountType,
    JournalEntryStatus,
    LinkedDocumentType,
)


# --- Request Schemas ---

class JournalLineIn(BaseModel):
    account_code: str = Field(min_length=1, max_length=20)
    account_name: str = Field(default="", max_length=100)
    debit: Decimal = Field(default=Decimal("0"), ge=0)
    credit: Decimal = Field(default=Decimal("0"), ge=0)
    description: str | None = Field(default=None, max_length=500)


class JournalValidateRequest(BaseModel):
    lines: list[JournalLineIn] = Field(default_factory=list)


class JournalEntryCreate(BaseModel):
    """A manual journal entry. Lines must balance."""
    description: str = Field(min_length=1, max_length=500)
    date: datetime = Field(default_factory=datetime.utcnow)
    lines: list[JournalLineIn] = Field(min_length=2)
    linked_transaction_id: str | None = None


# --- Response Schemas ---

class JournalValidationResult(BaseModel):
    is_valid: bool
    total_debits: Decimal
    total_credits: Decimal
    difference: Decimal


class JournalLineResponse(BaseModel):
    account_code: str
    account_name: str
    debit: Decimal
    credit: Decimal
    description: str | None

    model_config = {"from_attributes": True}


class JournalEntryResponse(BaseModel):
    id: int
    entry_number: str
    date: datetime
    description: str
    status: JournalEntryStatus
    linked_transaction_id: str | None
    linked_payment_id: int | None
    linked_document_type: LinkedDocumentType | None
    reverses_entry_id: int | None
    reversed_by_id: int | None
    lines: list[JournalLineResponse]

    model_config = {"from_attributes": True}


class AccountBalance(BaseModel):
    account_code: str
    account_name: str
    account_name_ar: str
    account_type: AccountType
    total_debits: Decimal
    total_credits: Decimal
    balance: Decimal


class TrialBalance(BaseModel):
    accounts: list[AccountBalance]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool
    difference: Decimal
    as_of_date: datetime
