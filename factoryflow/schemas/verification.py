"""
Pydantic schemas for the data integrity verifier.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from factoryflow.models.enums import (
    DiscrepancyType,
    Severity,
    VerificationPhase,
)


class Discrepancy(BaseModel):
    type: DiscrepancyType
    severity: Severity
    message: str
    transaction_id: str | None = None
    journal_id: int | None = None
    ledger_description: str | None = None
    expected: Decimal | None = None
    actual: Decimal | None = None


class TrialBalanceStatus(BaseModel):
    is_balanced: bool
    total_debits: Decimal
    total_credits: Decimal
    difference: Decimal


class VerificationResult(BaseModel):
    timestamp: datetime
    ledger_entries_checked: int
    journal_entries_checked: int
    discrepancies_found: int
    discrepancies: list[Discrepancy]
    trial_balance_status: TrialBalanceStatus
    query_limit_reached: bool


class VerificationProgress(BaseModel):
    """Snapshot passed to progress callbacks."""
    phase: VerificationPhase
    message: str | None = None
    current: int | None = None
    total: int | None = None
