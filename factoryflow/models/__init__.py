"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from factoryflow.models.base import Base
from factoryflow.models.enums import (
    AccountType,
    NormalBalance,
    TransactionType,
    PaymentStatus,
    PaymentType,
    JournalEntryStatus,
)
from factoryflow.models.account import Account
from factoryflow.models.payment import Payment
from factoryflow.models.ledger_entry import LedgerEntry
from factoryflow.models.journal_entry import JournalEntry, JournalLine
from factoryflow.models.activity_log import ActivityLog

__all__ = [
    "Base",
    "AccountType",
    "NormalBalance",
    "TransactionType",
    "PaymentStatus",
    "PaymentType",
    "JournalEntryStatus",
    "Account",
    "Payment",
    "LedgerEntry",
    "JournalEntry",
    "JournalLine",
    "ActivityLog",
]
