"""Business logic services."""

from factoryflow.services.account_service import AccountService
from factoryflow.services.activity_log_service import ActivityLogService
from factoryflow.services.arap_service import ARAPService
from factoryflow.services.journal_service import JournalService
from factoryflow.services.ledger_service import LedgerService
from factoryflow.services.payment_service import PaymentService
from factoryflow.services.verification_service import VerificationService

__all__ = [
    "AccountService",
    "ActivityLogService",
    "ARAPService",
    "JournalService",
    "LedgerService",
    "PaymentService",
    "VerificationService",
]
