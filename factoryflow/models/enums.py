"""
Shared enumerations for database models and schemas.

Mapping Python enums to database enums ensures that only
valid values can be stored.
"""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


class NormalBalance(str, enum.Enum):
    """Side on which an account increases."""
    DEBIT = "debit"
    CREDIT = "credit"


class TransactionType(str, enum.Enum):
    """Kind of ledger entry."""
    INCOME = "income"
    EXPENSE = "expense"
    CAPITAL = "capital"


class PaymentStatus(str, enum.Enum):
    PAID = "paid"
    UNPAID = "unpaid"
    PARTIAL = "partial"


class PaymentType(str, enum.Enum):
    """Receipt: a client pays us. Disbursement: we pay a supplier."""
    RECEIPT = "receipt"
    DISBURSEMENT = "disbursement"


class JournalEntryStatus(str, enum.Enum):
    DRAFT = "draft"
    POSTED = "posted"
    REVERSED = "reversed"


class LinkedDocumentType(str, enum.Enum):
    LEDGER = "ledger"
    PAYMENT = "payment"
    CHEQUE = "cheque"
    DEPRECIATION = "depreciation"
    INVENTORY = "inventory"
    WRITEOFF = "writeoff"


class ArapOperation(str, enum.Enum):
    ADD = "add"
    SUBTRACT = "subtract"


class DiscrepancyType(str, enum.Enum):
    MISSING_JOURNAL = "missing_journal"
    UNBALANCED_JOURNAL = "unbalanced_journal"
    ORPHAN_JOURNAL = "orphan_journal"
    WRONG_STATUS = "wrong_status"
    DATE_MISMATCH = "date_mismatch"


class Severity(str, enum.Enum):
    ERROR = "error"
    WARNING = "warning"


class VerificationPhase(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    INDEXING = "indexing"
    VERIFYING = "verifying"
    COMPLETE = "complete"


class UserRole(str, enum.Enum):
    OWNER = "owner"
    ACCOUNTANT = "accountant"
    VIEWER = "viewer"


class PermissionModule(str, enum.Enum):
    DASHBOARD = "dashboard"
    LEDGER = "ledger"
    CLIENTS = "clients"
    PAYMENTS = "payments"
    CHEQUES = "cheques"
    INVENTORY = "inventory"
    EMPLOYEES = "employees"
    PARTNERS = "partners"
    FIXED_ASSETS = "fixed-assets"
    INVOICES = "invoices"
    REPORTS = "reports"
    USERS = "users"
    SETTINGS = "settings"


class PermissionAction(str, enum.Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    EXPORT = "export"


class ActivityAction(str, enum.Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def enum_values(enum_cls) -> list[str]:
    """Persist enum values ("paid") rather than member names ("PAID")."""
    return [member.value for member in enum_cls]
