"""
Ledger service: validates, records and retires ledger entries.

Creating an entry:
1. Rejects a duplicate transaction id
2. Tags the entry with its AR/AP fields and payment status
3. Posts the matching journal entry through JournalService
4. Logs the activity

Writing off bad debt moves a receivable towards PAID without cash
and posts the loss to Bad Debt Expense.

The caller controls the commit. If journal posting fails the
whole unit of work is rolled back by the caller, so a ledger
entry never exists without its journal entry.
"""

import logging
import random
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from factoryflow.errors import (
    ARAPNotEnabledError,
    NotFoundError,
    ValidationError,
)
from factoryflow.models.enums import (
    ActivityAction,
    JournalEntryStatus,
    LinkedDocumentType,
    PaymentStatus,
    PaymentType,
    TransactionType,
)
from factoryflow.models.ledger_entry import LedgerEntry
from factoryflow.models.payment import Payment
from factoryflow.schemas.ledger import LedgerEntryCreate, WriteOffCreate
from factoryflow.services.account_mapping import (
    get_mapping_for_bad_debt,
    get_mapping_for_ledger_entry,
    get_mapping_for_payment,
)
from factoryflow.services.activity_log_service import ActivityLogService
from factoryflow.services.arap_service import (
    calculate_payment_status,
    calculate_remaining_balance,
)
from factoryflow.services.journal_service import (
    JournalService,
    create_journal_lines,
)
from factoryflow.services.money import (
    ZERO,
    round_currency,
    safe_add,
    zero_floor,
)

logger = logging.getLogger(__name__)


def generate_transaction_id(now: datetime | None = None) -> str:
    """Transaction id in the form TXN-YYYYMMDD-HHMMSS-NNN."""
    now = now or datetime.utcnow()
    return f"TXN-{now:%Y%m%d-%H%M%S}-{random.randint(0, 999):03d}"


def payment_type_for(entry_type: TransactionType) -> PaymentType:
    """Income is settled by receipts, expenses by disbursements."""
    if entry_type == TransactionType.INCOME:
        return PaymentType.RECEIPT
    return PaymentType.DISBURSEMENT


class LedgerService:

    def __init__(self, db: Session):
        self.db = db
        self.journal_service = JournalService(db)
        self.activity_log = ActivityLogService(db)

    def _transaction_id_exists(self, owner_id: str, transaction_id: str) -> bool:
        return self.db.execute(
            select(LedgerEntry.id).where(
                LedgerEntry.owner_id == owner_id,
                LedgerEntry.transaction_id == transaction_id,
            )
        ).scalar_one_or_none() is not None

    def _new_transaction_id(self, owner_id: str) -> str:
        for _ in range(5):
            transaction_id = generate_transaction_id()
            if not self._transaction_id_exists(owner_id, transaction_id):
                return transaction_id
        raise ValidationError("Could not allocate a unique transaction id")

    def create_entry(
        self,
        owner_id: str,
        request: LedgerEntryCreate,
        user_id: str | None = None,
    ) -> LedgerEntry:
        """
        Validate and record a new ledger entry.

        Non-AR/AP entries are settled on the spot and tagged PAID.
        AR/AP entries start from the initial payment (or the full
        amount when immediate_settlement is set).
        """
        if request.transaction_id:
            if self._transaction_id_exists(owner_id, request.transaction_id):
                raise ValidationError(
                    f"Transaction '{request.transaction_id}' already exists"
                )
            transaction_id = request.transaction_id
        else:
            transaction_id = self._new_transaction_id(owner_id)

        if request.is_arap_entry and request.type == TransactionType.CAPITAL:
            raise ValidationError(
                "Capital movements cannot be tracked as receivable/payable"
            )

        amount = round_currency(request.amount)
        if request.is_arap_entry:
            total_paid = (
                amount if request.immediate_settlement
                else round_currency(request.initial_payment)
            )
            remaining = zero_floor(calculate_remaining_balance(amount, total_paid))
            status = calculate_payment_status(total_paid, amount)
        else:
            total_paid = amount
            remaining = ZERO
            status = PaymentStatus.PAID

        entry = LedgerEntry(
            owner_id=owner_id,
            transaction_id=transaction_id,
            date=request.date,
            type=request.type,
            amount=amount,
            category=request.category,
            subcategory=request.subcategory,
            associated_party=request.associated_party,
            description=request.description,
            is_arap_entry=request.is_arap_entry,
            total_paid=total_paid,
            total_discount=ZERO,
            writeoff_amount=ZERO,
            remaining_balance=remaining,
            payment_status=status,
        )
        self.db.add(entry)
        self.db.flush()

        # --- Journal entry for the transaction itself ---
        mapping = get_mapping_for_ledger_entry(
            request.type,
            request.category,
            request.subcategory,
            is_arap_entry=request.is_arap_entry,
            immediate_settlement=request.immediate_settlement,
        )
        self.journal_service.post_entry(
            owner_id,
            request.description,
            create_journal_lines(mapping, amount, request.description),
            date=request.date,
            linked_transaction_id=transaction_id,
            linked_document_type=LinkedDocumentType.LEDGER,
        )

        # --- Journal entry for money received/paid up front ---
        if (
            request.is_arap_entry
            and not request.immediate_settlement
            and total_paid > 0
        ):
            payment_mapping = get_mapping_for_payment(
                payment_type_for(request.type)
            )
            description = f"Initial payment: {request.description}"
            self.journal_service.post_entry(
                owner_id,
                description,
                create_journal_lines(payment_mapping, total_paid, description),
                date=request.date,
                linked_transaction_id=transaction_id,
                linked_document_type=LinkedDocumentType.PAYMENT,
            )

        self.activity_log.log_activity(
            owner_id,
            ActivityAction.CREATE,
            "ledger",
            f"Created {request.type.value} entry: {request.description}",
            user_id=user_id,
            target_id=transaction_id,
            details={"amount": str(amount), "category": request.category},
        )
        logger.info(
            "Created ledger entry %s for owner %s (%s %s)",
            transaction_id, owner_id, request.type.value, amount,
        )
        return entry

    def get_entry(self, owner_id: str, transaction_id: str) -> LedgerEntry:
        entry = self.db.execute(
            select(LedgerEntry).where(
                LedgerEntry.owner_id == owner_id,
                LedgerEntry.transaction_id == transaction_id,
            )
        ).scalar_one_or_none()
        if not entry:
            raise NotFoundError(f"Ledger entry {transaction_id} not found")
        return entry

    def list_entries(
        self,
        owner_id: str,
        include_deleted: bool = False,
        payment_status: PaymentStatus | None = None,
        limit: int | None = None,
    ) -> list[LedgerEntry]:
        """Return ledger entries, newest first."""
        query = select(LedgerEntry).where(LedgerEntry.owner_id == owner_id)
        if not include_deleted:
            query = query.where(LedgerEntry.is_deleted.is_(False))
        if payment_status is not None:
            query = query.where(LedgerEntry.payment_status == payment_status)
        query = query.order_by(LedgerEntry.date.desc(), LedgerEntry.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return list(self.db.execute(query).scalars().all())

    def soft_delete_entry(
        self,
        owner_id: str,
        transaction_id: str,
        user_id: str | None = None,
    ) -> LedgerEntry:
        """
        Flag an entry as deleted and reverse its journal entries.

        The row stays for the audit trail. Entries that still have
        payments must have those payments deleted first.
        """
        entry = self.get_entry(owner_id, transaction_id)
        if entry.is_deleted:
            raise ValidationError(
                f"Ledger entry {transaction_id} is already deleted"
            )

        has_payments = self.db.execute(
            select(Payment.id).where(
                Payment.owner_id == owner_id,
                Payment.linked_transaction_id == transaction_id,
            ).limit(1)
        ).scalar_one_or_none()
        if has_payments is not None:
            raise ValidationError(
                "Delete the payments recorded against this entry first"
            )

        for journal in self.journal_service.get_entries_for_transaction(
            owner_id, transaction_id
        ):
            if (
                journal.status == JournalEntryStatus.POSTED
                and journal.reverses_entry_id is None
            ):
                self.journal_service.reverse_entry(owner_id, journal.id)

        entry.is_deleted = True
        self.db.flush()

        self.activity_log.log_activity(
            owner_id,
            ActivityAction.DELETE,
            "ledger",
            f"Deleted entry: {entry.description}",
            user_id=user_id,
            target_id=transaction_id,
        )
        return entry

    def write_off_bad_debt(
        self,
        owner_id: str,
        transaction_id: str,
        request: WriteOffCreate,
        user_id: str | None = None,
    ) -> LedgerEntry:
        """
        Write off part or all of a receivable as uncollectible.

        The write-off counts towards settlement like a payment, so a
        full write-off leaves the entry PAID. Posts DR Bad Debt
        Expense, CR Accounts Receivable.
        """
        entry = self.db.execute(
            select(LedgerEntry).where(
                LedgerEntry.owner_id == owner_id,
                LedgerEntry.transaction_id == transaction_id,
            ).with_for_update()
        ).scalar_one_or_none()
        if not entry:
            raise NotFoundError(f"Ledger entry {transaction_id} not found")
        if entry.is_deleted:
            raise ValidationError(f"Ledger entry {transaction_id} is deleted")
        if not entry.is_arap_entry:
            raise ARAPNotEnabledError(
                "This transaction is not tracked as receivable/payable"
            )
        if entry.type != TransactionType.INCOME:
            raise ValidationError("Only receivables can be written off as bad debt")

        amount = round_currency(request.amount)
        if amount <= 0:
            raise ValidationError("Write-off amount must be greater than zero")
        remaining = zero_floor(calculate_remaining_balance(
            entry.amount, entry.total_paid,
            entry.total_discount, entry.writeoff_amount,
        ))
        if amount > remaining:
            raise ValidationError(
                f"Write-off amount ({amount:.2f}) exceeds the remaining "
                f"balance ({remaining:.2f})"
            )

        writeoff = safe_add(entry.writeoff_amount, amount)
        entry.writeoff_amount = writeoff
        entry.writeoff_reason = request.reason
        entry.remaining_balance = zero_floor(calculate_remaining_balance(
            entry.amount, entry.total_paid, entry.total_discount, writeoff
        ))
        entry.payment_status = calculate_payment_status(
            entry.total_paid, entry.amount, entry.total_discount, writeoff
        )
        self.db.flush()

        description = f"Bad debt write-off: {entry.description} - {request.reason}"
        self.journal_service.post_entry(
            owner_id,
            description,
            create_journal_lines(get_mapping_for_bad_debt(), amount, description),
            linked_transaction_id=transaction_id,
            linked_document_type=LinkedDocumentType.WRITEOFF,
        )

        self.activity_log.log_activity(
            owner_id,
            ActivityAction.UPDATE,
            "ledger",
            f"Wrote off {amount:.2f} of {entry.description}",
            user_id=user_id,
            target_id=transaction_id,
            details={"amount": str(amount), "reason": request.reason},
        )
        logger.info(
            "Wrote off %s on %s for owner %s (%s)",
            amount, transaction_id, owner_id, entry.payment_status.value,
        )
        return entry
