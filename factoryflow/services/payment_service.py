"""
Payment service: records and removes payments against AR/AP entries.

Adding a payment:
1. Updates the ledger entry's AR/AP fields (ARAPService)
2. Stores the payment row
3. Posts the payment journal entry (cash against AR or AP,
   plus the settlement discount lines when there is one)

Deleting a payment runs the same steps backwards. When the AR/AP
update is refused nothing else is written and the refusal is
returned to the caller.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from factoryflow.errors import NotFoundError, ValidationError
from factoryflow.models.enums import (
    ActivityAction,
    JournalEntryStatus,
    LinkedDocumentType,
    PaymentType,
)
from factoryflow.models.journal_entry import JournalEntry
from factoryflow.models.ledger_entry import LedgerEntry
from factoryflow.models.payment import Payment
from factoryflow.schemas.payment import (
    PaymentCreate,
    PaymentResponse,
    PaymentResult,
)
from factoryflow.services.account_mapping import (
    get_mapping_for_payment,
    get_mapping_for_settlement_discount,
)
from factoryflow.services.activity_log_service import ActivityLogService
from factoryflow.services.arap_service import ARAPService
from factoryflow.services.journal_service import (
    JournalService,
    create_journal_lines,
)
from factoryflow.services.ledger_service import payment_type_for
from factoryflow.services.money import round_currency

logger = logging.getLogger(__name__)


class PaymentService:

    def __init__(self, db: Session):
        self.db = db
        self.arap_service = ARAPService(db)
        self.journal_service = JournalService(db)
        self.activity_log = ActivityLogService(db)

    def _check_payment_type(
        self, owner_id: str, transaction_id: str, payment_type: PaymentType
    ):
        entry = self.db.execute(
            select(LedgerEntry).where(
                LedgerEntry.owner_id == owner_id,
                LedgerEntry.transaction_id == transaction_id,
                LedgerEntry.is_deleted.is_(False),
            )
        ).scalar_one_or_none()
        # Missing or untracked entries are reported by the AR/AP update
        if entry is None or not entry.is_arap_entry:
            return
        expected = payment_type_for(entry.type)
        if payment_type != expected:
            raise ValidationError(
                f"{entry.type.value.capitalize()} entries are settled by "
                f"{expected.value}, not {payment_type.value}"
            )

    def add_payment(
        self,
        owner_id: str,
        request: PaymentCreate,
        user_id: str | None = None,
    ) -> PaymentResult:
        """
        Record a payment and update the entry it settles.

        Returns a PaymentResult with payment=None when the AR/AP
        update was refused (unknown entry, entry not AR/AP, bad
        amount).
        """
        transaction_id = request.linked_transaction_id.strip()
        self._check_payment_type(
            owner_id, transaction_id, request.payment_type
        )

        arap = self.arap_service.update_on_payment_add(
            owner_id, transaction_id, request.amount, request.discount_amount
        )
        if not arap.success:
            return PaymentResult(payment=None, arap=arap)

        amount = round_currency(request.amount)
        discount = round_currency(request.discount_amount)
        payment = Payment(
            owner_id=owner_id,
            linked_transaction_id=transaction_id,
            payment_type=request.payment_type,
            amount=amount,
            discount_amount=discount,
            date=request.date,
            notes=request.notes,
        )
        self.db.add(payment)
        self.db.flush()

        description = request.notes or f"Payment for {transaction_id}"
        lines = create_journal_lines(
            get_mapping_for_payment(request.payment_type), amount, description
        )
        if discount > 0:
            lines += create_journal_lines(
                get_mapping_for_settlement_discount(request.payment_type),
                discount,
                f"Settlement discount: {description}",
            )
        self.journal_service.post_entry(
            owner_id,
            description,
            lines,
            date=request.date,
            linked_transaction_id=transaction_id,
            linked_payment_id=payment.id,
            linked_document_type=LinkedDocumentType.PAYMENT,
        )

        self.activity_log.log_activity(
            owner_id,
            ActivityAction.CREATE,
            "payments",
            f"Recorded {request.payment_type.value} of {amount}",
            user_id=user_id,
            target_id=transaction_id,
            details={"amount": str(amount), "discount": str(discount)},
        )
        logger.info(
            "Recorded payment %s (%s) against %s",
            payment.id, amount, transaction_id,
        )
        return PaymentResult(
            payment=PaymentResponse.model_validate(payment), arap=arap
        )

    def get_payment(self, owner_id: str, payment_id: int) -> Payment:
        payment = self.db.execute(
            select(Payment).where(
                Payment.id == payment_id,
                Payment.owner_id == owner_id,
            )
        ).scalar_one_or_none()
        if not payment:
            raise NotFoundError(f"Payment {payment_id} not found")
        return payment

    def get_payments_for_transaction(
        self, owner_id: str, transaction_id: str
    ) -> list[Payment]:
        payments = self.db.execute(
            select(Payment)
            .where(
                Payment.owner_id == owner_id,
                Payment.linked_transaction_id == transaction_id,
            )
            .order_by(Payment.date, Payment.id)
        ).scalars().all()
        return list(payments)

    def delete_payment(
        self,
        owner_id: str,
        payment_id: int,
        user_id: str | None = None,
    ) -> PaymentResult:
        """
        Delete a payment, restoring the entry's AR/AP fields and
        reversing its journal entry.

        If the AR/AP reversal is refused the payment is kept.
        """
        payment = self.get_payment(owner_id, payment_id)
        snapshot = PaymentResponse.model_validate(payment)

        arap = self.arap_service.reverse_on_payment_delete(
            owner_id,
            payment.linked_transaction_id,
            payment.amount,
            payment.discount_amount,
        )
        if not arap.success:
            return PaymentResult(payment=snapshot, arap=arap)

        journals = self.db.execute(
            select(JournalEntry).where(
                JournalEntry.owner_id == owner_id,
                JournalEntry.linked_payment_id == payment.id,
                JournalEntry.status == JournalEntryStatus.POSTED,
                JournalEntry.reverses_entry_id.is_(None),
            )
        ).scalars().all()
        for journal in journals:
            self.journal_service.reverse_entry(
                owner_id, journal.id,
                f"Payment deleted: {journal.description}",
            )

        self.db.delete(payment)
        self.db.flush()

        self.activity_log.log_activity(
            owner_id,
            ActivityAction.DELETE,
            "payments",
            f"Deleted payment of {snapshot.amount}",
            user_id=user_id,
            target_id=snapshot.linked_transaction_id,
        )
        return PaymentResult(payment=snapshot, arap=arap)
