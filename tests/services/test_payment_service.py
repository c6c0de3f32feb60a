"""
Tests for the PaymentService.

Adding and deleting payments must keep the ledger entry's
AR/AP fields and the journal in step.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from factoryflow.errors import NotFoundError, ValidationError
from factoryflow.models.enums import (
    JournalEntryStatus,
    LinkedDocumentType,
    PaymentStatus,
    PaymentType,
    TransactionType,
)
from factoryflow.models.payment import Payment
from factoryflow.schemas.ledger import LedgerEntryCreate
from factoryflow.schemas.payment import PaymentCreate
from factoryflow.services.journal_service import (
    JournalService,
    validate_journal_entry,
)
from factoryflow.services.ledger_service import LedgerService
from factoryflow.services.payment_service import PaymentService

OWNER = "owner-1"


def make_invoice(db_session, type=TransactionType.INCOME, category="مبيعات"):
    entry = LedgerService(db_session).create_entry(OWNER, LedgerEntryCreate(
        type=type,
        amount=Decimal("1000"),
        category=category,
        description="Invoice 17",
        is_arap_entry=True,
        date=datetime(2026, 3, 15),
    ))
    db_session.commit()
    return entry


def pay(entry, amount, discount="0", payment_type=PaymentType.RECEIPT):
    return PaymentCreate(
        linked_transaction_id=entry.transaction_id,
        payment_type=payment_type,
        amount=Decimal(amount),
        discount_amount=Decimal(discount),
        date=datetime(2026, 3, 20),
    )


class TestAddPayment:

    def test_receipt_updates_entry(self, db_session):
        entry = make_invoice(db_session)
        result = PaymentService(db_session).add_payment(OWNER, pay(entry, "400"))
        db_session.commit()

        assert result.arap.success is True
        assert result.payment is not None
        assert result.payment.amount == Decimal("400.00")
        assert entry.payment_status == PaymentStatus.PARTIAL
        assert entry.remaining_balance == Decimal("600")

    def test_receipt_posts_cash_against_receivables(self, db_session):
        entry = make_invoice(db_session)
        result = PaymentService(db_session).add_payment(OWNER, pay(entry, "400"))

        journals = [
            j for j in JournalService(db_session).get_entries_for_transaction(
                OWNER, entry.transaction_id
            )
            if j.linked_document_type == LinkedDocumentType.PAYMENT
        ]
        assert len(journals) == 1
        assert journals[0].linked_payment_id == result.payment.id
        lines = {(l.account_code, l.debit, l.credit) for l in journals[0].lines}
        assert lines == {
            ("1000", Decimal("400.00"), Decimal("0")),
            ("1200", Decimal("0"), Decimal("400.00")),
        }

    def test_discount_posts_sales_discount(self, db_session):
        entry = make_invoice(db_session)
        result = PaymentService(db_session).add_payment(
            OWNER, pay(entry, "950", discount="50")
        )

        journal = JournalService(db_session).get_entries_for_transaction(
            OWNER, entry.transaction_id
        )[-1]
        codes = sorted(l.account_code for l in journal.lines)

        assert result.arap.new_status == PaymentStatus.PAID
        assert codes == ["1000", "1200", "1200", "4300"]
        assert validate_journal_entry(journal.lines).is_valid

    def test_disbursement_against_payable(self, db_session):
        entry = make_invoice(
            db_session, type=TransactionType.EXPENSE, category="إيجار"
        )
        result = PaymentService(db_session).add_payment(
            OWNER, pay(entry, "1000", payment_type=PaymentType.DISBURSEMENT)
        )
        assert result.arap.new_status == PaymentStatus.PAID

    def test_wrong_payment_type_rejected(self, db_session):
        entry = make_invoice(db_session)
        with pytest.raises(ValidationError, match="receipt"):
            PaymentService(db_session).add_payment(
                OWNER, pay(entry, "100", payment_type=PaymentType.DISBURSEMENT)
            )

    def test_unknown_entry_returns_failure(self, db_session):
        request = PaymentCreate(
            linked_transaction_id="TXN-20260101-000000-000",
            payment_type=PaymentType.RECEIPT,
            amount=Decimal("100"),
        )
        result = PaymentService(db_session).add_payment(OWNER, request)

        assert result.payment is None
        assert result.arap.success is False
        assert db_session.query(Payment).count() == 0


class TestDeletePayment:

    def test_delete_restores_entry_and_reverses_journal(self, db_session):
        entry = make_invoice(db_session)
        service = PaymentService(db_session)
        added = service.add_payment(OWNER, pay(entry, "400", discount="10"))
        db_session.commit()

        result = service.delete_payment(OWNER, added.payment.id)
        db_session.commit()

        assert result.arap.success is True
        assert result.payment.id == added.payment.id
        assert entry.total_paid == Decimal("0")
        assert entry.total_discount == Decimal("0")
        assert entry.payment_status == PaymentStatus.UNPAID
        assert service.get_payments_for_transaction(
            OWNER, entry.transaction_id
        ) == []

        payment_journals = [
            j for j in JournalService(db_session).get_entries_for_transaction(
                OWNER, entry.transaction_id
            )
            if j.linked_payment_id == added.payment.id
        ]
        assert sorted(j.status for j in payment_journals) == sorted([
            JournalEntryStatus.REVERSED, JournalEntryStatus.POSTED,
        ])

    def test_delete_unknown_payment(self, db_session):
        with pytest.raises(NotFoundError):
            PaymentService(db_session).delete_payment(OWNER, 999)

    def test_payments_listed_in_date_order(self, db_session):
        entry = make_invoice(db_session)
        service = PaymentService(db_session)
        service.add_payment(OWNER, pay(entry, "100"))
        service.add_payment(OWNER, pay(entry, "200"))

        payments = service.get_payments_for_transaction(
            OWNER, entry.transaction_id
        )
        assert [p.amount for p in payments] == [Decimal("100"), Decimal("200")]
