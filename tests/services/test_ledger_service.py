"""
Tests for the LedgerService.

Tests cover:
- Request validation (required fields, bounds, id format)
- Payment status tagging for AR/AP and cash entries
- Journal entries posted for each kind of entry
- Duplicate transaction ids
- Soft delete and journal reversal
"""

import re
from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaValidationError

from factoryflow.errors import (
    ARAPNotEnabledError,
    NotFoundError,
    ValidationError,
)
from factoryflow.models.enums import (
    JournalEntryStatus,
    LinkedDocumentType,
    PaymentStatus,
    PaymentType,
    TransactionType,
)
from factoryflow.schemas.ledger import LedgerEntryCreate, WriteOffCreate
from factoryflow.schemas.payment import PaymentCreate
from factoryflow.services.journal_service import JournalService
from factoryflow.services.ledger_service import (
    LedgerService,
    generate_transaction_id,
)
from factoryflow.services.payment_service import PaymentService

OWNER = "owner-1"


def make_request(
    amount="1000",
    type=TransactionType.INCOME,
    category="مبيعات",
    description="Steel frames",
    **fields,
):
    return LedgerEntryCreate(
        type=type,
        amount=Decimal(amount),
        category=category,
        description=description,
        date=datetime(2026, 3, 15, 9, 30),
        **fields,
    )


def journal_accounts(journal):
    """(debit account, credit account) pairs of a two-line entry."""
    debit = next(l.account_code for l in journal.lines if l.debit > 0)
    credit = next(l.account_code for l in journal.lines if l.credit > 0)
    return debit, credit


# --- Request Validation ---

class TestLedgerEntryCreate:

    def test_blank_category_rejected(self):
        with pytest.raises(SchemaValidationError):
            make_request(category="   ")

    def test_missing_description_rejected(self):
        with pytest.raises(SchemaValidationError):
            make_request(description="")

    def test_description_too_long_rejected(self):
        with pytest.raises(SchemaValidationError):
            make_request(description="x" * 501)

    @pytest.mark.parametrize("amount", ["0", "-10", "1000000000"])
    def test_amount_out_of_bounds_rejected(self, amount):
        with pytest.raises(SchemaValidationError):
            make_request(amount=amount)

    def test_sub_cent_amount_rejected(self):
        with pytest.raises(SchemaValidationError):
            make_request(amount="10.005")

    def test_cent_amount_accepted(self):
        assert make_request(amount="10.01").amount == Decimal("10.01")

    def test_max_amount_accepted(self):
        assert make_request(amount="999999999").amount == Decimal("999999999")

    def test_bad_transaction_id_rejected(self):
        with pytest.raises(SchemaValidationError):
            make_request(transaction_id="TX-1")

    def test_initial_payment_above_amount_rejected(self):
        with pytest.raises(SchemaValidationError):
            make_request(is_arap_entry=True, initial_payment=Decimal("1500"))

    def test_whitespace_collapsed(self):
        request = make_request(description="  Steel   frames ")
        assert request.description == "Steel frames"


def test_generated_transaction_id_format():
    transaction_id = generate_transaction_id(datetime(2026, 3, 15, 9, 30, 5))
    assert re.match(r"^TXN-20260315-093005-\d{3}$", transaction_id)


# --- Entry Creation ---

class TestCreateEntry:

    def test_cash_income_is_paid(self, db_session):
        service = LedgerService(db_session)
        entry = service.create_entry(OWNER, make_request())
        db_session.commit()

        assert entry.id is not None
        assert entry.payment_status == PaymentStatus.PAID
        assert entry.total_paid == Decimal("1000.00")
        assert entry.remaining_balance == Decimal("0")
        assert entry.is_deleted is False

    def test_cash_income_posts_cash_against_sales(self, db_session):
        entry = LedgerService(db_session).create_entry(OWNER, make_request())
        journals = JournalService(db_session).get_entries_for_transaction(
            OWNER, entry.transaction_id
        )

        assert len(journals) == 1
        assert journals[0].status == JournalEntryStatus.POSTED
        assert journals[0].linked_document_type == LinkedDocumentType.LEDGER
        assert journal_accounts(journals[0]) == ("1000", "4000")

    def test_arap_income_is_unpaid_and_goes_to_receivables(self, db_session):
        entry = LedgerService(db_session).create_entry(
            OWNER, make_request(is_arap_entry=True)
        )
        journals = JournalService(db_session).get_entries_for_transaction(
            OWNER, entry.transaction_id
        )

        assert entry.payment_status == PaymentStatus.UNPAID
        assert entry.total_paid == Decimal("0.00")
        assert entry.remaining_balance == Decimal("1000.00")
        assert journal_accounts(journals[0]) == ("1200", "4000")

    def test_arap_expense_goes_to_payables(self, db_session):
        entry = LedgerService(db_session).create_entry(OWNER, make_request(
            type=TransactionType.EXPENSE,
            category="مواد خام",
            is_arap_entry=True,
        ))
        journals = JournalService(db_session).get_entries_for_transaction(
            OWNER, entry.transaction_id
        )
        assert journal_accounts(journals[0]) == ("5010", "2000")

    def test_initial_payment_makes_partial(self, db_session):
        entry = LedgerService(db_session).create_entry(OWNER, make_request(
            is_arap_entry=True, initial_payment=Decimal("300"),
        ))
        journals = JournalService(db_session).get_entries_for_transaction(
            OWNER, entry.transaction_id
        )

        assert entry.payment_status == PaymentStatus.PARTIAL
        assert entry.total_paid == Decimal("300.00")
        assert entry.remaining_balance == Decimal("700.00")
        assert len(journals) == 2
        assert journals[1].linked_document_type == LinkedDocumentType.PAYMENT
        assert journal_accounts(journals[1]) == ("1000", "1200")

    def test_immediate_settlement_is_paid_through_cash(self, db_session):
        entry = LedgerService(db_session).create_entry(OWNER, make_request(
            is_arap_entry=True, immediate_settlement=True,
        ))
        journals = JournalService(db_session).get_entries_for_transaction(
            OWNER, entry.transaction_id
        )

        assert entry.payment_status == PaymentStatus.PAID
        assert entry.remaining_balance == Decimal("0.00")
        assert len(journals) == 1
        assert journal_accounts(journals[0]) == ("1000", "4000")

    def test_capital_contribution(self, db_session):
        entry = LedgerService(db_session).create_entry(OWNER, make_request(
            type=TransactionType.CAPITAL, category="رأس المال",
        ))
        journals = JournalService(db_session).get_entries_for_transaction(
            OWNER, entry.transaction_id
        )
        assert journal_accounts(journals[0]) == ("1000", "3000")

    def test_capital_cannot_be_arap(self, db_session):
        with pytest.raises(ValidationError, match="Capital"):
            LedgerService(db_session).create_entry(OWNER, make_request(
                type=TransactionType.CAPITAL,
                category="رأس المال",
                is_arap_entry=True,
            ))

    def test_supplied_transaction_id_kept(self, db_session):
        entry = LedgerService(db_session).create_entry(OWNER, make_request(
            transaction_id="TXN-20260315-093000-042",
        ))
        assert entry.transaction_id == "TXN-20260315-093000-042"

    def test_duplicate_transaction_id_rejected(self, db_session):
        service = LedgerService(db_session)
        service.create_entry(OWNER, make_request(
            transaction_id="TXN-20260315-093000-042",
        ))
        db_session.commit()

        with pytest.raises(ValidationError, match="already exists"):
            service.create_entry(OWNER, make_request(
                transaction_id="TXN-20260315-093000-042",
            ))

    def test_same_transaction_id_allowed_for_other_owner(self, db_session):
        service = LedgerService(db_session)
        service.create_entry(OWNER, make_request(
            transaction_id="TXN-20260315-093000-042",
        ))
        other = service.create_entry("owner-2", make_request(
            transaction_id="TXN-20260315-093000-042",
        ))
        assert other.owner_id == "owner-2"


# --- Reads ---

class TestGetEntries:

    def test_get_entry_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            LedgerService(db_session).get_entry(OWNER, "TXN-20260101-000000-000")

    def test_list_entries_filters_by_status(self, db_session):
        service = LedgerService(db_session)
        service.create_entry(OWNER, make_request())
        service.create_entry(OWNER, make_request(is_arap_entry=True))
        db_session.commit()

        unpaid = service.list_entries(
            OWNER, payment_status=PaymentStatus.UNPAID
        )
        assert len(unpaid) == 1
        assert len(service.list_entries(OWNER)) == 2


# --- Soft Delete ---

class TestSoftDeleteEntry:

    def test_soft_delete_reverses_journal(self, db_session):
        service = LedgerService(db_session)
        entry = service.create_entry(OWNER, make_request())
        db_session.commit()

        service.soft_delete_entry(OWNER, entry.transaction_id)
        db_session.commit()

        journals = JournalService(db_session).get_entries_for_transaction(
            OWNER, entry.transaction_id
        )
        assert entry.is_deleted is True
        assert [j.status for j in journals] == [
            JournalEntryStatus.REVERSED, JournalEntryStatus.POSTED,
        ]
        assert journals[1].reverses_entry_id == journals[0].id
        assert journals[0].reversed_by_id == journals[1].id
        assert service.list_entries(OWNER) == []
        assert len(service.list_entries(OWNER, include_deleted=True)) == 1

    def test_delete_twice_rejected(self, db_session):
        service = LedgerService(db_session)
        entry = service.create_entry(OWNER, make_request())
        service.soft_delete_entry(OWNER, entry.transaction_id)

        with pytest.raises(ValidationError, match="already deleted"):
            service.soft_delete_entry(OWNER, entry.transaction_id)

    def test_entry_with_payments_cannot_be_deleted(self, db_session):
        service = LedgerService(db_session)
        entry = service.create_entry(OWNER, make_request(is_arap_entry=True))
        PaymentService(db_session).add_payment(OWNER, PaymentCreate(
            linked_transaction_id=entry.transaction_id,
            payment_type=PaymentType.RECEIPT,
            amount=Decimal("100"),
        ))

        with pytest.raises(ValidationError, match="payments"):
            service.soft_delete_entry(OWNER, entry.transaction_id)


# --- Bad Debt Write-off ---

class TestWriteOffBadDebt:

    def _invoice(self, db_session, **fields):
        fields.setdefault("is_arap_entry", True)
        fields.setdefault("initial_payment", Decimal("200"))
        entry = LedgerService(db_session).create_entry(
            OWNER, make_request(**fields)
        )
        db_session.commit()
        return entry

    def test_full_writeoff_is_paid(self, db_session):
        entry = self._invoice(db_session)

        LedgerService(db_session).write_off_bad_debt(
            OWNER, entry.transaction_id,
            WriteOffCreate(amount=Decimal("800"), reason="Client bankrupt"),
        )
        db_session.commit()

        assert entry.writeoff_amount == Decimal("800")
        assert entry.writeoff_reason == "Client bankrupt"
        assert entry.remaining_balance == Decimal("0")
        assert entry.payment_status == PaymentStatus.PAID
        assert entry.total_paid == Decimal("200")

    def test_partial_writeoff_is_partial(self, db_session):
        entry = self._invoice(db_session)

        LedgerService(db_session).write_off_bad_debt(
            OWNER, entry.transaction_id,
            WriteOffCreate(amount=Decimal("500"), reason="Disputed"),
        )

        assert entry.remaining_balance == Decimal("300")
        assert entry.payment_status == PaymentStatus.PARTIAL

    def test_writeoff_of_unpaid_invoice_is_partial(self, db_session):
        entry = self._invoice(db_session, initial_payment=Decimal("0"))

        LedgerService(db_session).write_off_bad_debt(
            OWNER, entry.transaction_id,
            WriteOffCreate(amount=Decimal("100"), reason="Disputed"),
        )

        assert entry.payment_status == PaymentStatus.PARTIAL
        assert entry.remaining_balance == Decimal("900")

    def test_posts_bad_debt_against_receivables(self, db_session):
        entry = self._invoice(db_session)

        LedgerService(db_session).write_off_bad_debt(
            OWNER, entry.transaction_id,
            WriteOffCreate(amount=Decimal("300"), reason="Client bankrupt"),
        )

        journals = JournalService(db_session).get_entries_for_transaction(
            OWNER, entry.transaction_id
        )
        writeoff = journals[-1]
        assert writeoff.linked_document_type == LinkedDocumentType.WRITEOFF
        assert journal_accounts(writeoff) == ("5600", "1200")
        assert sum(l.debit for l in writeoff.lines) == Decimal("300")

    def test_later_payment_counts_writeoff(self, db_session):
        entry = self._invoice(db_session)
        LedgerService(db_session).write_off_bad_debt(
            OWNER, entry.transaction_id,
            WriteOffCreate(amount=Decimal("300"), reason="Disputed"),
        )

        PaymentService(db_session).add_payment(OWNER, PaymentCreate(
            linked_transaction_id=entry.transaction_id,
            payment_type=PaymentType.RECEIPT,
            amount=Decimal("500"),
        ))

        assert entry.remaining_balance == Decimal("0")
        assert entry.payment_status == PaymentStatus.PAID

    def test_writeoff_above_remaining_rejected(self, db_session):
        entry = self._invoice(db_session)

        with pytest.raises(ValidationError, match="exceeds the remaining"):
            LedgerService(db_session).write_off_bad_debt(
                OWNER, entry.transaction_id,
                WriteOffCreate(amount=Decimal("800.01"), reason="Bad debt"),
            )
        assert entry.writeoff_amount == Decimal("0")

    def test_cash_entry_cannot_be_written_off(self, db_session):
        entry = self._invoice(
            db_session, is_arap_entry=False, initial_payment=Decimal("0")
        )

        with pytest.raises(ARAPNotEnabledError):
            LedgerService(db_session).write_off_bad_debt(
                OWNER, entry.transaction_id,
                WriteOffCreate(amount=Decimal("10"), reason="Bad debt"),
            )

    def test_payable_cannot_be_written_off(self, db_session):
        entry = self._invoice(
            db_session,
            type=TransactionType.EXPENSE,
            category="مواد خام",
            initial_payment=Decimal("0"),
        )

        with pytest.raises(ValidationError, match="Only receivables"):
            LedgerService(db_session).write_off_bad_debt(
                OWNER, entry.transaction_id,
                WriteOffCreate(amount=Decimal("10"), reason="Bad debt"),
            )

    def test_unknown_entry(self, db_session):
        with pytest.raises(NotFoundError):
            LedgerService(db_session).write_off_bad_debt(
                OWNER, "TXN-20990101-000000-000",
                WriteOffCreate(amount=Decimal("10"), reason="Bad debt"),
            )

    @pytest.mark.parametrize("amount", ["0", "-5", "1.005"])
    def test_invalid_amount_rejected_by_schema(self, amount):
        with pytest.raises(SchemaValidationError):
            WriteOffCreate(amount=Decimal(amount), reason="Bad debt")

    def test_blank_reason_rejected(self):
        with pytest.raises(SchemaValidationError):
            WriteOffCreate(amount=Decimal("10"), reason="   ")
