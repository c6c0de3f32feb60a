"""
Tests for journal validation, posting, reversal and the trial balance.
"""

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from factoryflow.errors import (
    NotFoundError,
    UnbalancedJournalError,
    ValidationError,
)
from factoryflow.models.account import Account
from factoryflow.models.enums import JournalEntryStatus, TransactionType
from factoryflow.schemas.journal import JournalLineIn
from factoryflow.schemas.ledger import LedgerEntryCreate
from factoryflow.services.chart_of_accounts import DEFAULT_ACCOUNTS
from factoryflow.services.journal_service import (
    JournalService,
    generate_entry_number,
    validate_journal_entry,
)
from factoryflow.services.ledger_service import LedgerService

OWNER = "owner-1"


def line(code, debit="0", credit="0"):
    return JournalLineIn(
        account_code=code, debit=Decimal(debit), credit=Decimal(credit)
    )


# --- Balance Validation ---

class TestValidateJournalEntry:

    def test_balanced(self):
        result = validate_journal_entry([
            line("1000", debit="1000"), line("4000", credit="1000"),
        ])
        assert result.is_valid is True
        assert result.total_debits == Decimal("1000")
        assert result.total_credits == Decimal("1000")
        assert result.difference == Decimal("0")

    def test_unbalanced(self):
        result = validate_journal_entry([
            line("1000", debit="1000"), line("4000", credit="500"),
        ])
        assert result.is_valid is False
        assert result.difference == Decimal("500")

    def test_empty_is_valid(self):
        result = validate_journal_entry([])
        assert result.is_valid is True
        assert result.total_debits == 0
        assert result.total_credits == 0

    def test_within_tolerance(self):
        result = validate_journal_entry([
            line("1000", debit="100.00005"), line("4000", credit="100"),
        ])
        assert result.is_valid is True

    def test_at_tolerance_is_invalid(self):
        result = validate_journal_entry([
            line("1000", debit="100.0001"), line("4000", credit="100"),
        ])
        assert result.is_valid is False

    def test_signs_are_ignored(self):
        # Rows with stray negative amounts are compared by magnitude
        rows = [
            SimpleNamespace(debit=Decimal("-250"), credit=Decimal("0")),
            SimpleNamespace(debit=Decimal("0"), credit=Decimal("250")),
        ]
        assert validate_journal_entry(rows).is_valid is True

    def test_many_lines(self):
        result = validate_journal_entry([
            line("1000", debit="600"),
            line("4300", debit="400"),
            line("1200", credit="1000"),
        ])
        assert result.is_valid is True


def test_entry_number_format():
    number = generate_entry_number(datetime(2026, 3, 15, 14, 5, 9))
    assert number.startswith("JE-20260315-140509-")
    assert len(number) == len("JE-20260315-140509-000")


# --- Posting ---

class TestPostEntry:

    def test_post_balanced_entry(self, db_session):
        service = JournalService(db_session)
        entry = service.post_entry(OWNER, "Owner deposit", [
            line("1100", debit="5000"), line("3000", credit="5000"),
        ])
        db_session.commit()

        assert entry.id is not None
        assert entry.status == JournalEntryStatus.POSTED
        assert entry.posted_at is not None
        assert len(entry.lines) == 2
        # Names filled from the chart
        assert entry.lines[0].account_name == "Bank"

    def test_seeds_chart_on_first_use(self, db_session):
        JournalService(db_session).post_entry(OWNER, "Deposit", [
            line("1100", debit="10"), line("3000", credit="10"),
        ])
        count = db_session.query(Account).filter_by(owner_id=OWNER).count()
        assert count == len(DEFAULT_ACCOUNTS)

    def test_entry_number_collision_retried(self, db_session, monkeypatch):
        numbers = iter([
            "JE-20260315-100000-001",
            "JE-20260315-100000-001",
            "JE-20260315-100000-002",
        ])
        monkeypatch.setattr(
            "factoryflow.services.journal_service.generate_entry_number",
            lambda now=None: next(numbers),
        )
        service = JournalService(db_session)
        first = service.post_entry(OWNER, "Sale", [
            line("1000", debit="100"), line("4000", credit="100"),
        ])
        second = service.post_entry(OWNER, "Initial payment", [
            line("1000", debit="40"), line("1200", credit="40"),
        ])

        assert first.entry_number == "JE-20260315-100000-001"
        assert second.entry_number == "JE-20260315-100000-002"

    def test_entry_number_exhaustion_rejected(self, db_session, monkeypatch):
        monkeypatch.setattr(
            "factoryflow.services.journal_service.generate_entry_number",
            lambda now=None: "JE-20260315-100000-001",
        )
        service = JournalService(db_session)
        service.post_entry(OWNER, "Sale", [
            line("1000", debit="100"), line("4000", credit="100"),
        ])
        with pytest.raises(ValidationError, match="unique journal entry number"):
            service.post_entry(OWNER, "Sale", [
                line("1000", debit="100"), line("4000", credit="100"),
            ])

    def test_unbalanced_rejected(self, db_session):
        with pytest.raises(UnbalancedJournalError) as exc_info:
            JournalService(db_session).post_entry(OWNER, "Bad", [
                line("1000", debit="1000"), line("4000", credit="900"),
            ])
        assert exc_info.value.total_debits == Decimal("1000")
        assert exc_info.value.total_credits == Decimal("900")

    def test_single_line_rejected(self, db_session):
        with pytest.raises(ValidationError, match="at least two"):
            JournalService(db_session).post_entry(OWNER, "Bad", [
                line("1000", debit="1000"),
            ])

    def test_line_with_both_sides_rejected(self, db_session):
        with pytest.raises(ValidationError, match="exactly one"):
            JournalService(db_session).post_entry(OWNER, "Bad", [
                line("1000", debit="100", credit="100"),
                line("4000", credit="0"),
            ])

    def test_unknown_account_rejected(self, db_session):
        with pytest.raises(NotFoundError, match="9999"):
            JournalService(db_session).post_entry(OWNER, "Bad", [
                line("1000", debit="100"), line("9999", credit="100"),
            ])

    def test_inactive_account_rejected(self, db_session):
        service = JournalService(db_session)
        service.account_service.seed_chart_of_accounts(OWNER)
        db_session.query(Account).filter_by(
            owner_id=OWNER, code="1100"
        ).update({"is_active": False})

        with pytest.raises(ValidationError, match="not active"):
            service.post_entry(OWNER, "Deposit", [
                line("1100", debit="100"), line("3000", credit="100"),
            ])


# --- Reversal ---

class TestReverseEntry:

    def test_reverse_swaps_sides(self, db_session):
        service = JournalService(db_session)
        original = service.post_entry(OWNER, "Deposit", [
            line("1100", debit="750"), line("3000", credit="750"),
        ])

        reversal = service.reverse_entry(OWNER, original.id)
        db_session.commit()

        assert original.status == JournalEntryStatus.REVERSED
        assert original.reversed_by_id == reversal.id
        assert reversal.reverses_entry_id == original.id
        assert reversal.description == "Reversal: Deposit"
        by_code = {l.account_code: l for l in reversal.lines}
        assert by_code["1100"].credit == Decimal("750")
        assert by_code["3000"].debit == Decimal("750")

    def test_cannot_reverse_twice(self, db_session):
        service = JournalService(db_session)
        original = service.post_entry(OWNER, "Deposit", [
            line("1100", debit="750"), line("3000", credit="750"),
        ])
        service.reverse_entry(OWNER, original.id)

        with pytest.raises(ValidationError, match="posted"):
            service.reverse_entry(OWNER, original.id)

    def test_reverse_unknown(self, db_session):
        with pytest.raises(NotFoundError):
            JournalService(db_session).reverse_entry(OWNER, 424242)


# --- Trial Balance ---

class TestTrialBalance:

    def _record(self, db_session, **fields):
        request = dict(
            type=TransactionType.INCOME,
            amount=Decimal("1000"),
            category="مبيعات",
            description="Sale",
        )
        request.update(fields)
        return LedgerService(db_session).create_entry(
            OWNER, LedgerEntryCreate(**request)
        )

    def test_empty_books_balance(self, db_session):
        balance = JournalService(db_session).get_trial_balance(OWNER)
        assert balance.is_balanced is True
        assert balance.accounts == []

    def test_balances_follow_normal_side(self, db_session):
        self._record(db_session)
        self._record(
            db_session,
            type=TransactionType.EXPENSE,
            amount=Decimal("300"),
            category="رواتب",
            description="Wages",
        )

        balance = JournalService(db_session).get_trial_balance(OWNER)
        by_code = {a.account_code: a for a in balance.accounts}

        assert balance.is_balanced is True
        assert balance.total_debits == Decimal("1300.00")
        assert balance.total_credits == Decimal("1300.00")
        assert by_code["1000"].balance == Decimal("700.00")
        assert by_code["4000"].balance == Decimal("1000.00")
        assert by_code["5100"].balance == Decimal("300.00")

    def test_reversed_entries_net_to_zero(self, db_session):
        service = JournalService(db_session)
        original = service.post_entry(OWNER, "Deposit", [
            line("1100", debit="750"), line("3000", credit="750"),
        ])
        service.reverse_entry(OWNER, original.id)

        balance = service.get_trial_balance(OWNER)
        by_code = {a.account_code: a for a in balance.accounts}
        assert by_code["1100"].balance == Decimal("0.00")
        assert balance.is_balanced is True

    def test_contra_asset_is_negated(self, db_session):
        service = JournalService(db_session)
        service.post_entry(OWNER, "Depreciation", [
            line("5400", debit="120"), line("1510", credit="120"),
        ])

        balance = service.get_trial_balance(OWNER)
        by_code = {a.account_code: a for a in balance.accounts}
        assert by_code["1510"].balance == Decimal("120.00")

    def test_as_of_date_excludes_later_entries(self, db_session):
        service = JournalService(db_session)
        service.post_entry(OWNER, "Early", [
            line("1100", debit="100"), line("3000", credit="100"),
        ], date=datetime(2026, 1, 10))
        service.post_entry(OWNER, "Late", [
            line("1100", debit="900"), line("3000", credit="900"),
        ], date=datetime(2026, 6, 10))

        balance = service.get_trial_balance(OWNER, datetime(2026, 3, 1))
        assert balance.total_debits == Decimal("100.00")
