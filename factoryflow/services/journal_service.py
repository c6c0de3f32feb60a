"""
Journal service: double-entry posting, reversal and trial balance.

The rules enforced here:
1. Every journal entry balances (total debits = total credits)
2. Each line is either a debit or a credit, never both
3. Every account code exists and is active in the owner's chart
4. Posted entries are never edited; they are reversed

No other service writes journal entries directly.
"""

import logging
import random
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from factoryflow.config import get_settings
from factoryflow.errors import (
    NotFoundError,
    UnbalancedJournalError,
    ValidationError,
)
from factoryflow.models.enums import (
    JournalEntryStatus,
    LinkedDocumentType,
    NormalBalance,
)
from factoryflow.models.journal_entry import JournalEntry, JournalLine
from factoryflow.schemas.journal import (
    AccountBalance,
    JournalLineIn,
    JournalValidationResult,
    TrialBalance,
)
from factoryflow.services.account_mapping import AccountMapping
from factoryflow.services.account_service import AccountService
from factoryflow.services.chart_of_accounts import (
    get_account_type_from_code,
    get_default_account_name,
    get_normal_balance,
    is_contra_asset,
)
from factoryflow.services.money import ZERO, round_currency, to_decimal

logger = logging.getLogger(__name__)
settings = get_settings()


def validate_journal_entry(
    lines, tolerance: Decimal | None = None
) -> JournalValidationResult:
    """
    Check that a set of journal lines balances.

    Works on anything with ``debit`` and ``credit`` attributes
    (schemas or ORM rows). Debits and credits are summed
    independently, ignoring sign. An empty list is valid.
    """
    if tolerance is None:
        tolerance = settings.ACCOUNTING_TOLERANCE

    total_debits = sum((abs(to_decimal(line.debit)) for line in lines), ZERO)
    total_credits = sum((abs(to_decimal(line.credit)) for line in lines), ZERO)
    difference = abs(total_debits - total_credits)

    return JournalValidationResult(
        is_valid=difference < tolerance,
        total_debits=total_debits,
        total_credits=total_credits,
        difference=difference,
    )


def generate_entry_number(now: datetime | None = None) -> str:
    """Journal entry number in the form JE-YYYYMMDD-HHMMSS-NNN."""
    now = now or datetime.utcnow()
    return f"JE-{now:%Y%m%d-%H%M%S}-{random.randint(0, 999):03d}"


def create_journal_lines(
    mapping: AccountMapping, amount, description: str
) -> list[JournalLineIn]:
    """Build the standard two-line entry for a debit/credit mapping."""
    amount = round_currency(amount)
    return [
        JournalLineIn(
            account_code=mapping.debit_account,
            account_name=get_default_account_name(mapping.debit_account),
            debit=amount,
            description=description,
        ),
        JournalLineIn(
            account_code=mapping.credit_account,
            account_name=get_default_account_name(mapping.credit_account),
            credit=amount,
            description=description,
        ),
    ]


class JournalService:
    """
    All journal operations pass through this service.

    Like the other services it takes the request's session and
    never commits; the caller owns the transaction boundary.
    """

    def __init__(self, db: Session):
        self.db = db
        self.account_service = AccountService(db)

    def _entry_number_exists(self, owner_id: str, entry_number: str) -> bool:
        return self.db.execute(
            select(JournalEntry.id).where(
                JournalEntry.owner_id == owner_id,
                JournalEntry.entry_number == entry_number,
            ).limit(1)
        ).scalar_one_or_none() is not None

    def _new_entry_number(self, owner_id: str, now: datetime) -> str:
        # Entries posted in the same second share the timestamp part
        for _ in range(5):
            entry_number = generate_entry_number(now)
            if not self._entry_number_exists(owner_id, entry_number):
                return entry_number
        raise ValidationError("Could not allocate a unique journal entry number")

    def post_entry(
        self,
        owner_id: str,
        description: str,
        lines: list[JournalLineIn],
        date: datetime | None = None,
        linked_transaction_id: str | None = None,
        linked_payment_id: int | None = None,
        linked_document_type: LinkedDocumentType | None = None,
        reverses_entry_id: int | None = None,
    ) -> JournalEntry:
        """
        Validate and post a journal entry.

        If any check fails nothing is written. Raises
        UnbalancedJournalError, ValidationError or NotFoundError.
        """
        if len(lines) < 2:
            raise ValidationError("A journal entry needs at least two lines")

        for line in lines:
            debit = to_decimal(line.debit)
            credit = to_decimal(line.credit)
            if debit < 0 or credit < 0:
                raise ValidationError(
                    f"Line {line.account_code}: amounts cannot be negative"
                )
            if (debit > 0) == (credit > 0):
                raise ValidationError(
                    f"Line {line.account_code}: exactly one of debit "
                    f"or credit must be non-zero"
                )

        # --- Enforce balance rule ---
        check = validate_journal_entry(lines)
        if not check.is_valid:
            raise UnbalancedJournalError(check.total_debits, check.total_credits)

        # --- Validate accounts ---
        self.account_service.ensure_chart(owner_id)
        codes = {line.account_code for line in lines}
        accounts = self.account_service.get_accounts_by_code(owner_id, codes)

        missing = codes - set(accounts)
        if missing:
            raise NotFoundError(f"Accounts not found: {sorted(missing)}")

        for account in accounts.values():
            if not account.is_active:
                raise ValidationError(f"Account {account.code} is not active")

        now = datetime.utcnow()
        entry = JournalEntry(
            owner_id=owner_id,
            entry_number=self._new_entry_number(owner_id, now),
            date=date or now,
            description=description,
            status=JournalEntryStatus.POSTED,
            linked_transaction_id=linked_transaction_id,
            linked_payment_id=linked_payment_id,
            linked_document_type=linked_document_type,
            reverses_entry_id=reverses_entry_id,
            posted_at=now,
        )
        for line in lines:
            entry.lines.append(JournalLine(
                account_code=line.account_code,
                account_name=line.account_name or accounts[line.account_code].name,
                debit=to_decimal(line.debit),
                credit=to_decimal(line.credit),
                description=line.description,
            ))

        self.db.add(entry)
        self.db.flush()
        logger.debug(
            "Posted journal entry %s for owner %s (%s)",
            entry.entry_number, owner_id, linked_transaction_id,
        )
        return entry

    def get_entry(self, owner_id: str, journal_id: int) -> JournalEntry:
        entry = self.db.execute(
            select(JournalEntry).where(
                JournalEntry.id == journal_id,
                JournalEntry.owner_id == owner_id,
            )
        ).scalar_one_or_none()
        if not entry:
            raise NotFoundError(f"Journal entry {journal_id} not found")
        return entry

    def get_entries_for_transaction(
        self, owner_id: str, transaction_id: str
    ) -> list[JournalEntry]:
        """Return all journal entries linked to a ledger transaction."""
        entries = self.db.execute(
            select(JournalEntry)
            .where(
                JournalEntry.owner_id == owner_id,
                JournalEntry.linked_transaction_id == transaction_id,
            )
            .order_by(JournalEntry.id)
        ).scalars().all()
        return list(entries)

    def list_entries(
        self, owner_id: str, limit: int | None = None
    ) -> list[JournalEntry]:
        """Return journal entries with their lines, newest first."""
        query = (
            select(JournalEntry)
            .where(JournalEntry.owner_id == owner_id)
            .options(selectinload(JournalEntry.lines))
            .order_by(JournalEntry.date.desc(), JournalEntry.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return list(self.db.execute(query).scalars().all())

    def reverse_entry(
        self, owner_id: str, journal_id: int, description: str | None = None
    ) -> JournalEntry:
        """
        Reverse a posted entry by posting its mirror image.

        The original keeps its lines and is marked REVERSED, so the
        audit trail shows both the mistake and the correction.
        """
        original = self.get_entry(owner_id, journal_id)
        if original.status != JournalEntryStatus.POSTED:
            raise ValidationError(
                f"Can only reverse posted journal entries "
                f"(status: {original.status.value})"
            )

        mirrored = [
            JournalLineIn(
                account_code=line.account_code,
                account_name=line.account_name,
                debit=line.credit,
                credit=line.debit,
                description=line.description,
            )
            for line in original.lines
        ]
        reversal = self.post_entry(
            owner_id,
            description or f"Reversal: {original.description}",
            mirrored,
            linked_transaction_id=original.linked_transaction_id,
            linked_payment_id=original.linked_payment_id,
            linked_document_type=original.linked_document_type,
            reverses_entry_id=original.id,
        )
        original.status = JournalEntryStatus.REVERSED
        original.reversed_by_id = reversal.id
        self.db.flush()
        return reversal

    def get_trial_balance(
        self, owner_id: str, as_of_date: datetime | None = None
    ) -> TrialBalance:
        """
        Aggregate journal lines per account.

        Reversed entries are included together with their
        reversals so they net to zero. Drafts are excluded.
        Balances follow each account's normal side; the
        accumulated depreciation contra-asset is negated.
        """
        self.account_service.ensure_chart(owner_id)
        accounts = {
            a.code: a for a in self.account_service.get_accounts(owner_id)
        }

        query = (
            select(JournalLine)
            .join(JournalEntry)
            .where(
                JournalEntry.owner_id == owner_id,
                JournalEntry.status != JournalEntryStatus.DRAFT,
            )
        )
        if as_of_date is not None:
            query = query.where(JournalEntry.date <= as_of_date)
        lines = self.db.execute(query).scalars().all()

        totals: dict[str, list[Decimal]] = {}
        for line in lines:
            debit_credit = totals.setdefault(line.account_code, [ZERO, ZERO])
            debit_credit[0] += to_decimal(line.debit)
            debit_credit[1] += to_decimal(line.credit)

        balances = []
        total_debits = ZERO
        total_credits = ZERO
        for code in sorted(totals):
            debits, credits = totals[code]
            total_debits += debits
            total_credits += credits
            if debits == 0 and credits == 0:
                continue

            account = accounts.get(code)
            account_type = (
                account.account_type if account
                else get_account_type_from_code(code)
            )
            normal = (
                account.normal_balance if account
                else get_normal_balance(account_type)
            )
            if normal == NormalBalance.DEBIT:
                balance = debits - credits
            else:
                balance = credits - debits
            if is_contra_asset(code):
                balance = -balance

            balances.append(AccountBalance(
                account_code=code,
                account_name=account.name if account else code,
                account_name_ar=account.name_ar if account else code,
                account_type=account_type,
                total_debits=round_currency(debits),
                total_credits=round_currency(credits),
                balance=round_currency(balance),
            ))

        difference = abs(total_debits - total_credits)
        return TrialBalance(
            accounts=balances,
            total_debits=round_currency(total_debits),
            total_credits=round_currency(total_credits),
            is_balanced=difference < settings.ACCOUNTING_TOLERANCE,
            difference=difference,
            as_of_date=as_of_date or datetime.utcnow(),
        )
