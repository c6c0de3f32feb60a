"""
Data integrity verifier: audits ledger entries against journal entries.

Everything is loaded once and indexed in memory, then checked:
1. Every active ledger entry has at least one journal entry
2. Every journal entry balances
3. No journal entry is left as a draft
4. Each ledger-side journal is dated within a day of its entry
5. No journal points at a transaction id with no ledger entry

The run moves through idle -> loading -> indexing -> verifying ->
complete. If anything raises, the phase goes back to idle and the
exception propagates to the caller.
"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from factoryflow.config import get_settings
from factoryflow.models.enums import (
    DiscrepancyType,
    JournalEntryStatus,
    LinkedDocumentType,
    Severity,
    VerificationPhase,
)
from factoryflow.models.journal_entry import JournalEntry
from factoryflow.models.ledger_entry import LedgerEntry
from factoryflow.schemas.verification import (
    Discrepancy,
    TrialBalanceStatus,
    VerificationProgress,
    VerificationResult,
)
from factoryflow.services.journal_service import validate_journal_entry
from factoryflow.services.money import ZERO, round_currency, to_decimal

logger = logging.getLogger(__name__)
settings = get_settings()

PROGRESS_INTERVAL = 100
DATE_MISMATCH_THRESHOLD = timedelta(days=1)
# Stays under the SQLite bound-parameter limit
IN_CLAUSE_CHUNK = 500

DISCREPANCY_LABELS = {
    DiscrepancyType.MISSING_JOURNAL: "قيد مفقود",
    DiscrepancyType.UNBALANCED_JOURNAL: "قيد غير متوازن",
    DiscrepancyType.ORPHAN_JOURNAL: "قيد يتيم",
    DiscrepancyType.WRONG_STATUS: "حالة خاطئة",
    DiscrepancyType.DATE_MISMATCH: "فرق في التاريخ",
}

ProgressCallback = Callable[[VerificationProgress], None]


def get_discrepancy_label(discrepancy_type: DiscrepancyType) -> str:
    """Arabic display label for a discrepancy type."""
    return DISCREPANCY_LABELS[DiscrepancyType(discrepancy_type)]


def _emit(on_progress: ProgressCallback | None, phase, **kwargs) -> None:
    if on_progress is not None:
        on_progress(VerificationProgress(phase=phase, **kwargs))


def _is_ledger_journal(journal) -> bool:
    # Only the entry's own journal carries the entry date
    return (
        journal.linked_document_type in (None, LinkedDocumentType.LEDGER)
        and journal.reverses_entry_id is None
    )


def _check_entry(entry, journals, tolerance: Decimal) -> list[Discrepancy]:
    if not journals:
        return [Discrepancy(
            type=DiscrepancyType.MISSING_JOURNAL,
            severity=Severity.ERROR,
            transaction_id=entry.transaction_id,
            ledger_description=entry.description,
            message=f"Missing journal entry for transaction: {entry.description}",
        )]

    found = []
    for journal in journals:
        check = validate_journal_entry(journal.lines, tolerance)
        if not check.is_valid:
            found.append(Discrepancy(
                type=DiscrepancyType.UNBALANCED_JOURNAL,
                severity=Severity.ERROR,
                transaction_id=entry.transaction_id,
                journal_id=journal.id,
                expected=check.total_debits,
                actual=check.total_credits,
                message=(
                    f"Unbalanced journal entry: debits "
                    f"{check.total_debits:.2f} != credits "
                    f"{check.total_credits:.2f}"
                ),
            ))

        if journal.status == JournalEntryStatus.DRAFT:
            found.append(Discrepancy(
                type=DiscrepancyType.WRONG_STATUS,
                severity=Severity.WARNING,
                transaction_id=entry.transaction_id,
                journal_id=journal.id,
                message=(
                    f'Journal entry has status "{journal.status.value}" '
                    f'instead of "posted"'
                ),
            ))

        if (
            _is_ledger_journal(journal)
            and abs(journal.date - entry.date) > DATE_MISMATCH_THRESHOLD
        ):
            found.append(Discrepancy(
                type=DiscrepancyType.DATE_MISMATCH,
                severity=Severity.WARNING,
                transaction_id=entry.transaction_id,
                journal_id=journal.id,
                message=(
                    f"Journal dated {journal.date:%Y-%m-%d} but ledger "
                    f"entry dated {entry.date:%Y-%m-%d}"
                ),
            ))
    return found


def _trial_balance_status(journals, tolerance: Decimal) -> TrialBalanceStatus:
    """Balanced when every non-draft journal balances and the totals match."""
    total_debits = ZERO
    total_credits = ZERO
    all_balanced = True
    for journal in journals:
        if journal.status == JournalEntryStatus.DRAFT:
            continue
        check = validate_journal_entry(journal.lines, tolerance)
        all_balanced = all_balanced and check.is_valid
        total_debits += check.total_debits
        total_credits += check.total_credits

    difference = abs(total_debits - total_credits)
    return TrialBalanceStatus(
        is_balanced=all_balanced and difference < tolerance,
        total_debits=round_currency(total_debits),
        total_credits=round_currency(total_credits),
        difference=difference,
    )


def verify_records(
    ledger_entries,
    journal_entries,
    on_progress: ProgressCallback | None = None,
    query_limit: int | None = None,
    tolerance: Decimal | None = None,
) -> VerificationResult:
    """
    Run the integrity checks over already-loaded records.

    ``ledger_entries`` need transaction_id, date, description and
    is_deleted; ``journal_entries`` need id, date, status, lines,
    linked_transaction_id, linked_document_type and
    reverses_entry_id. Deleted ledger entries are not checked but
    still count as known transaction ids, so the reversals of a
    deleted entry are not reported as orphans.
    """
    if query_limit is None:
        query_limit = settings.VERIFICATION_QUERY_LIMIT
    tolerance = to_decimal(
        settings.ACCOUNTING_TOLERANCE if tolerance is None else tolerance
    )

    _emit(on_progress, VerificationPhase.INDEXING,
          message="Indexing journal entries...")
    journals_by_txn = defaultdict(list)
    for journal in journal_entries:
        if journal.linked_transaction_id:
            journals_by_txn[journal.linked_transaction_id].append(journal)

    active = [e for e in ledger_entries if not e.is_deleted]
    total = len(active)
    discrepancies: list[Discrepancy] = []

    for i, entry in enumerate(active):
        if i % PROGRESS_INTERVAL == 0:
            _emit(on_progress, VerificationPhase.VERIFYING,
                  current=i + 1, total=total)
        discrepancies.extend(_check_entry(
            entry, journals_by_txn.get(entry.transaction_id, []), tolerance
        ))
    _emit(on_progress, VerificationPhase.VERIFYING, current=total, total=total)

    known_ids = {e.transaction_id for e in ledger_entries}
    for journal in journal_entries:
        transaction_id = journal.linked_transaction_id
        if transaction_id and transaction_id not in known_ids:
            discrepancies.append(Discrepancy(
                type=DiscrepancyType.ORPHAN_JOURNAL,
                severity=Severity.WARNING,
                transaction_id=transaction_id,
                journal_id=journal.id,
                message="Journal entry has no linked ledger transaction",
            ))

    result = VerificationResult(
        timestamp=datetime.utcnow(),
        ledger_entries_checked=total,
        journal_entries_checked=len(journal_entries),
        discrepancies_found=len(discrepancies),
        discrepancies=discrepancies,
        trial_balance_status=_trial_balance_status(journal_entries, tolerance),
        query_limit_reached=len(ledger_entries) >= query_limit,
    )
    _emit(on_progress, VerificationPhase.COMPLETE,
          message=f"{result.discrepancies_found} discrepancies found")
    return result


class VerificationService:
    """
    Loads an owner's records and runs verify_records over them.

    ``phase`` reflects the current step so a caller polling the
    service can show where a long run is.
    """

    def __init__(self, db: Session):
        self.db = db
        self.phase = VerificationPhase.IDLE

    def _track(self, on_progress: ProgressCallback | None) -> ProgressCallback:
        def callback(progress: VerificationProgress) -> None:
            self.phase = progress.phase
            if on_progress is not None:
                on_progress(progress)
        return callback

    def _load_journals(self, owner_id: str, ledger_entries, limit: int):
        """
        Journals linked to the loaded ledger entries, plus unlinked and
        orphaned ones. Journals of entries beyond the load limit are
        left out so they are not reported as orphans.
        """
        loaded_ids = [e.transaction_id for e in ledger_entries]
        linked = []
        for start in range(0, len(loaded_ids), IN_CLAUSE_CHUNK):
            chunk = loaded_ids[start:start + IN_CLAUSE_CHUNK]
            linked.extend(self.db.execute(
                select(JournalEntry)
                .where(
                    JournalEntry.owner_id == owner_id,
                    JournalEntry.linked_transaction_id.in_(chunk),
                )
                .options(selectinload(JournalEntry.lines))
            ).scalars().all())

        owner_ids = select(LedgerEntry.transaction_id).where(
            LedgerEntry.owner_id == owner_id
        )
        unmatched = self.db.execute(
            select(JournalEntry)
            .where(
                JournalEntry.owner_id == owner_id,
                or_(
                    JournalEntry.linked_transaction_id.is_(None),
                    JournalEntry.linked_transaction_id.not_in(owner_ids),
                ),
            )
            .options(selectinload(JournalEntry.lines))
            .order_by(JournalEntry.date, JournalEntry.id)
            .limit(limit)
        ).scalars().all()

        journals = sorted(linked, key=lambda j: (j.date, j.id)) + list(unmatched)
        return journals, len(unmatched) >= limit

    def verify(
        self,
        owner_id: str,
        on_progress: ProgressCallback | None = None,
    ) -> VerificationResult:
        limit = settings.VERIFICATION_QUERY_LIMIT
        callback = self._track(on_progress)

        try:
            _emit(callback, VerificationPhase.LOADING,
                  message="Loading ledger and journal entries...")
            ledger_entries = self.db.execute(
                select(LedgerEntry)
                .where(LedgerEntry.owner_id == owner_id)
                .order_by(LedgerEntry.date, LedgerEntry.id)
                .limit(limit)
            ).scalars().all()
            journal_entries, unmatched_capped = self._load_journals(
                owner_id, ledger_entries, limit
            )

            result = verify_records(
                ledger_entries, journal_entries, callback, query_limit=limit
            )
        except Exception:
            self.phase = VerificationPhase.IDLE
            logger.exception("Data integrity verification failed for %s", owner_id)
            raise

        if unmatched_capped:
            result.query_limit_reached = True
        if result.query_limit_reached:
            logger.warning(
                "Verification for %s hit the %d record limit; "
                "results may be incomplete", owner_id, limit,
            )
        logger.info(
            "Verified %d ledger / %d journal entries for %s: %d discrepancies",
            result.ledger_entries_checked, result.journal_entries_checked,
            owner_id, result.discrepancies_found,
        )
        return result
