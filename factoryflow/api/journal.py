"""
Journal API endpoints: balance checks, manual posting,
reversal and the trial balance.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from factoryflow.api.deps import require_permission
from factoryflow.errors import NotFoundError
from factoryflow.models.base import get_db
from factoryflow.models.enums import PermissionAction, PermissionModule
from factoryflow.schemas.journal import (
    JournalEntryCreate,
    JournalEntryResponse,
    JournalValidateRequest,
    JournalValidationResult,
    TrialBalance,
)
from factoryflow.services.journal_service import (
    JournalService,
    validate_journal_entry,
)

router = APIRouter(prefix="/users/{owner_id}/journal", tags=["Journal"])

LEDGER = PermissionModule.LEDGER
REPORTS = PermissionModule.REPORTS


@router.post(
    "/validate",
    response_model=JournalValidationResult,
    dependencies=[Depends(require_permission(LEDGER, PermissionAction.READ))],
)
def validate_lines(owner_id: str, request: JournalValidateRequest):
    """Check whether a set of lines balances. Nothing is stored."""
    return validate_journal_entry(request.lines)


@router.post(
    "",
    response_model=JournalEntryResponse,
    status_code=201,
    dependencies=[Depends(require_permission(LEDGER, PermissionAction.CREATE))],
)
def post_journal_entry(
    owner_id: str,
    request: JournalEntryCreate,
    db: Session = Depends(get_db),
):
    """Post a manual journal entry."""
    service = JournalService(db)
    try:
        entry = service.post_entry(
            owner_id,
            request.description,
            request.lines,
            date=request.date,
            linked_transaction_id=request.linked_transaction_id,
        )
        db.commit()
        return entry
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get(
    "",
    response_model=list[JournalEntryResponse],
    dependencies=[Depends(require_permission(LEDGER, PermissionAction.READ))],
)
def list_journal_entries(
    owner_id: str,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    return JournalService(db).list_entries(owner_id, limit=limit)


@router.get(
    "/trial-balance",
    response_model=TrialBalance,
    dependencies=[Depends(require_permission(REPORTS, PermissionAction.READ))],
)
def get_trial_balance(
    owner_id: str,
    as_of_date: datetime | None = None,
    db: Session = Depends(get_db),
):
    """
    Trial balance from all posted and reversed journal entries.

    Seeds the default chart of accounts on first use.
    """
    service = JournalService(db)
    balance = service.get_trial_balance(owner_id, as_of_date)
    db.commit()
    return balance


@router.get(
    "/{journal_id}",
    response_model=JournalEntryResponse,
    dependencies=[Depends(require_permission(LEDGER, PermissionAction.READ))],
)
def get_journal_entry(
    owner_id: str,
    journal_id: int,
    db: Session = Depends(get_db),
):
    service = JournalService(db)
    try:
        return service.get_entry(owner_id, journal_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post(
    "/{journal_id}/reverse",
    response_model=JournalEntryResponse,
    status_code=201,
    dependencies=[Depends(require_permission(LEDGER, PermissionAction.UPDATE))],
)
def reverse_journal_entry(
    owner_id: str,
    journal_id: int,
    db: Session = Depends(get_db),
):
    """Post the mirror image of a posted entry and mark it reversed."""
    service = JournalService(db)
    try:
        reversal = service.reverse_entry(owner_id, journal_id)
        db.commit()
        return reversal
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
