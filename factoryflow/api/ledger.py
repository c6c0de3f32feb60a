"""
Ledger API endpoints.

The API layer is thin: it maps service errors to status codes
and owns the commit. All business rules live in LedgerService.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from factoryflow.api.deps import get_user_id, require_permission
from factoryflow.errors import NotFoundError
from factoryflow.models.base import get_db
from factoryflow.models.enums import (
    PaymentStatus,
    PermissionAction,
    PermissionModule,
)
from factoryflow.schemas.journal import JournalEntryResponse
from factoryflow.schemas.ledger import (
    LedgerEntryCreate,
    LedgerEntryResponse,
    WriteOffCreate,
)
from factoryflow.schemas.payment import PaymentResponse
from factoryflow.services.journal_service import JournalService
from factoryflow.services.ledger_service import LedgerService
from factoryflow.services.payment_service import PaymentService

router = APIRouter(prefix="/users/{owner_id}/ledger", tags=["Ledger"])

LEDGER = PermissionModule.LEDGER


@router.post(
    "",
    response_model=LedgerEntryResponse,
    status_code=201,
    dependencies=[Depends(require_permission(LEDGER, PermissionAction.CREATE))],
)
def create_ledger_entry(
    owner_id: str,
    request: LedgerEntryCreate,
    user_id: str | None = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """
    Record an income, expense or capital movement.

    The entry and its journal entry are committed together.
    """
    service = LedgerService(db)
    try:
        entry = service.create_entry(owner_id, request, user_id=user_id)
        db.commit()
        return entry
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get(
    "",
    response_model=list[LedgerEntryResponse],
    dependencies=[Depends(require_permission(LEDGER, PermissionAction.READ))],
)
def list_ledger_entries(
    owner_id: str,
    include_deleted: bool = False,
    payment_status: PaymentStatus | None = None,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    """List ledger entries, newest first."""
    service = LedgerService(db)
    return service.list_entries(
        owner_id,
        include_deleted=include_deleted,
        payment_status=payment_status,
        limit=limit,
    )


@router.get(
    "/{transaction_id}",
    response_model=LedgerEntryResponse,
    dependencies=[Depends(require_permission(LEDGER, PermissionAction.READ))],
)
def get_ledger_entry(
    owner_id: str,
    transaction_id: str,
    db: Session = Depends(get_db),
):
    service = LedgerService(db)
    try:
        return service.get_entry(owner_id, transaction_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get(
    "/{transaction_id}/journal",
    response_model=list[JournalEntryResponse],
    dependencies=[Depends(require_permission(LEDGER, PermissionAction.READ))],
)
def get_ledger_entry_journals(
    owner_id: str,
    transaction_id: str,
    db: Session = Depends(get_db),
):
    """Journal entries posted for this transaction, oldest first."""
    return JournalService(db).get_entries_for_transaction(
        owner_id, transaction_id
    )


@router.get(
    "/{transaction_id}/payments",
    response_model=list[PaymentResponse],
    dependencies=[Depends(require_permission(LEDGER, PermissionAction.READ))],
)
def get_ledger_entry_payments(
    owner_id: str,
    transaction_id: str,
    db: Session = Depends(get_db),
):
    return PaymentService(db).get_payments_for_transaction(
        owner_id, transaction_id
    )


@router.delete(
    "/{transaction_id}",
    response_model=LedgerEntryResponse,
    dependencies=[Depends(require_permission(LEDGER, PermissionAction.DELETE))],
)
def delete_ledger_entry(
    owner_id: str,
    transaction_id: str,
    user_id: str | None = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """
    Soft-delete an entry and reverse its journal entries.

    Entries with recorded payments are refused.
    """
    service = LedgerService(db)
    try:
        entry = service.soft_delete_entry(
            owner_id, transaction_id, user_id=user_id
        )
        db.commit()
        return entry
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.post(
    "/{transaction_id}/write-off",
    response_model=LedgerEntryResponse,
    dependencies=[Depends(require_permission(LEDGER, PermissionAction.UPDATE))],
)
def write_off_bad_debt(
    owner_id: str,
    transaction_id: str,
    request: WriteOffCreate,
    user_id: str | None = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Write off part or all of a receivable as uncollectible."""
    service = LedgerService(db)
    try:
        entry = service.write_off_bad_debt(
            owner_id, transaction_id, request, user_id=user_id
        )
        db.commit()
        return entry
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
