"""
Payment API endpoints.

A refused AR/AP update is not an HTTP error: the response body
carries arap.success=false and the message to show the user.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from factoryflow.api.deps import get_user_id, require_permission
from factoryflow.errors import NotFoundError
from factoryflow.models.base import get_db
from factoryflow.models.enums import PermissionAction, PermissionModule
from factoryflow.schemas.payment import PaymentCreate, PaymentResult
from factoryflow.services.payment_service import PaymentService

router = APIRouter(prefix="/users/{owner_id}/payments", tags=["Payments"])

PAYMENTS = PermissionModule.PAYMENTS


@router.post(
    "",
    response_model=PaymentResult,
    dependencies=[Depends(require_permission(PAYMENTS, PermissionAction.CREATE))],
)
def add_payment(
    owner_id: str,
    request: PaymentCreate,
    user_id: str | None = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Record a payment against an AR/AP ledger entry."""
    service = PaymentService(db)
    try:
        result = service.add_payment(owner_id, request, user_id=user_id)
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    if result.arap.success:
        db.commit()
    else:
        db.rollback()
    return result


@router.delete(
    "/{payment_id}",
    response_model=PaymentResult,
    dependencies=[Depends(require_permission(PAYMENTS, PermissionAction.DELETE))],
)
def delete_payment(
    owner_id: str,
    payment_id: int,
    user_id: str | None = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Delete a payment and reverse its effect on the ledger entry."""
    service = PaymentService(db)
    try:
        result = service.delete_payment(owner_id, payment_id, user_id=user_id)
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    if result.arap.success:
        db.commit()
    else:
        db.rollback()
    return result
