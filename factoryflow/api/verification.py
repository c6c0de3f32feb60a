"""
Data integrity verification endpoint.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from factoryflow.api.deps import require_permission
from factoryflow.models.base import get_db
from factoryflow.models.enums import PermissionAction, PermissionModule
from factoryflow.schemas.verification import VerificationResult
from factoryflow.services.verification_service import VerificationService

router = APIRouter(prefix="/users/{owner_id}", tags=["Verification"])


@router.post(
    "/verification",
    response_model=VerificationResult,
    dependencies=[Depends(
        require_permission(PermissionModule.REPORTS, PermissionAction.READ)
    )],
)
def run_verification(owner_id: str, db: Session = Depends(get_db)):
    """
    Audit every ledger entry against its journal entries.

    Read-only. Large books are capped at the configured query
    limit, reported as query_limit_reached.
    """
    return VerificationService(db).verify(owner_id)
