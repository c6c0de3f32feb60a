"""
Chart of accounts and activity log endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from factoryflow.api.deps import require_permission
from factoryflow.models.base import get_db
from factoryflow.models.enums import (
    AccountType,
    ActivityAction,
    PermissionAction,
    PermissionModule,
)
from factoryflow.schemas.account import AccountResponse, ActivityLogResponse
from factoryflow.services.account_service import AccountService
from factoryflow.services.activity_log_service import ActivityLogService

router = APIRouter(prefix="/users/{owner_id}", tags=["Accounts"])


@router.get(
    "/accounts",
    response_model=list[AccountResponse],
    dependencies=[Depends(
        require_permission(PermissionModule.LEDGER, PermissionAction.READ)
    )],
)
def list_accounts(
    owner_id: str,
    account_type: AccountType | None = None,
    active_only: bool = False,
    db: Session = Depends(get_db),
):
    """List the owner's chart of accounts, ordered by code."""
    service = AccountService(db)
    return service.get_accounts(
        owner_id, account_type=account_type, active_only=active_only
    )


@router.post(
    "/accounts/seed",
    dependencies=[Depends(
        require_permission(PermissionModule.SETTINGS, PermissionAction.UPDATE)
    )],
)
def seed_accounts(owner_id: str, db: Session = Depends(get_db)):
    """Create any default accounts the owner does not have yet."""
    service = AccountService(db)
    created = service.seed_chart_of_accounts(owner_id)
    db.commit()
    return {"created": created}


@router.get(
    "/activity",
    response_model=list[ActivityLogResponse],
    dependencies=[Depends(
        require_permission(PermissionModule.DASHBOARD, PermissionAction.READ)
    )],
)
def recent_activity(
    owner_id: str,
    limit: int = 50,
    module: str | None = None,
    action: ActivityAction | None = None,
    db: Session = Depends(get_db),
):
    """Latest recorded activities, newest first."""
    service = ActivityLogService(db)
    return service.get_recent_activities(
        owner_id, limit=limit, module=module, action=action
    )
