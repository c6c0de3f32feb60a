"""
Pydantic schemas for the chart of accounts and activity log.
"""

from datetime import datetime

from pydantic import BaseModel

from factoryflow.models.enums import AccountType, NormalBalance, ActivityAction


class AccountResponse(BaseModel):
    id: int
    code: str
    name: str
    name_ar: str
    account_type: AccountType
    normal_balance: NormalBalance
    parent_code: str | None
    is_active: bool

    model_config = {"from_attributes": True}


class ActivityLogResponse(BaseModel):
    id: int
    user_id: str | None
    action: ActivityAction
    module: str
    target_id: str | None
    description: str
    details: dict | None
    created_at: datetime

    model_config = {"from_attributes": True}
