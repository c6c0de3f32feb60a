"""
Account service: manages each owner's chart of accounts.

An owner's chart is seeded from DEFAULT_ACCOUNTS the first time
anything needs it. Seeding is idempotent: existing codes are
left untouched, missing ones are added.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from factoryflow.models.account import Account
from factoryflow.models.enums import AccountType
from factoryflow.services.chart_of_accounts import (
    DEFAULT_ACCOUNTS,
    get_normal_balance,
)

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(self, db: Session):
        self.db = db

    def seed_chart_of_accounts(self, owner_id: str) -> int:
        """Add any default accounts the owner is missing. Returns how many."""
        existing_codes = set(self.db.execute(
            select(Account.code).where(Account.owner_id == owner_id)
        ).scalars().all())

        created = 0
        for definition in DEFAULT_ACCOUNTS:
            if definition.code in existing_codes:
                continue
            self.db.add(Account(
                owner_id=owner_id,
                code=definition.code,
                name=definition.name,
                name_ar=definition.name_ar,
                account_type=definition.account_type,
                normal_balance=get_normal_balance(definition.account_type),
                parent_code=definition.parent_code,
                description=definition.description,
            ))
            created += 1

        if created:
            self.db.flush()
            logger.info(
                "Seeded %d chart of accounts entries for owner %s",
                created, owner_id,
            )
        return created

    def ensure_chart(self, owner_id: str) -> None:
        """Seed the default chart if the owner has no accounts at all."""
        has_accounts = self.db.execute(
            select(Account.id).where(Account.owner_id == owner_id).limit(1)
        ).scalar_one_or_none()
        if has_accounts is None:
            self.seed_chart_of_accounts(owner_id)

    def get_accounts(
        self,
        owner_id: str,
        account_type: AccountType | None = None,
        active_only: bool = False,
    ) -> list[Account]:
        """Return the owner's accounts ordered by code."""
        query = select(Account).where(Account.owner_id == owner_id)
        if account_type is not None:
            query = query.where(Account.account_type == account_type)
        if active_only:
            query = query.where(Account.is_active.is_(True))
        accounts = self.db.execute(
            query.order_by(Account.code)
        ).scalars().all()
        return list(accounts)

    def get_accounts_by_code(
        self, owner_id: str, codes
    ) -> dict[str, Account]:
        accounts = self.db.execute(
            select(Account).where(
                Account.owner_id == owner_id,
                Account.code.in_(set(codes)),
            )
        ).scalars().all()
        return {a.code: a for a in accounts}
