"""
Activity log service.

Logging an activity must never break the operation being logged.
The insert runs inside a savepoint; on a database error the
savepoint is rolled back, the error goes to the log and the
caller carries on.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from factoryflow.models.activity_log import ActivityLog
from factoryflow.models.enums import ActivityAction

logger = logging.getLogger(__name__)


class ActivityLogService:

    def __init__(self, db: Session):
        self.db = db

    def log_activity(
        self,
        owner_id: str,
        action: ActivityAction,
        module: str,
        description: str,
        user_id: str | None = None,
        target_id: str | None = None,
        details: dict | None = None,
    ) -> None:
        """Record an activity. Never raises on database errors."""
        try:
            with self.db.begin_nested():
                self.db.add(ActivityLog(
                    owner_id=owner_id,
                    user_id=user_id,
                    action=action,
                    module=module,
                    target_id=target_id,
                    description=description,
                    details=details,
                ))
        except SQLAlchemyError:
            logger.exception(
                "Error logging activity %s/%s for owner %s",
                module, action.value, owner_id,
            )

    def get_recent_activities(
        self,
        owner_id: str,
        limit: int = 50,
        module: str | None = None,
        action: ActivityAction | None = None,
    ) -> list[ActivityLog]:
        """Return the owner's latest activities, newest first."""
        query = select(ActivityLog).where(ActivityLog.owner_id == owner_id)
        if module is not None:
            query = query.where(ActivityLog.module == module)
        if action is not None:
            query = query.where(ActivityLog.action == action)
        query = query.order_by(
            ActivityLog.created_at.desc(), ActivityLog.id.desc()
        ).limit(limit)
        return list(self.db.execute(query).scalars().all())
