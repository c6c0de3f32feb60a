"""
Activity log model.

Records who did what, per owner. Entries are append-only:
they are never updated or deleted.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, JSON, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from factoryflow.models.base import Base
from factoryflow.models.enums import ActivityAction, enum_values


class ActivityLog(Base):

    __tablename__ = "activity_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[str] = mapped_column(
        String(128), nullable=False, index=True
    )
    user_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    action: Mapped[ActivityAction] = mapped_column(
        SAEnum(
            ActivityAction,
            name="activity_action_enum",
            values_callable=enum_values,
        ),
        nullable=False,
    )
    module: Mapped[str] = mapped_column(String(50), nullable=False)
    target_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
