"""
Ledger entry model.

A ledger entry is the business record a user types in: income,
an expense, or a capital movement. When it is tracked as a
receivable/payable (is_arap_entry), payments against it update
total_paid, remaining_balance and payment_status.

Entries are never deleted. Removing one sets is_deleted and
reverses its journal entries.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Boolean, DateTime, Numeric, UniqueConstraint,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column

from factoryflow.models.base import Base
from factoryflow.models.enums import (
    TransactionType,
    PaymentStatus,
    enum_values,
)


class LedgerEntry(Base):

    __tablename__ = "ledger_entries"
    __table_args__ = (
        UniqueConstraint(
            "owner_id", "transaction_id",
            name="uq_ledger_entries_owner_transaction",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[str] = mapped_column(
        String(128), nullable=False, index=True
    )
    transaction_id: Mapped[str] = mapped_column(
        String(32), nullable=False, index=True
    )
    date: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    type: Mapped[TransactionType] = mapped_column(
        SAEnum(
            TransactionType,
            name="transaction_type_enum",
            values_callable=enum_values,
        ),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    subcategory: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    associated_party: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    description: Mapped[str] = mapped_column(String(500), nullable=False)

    # --- AR/AP tracking ---
    is_arap_entry: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    total_paid: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    total_discount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    writeoff_amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    writeoff_reason: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    remaining_balance: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        SAEnum(
            PaymentStatus,
            name="payment_status_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        default=PaymentStatus.UNPAID,
    )

    is_deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry {self.transaction_id} {self.type.value} "
            f"{self.amount} ({self.payment_status.value})>"
        )
