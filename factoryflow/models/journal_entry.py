"""
Journal entry and journal line models.

A journal entry is one double-entry record: a group of lines
whose debits must equal their credits. The invariant is enforced
by JournalService before anything is written, not by the model.

Posted entries are not edited. A mistake is undone by posting a
reversing entry and marking the original as reversed.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, DateTime, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from factoryflow.models.base import Base
from factoryflow.models.enums import (
    JournalEntryStatus,
    LinkedDocumentType,
    enum_values,
)


class JournalEntry(Base):

    __tablename__ = "journal_entries"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[str] = mapped_column(
        String(128), nullable=False, index=True
    )
    entry_number: Mapped[str] = mapped_column(String(32), nullable=False)
    date: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[JournalEntryStatus] = mapped_column(
        SAEnum(
            JournalEntryStatus,
            name="journal_entry_status_enum",
            values_callable=enum_values,
        ),
        nullable=False,
        default=JournalEntryStatus.POSTED,
    )
    linked_transaction_id: Mapped[str | None] = mapped_column(
        String(32), nullable=True, index=True
    )
    linked_payment_id: Mapped[int | None] = mapped_column(
        nullable=True, index=True
    )
    linked_document_type: Mapped[LinkedDocumentType | None] = mapped_column(
        SAEnum(
            LinkedDocumentType,
            name="linked_document_type_enum",
            values_callable=enum_values,
        ),
        nullable=True,
    )
    reverses_entry_id: Mapped[int | None] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=True
    )
    reversed_by_id: Mapped[int | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    posted_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True
    )

    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.id",
    )

    def __repr__(self) -> str:
        return f"<JournalEntry {self.entry_number} ({self.status.value})>"


class JournalLine(Base):
    """One debit or credit against an account. Exactly one side is non-zero."""

    __tablename__ = "journal_lines"

    id: Mapped[int] = mapped_column(primary_key=True)
    journal_entry_id: Mapped[int] = mapped_column(
        ForeignKey("journal_entries.id"), nullable=False, index=True
    )
    account_code: Mapped[str] = mapped_column(String(20), nullable=False)
    account_name: Mapped[str] = mapped_column(String(100), nullable=False)
    debit: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    credit: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    description: Mapped[str | None] = mapped_column(
        String(500), nullable=True
    )

    journal_entry: Mapped["JournalEntry"] = relationship(
        back_populates="lines"
    )

    def __repr__(self) -> str:
        return (
            f"<JournalLine {self.account_code} "
            f"DR {self.debit} CR {self.credit}>"
        )
