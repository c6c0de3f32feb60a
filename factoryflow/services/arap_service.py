"""
AR/AP service: accounts receivable and payable tracking.

A ledger entry flagged is_arap_entry is an invoice that can be
settled over time. Each payment against it moves total_paid,
remaining_balance and payment_status; deleting the payment moves
them back.

The pure functions at the top hold the arithmetic. ARAPService
applies them to a stored entry and reports the outcome as an
ARAPUpdateResult instead of raising, so the caller can show the
message to the user.
"""

import logging
from decimal import Decimal
from typing import NamedTuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from factoryflow.config import get_settings
from factoryflow.errors import (
    ARAPNotEnabledError,
    DataIntegrityError,
    NotFoundError,
    ValidationError,
)
from factoryflow.models.enums import ArapOperation, PaymentStatus
from factoryflow.models.ledger_entry import LedgerEntry
from factoryflow.schemas.payment import ARAPUpdateResult
from factoryflow.services.money import (
    ZERO,
    round_currency,
    safe_add,
    safe_subtract,
    to_decimal,
    zero_floor,
)

logger = logging.getLogger(__name__)
settings = get_settings()


# --- Pure functions ---

def calculate_payment_status(
    total_paid,
    transaction_amount,
    total_discount=ZERO,
    writeoff_amount=ZERO,
) -> PaymentStatus:
    """
    Derive the payment status from what has been settled so far.

    Settled = payments + settlement discounts + bad-debt write-off.
    Callers must ensure transaction_amount > 0.
    """
    settled = safe_add(safe_add(total_paid, total_discount), writeoff_amount)
    if settled >= round_currency(transaction_amount):
        return PaymentStatus.PAID
    if settled <= 0:
        return PaymentStatus.UNPAID
    return PaymentStatus.PARTIAL


def calculate_remaining_balance(
    transaction_amount,
    total_paid,
    total_discount=ZERO,
    writeoff_amount=ZERO,
) -> Decimal:
    """Amount still owed. Negative when the entry is overpaid."""
    settled = safe_add(safe_add(total_paid, total_discount), writeoff_amount)
    return safe_subtract(transaction_amount, settled)


def validate_payment_amount(amount) -> Decimal:
    """Return the amount as Decimal or raise ValidationError."""
    try:
        value = to_decimal(amount)
    except ArithmeticError:
        raise ValidationError("Payment amount must be a number")
    if not value.is_finite() or value <= 0:
        raise ValidationError("Payment amount must be greater than zero")
    if value > settings.MAX_AMOUNT:
        raise ValidationError("Payment amount is too large")
    return value


class ARAPValues(NamedTuple):
    new_total_paid: Decimal
    new_total_discount: Decimal
    new_remaining_balance: Decimal
    new_status: PaymentStatus


def _floored(value: Decimal, field: str, entry_id=None) -> Decimal:
    if value < 0:
        # A negative total means the same payment was removed twice
        logger.warning(
            "%s would become negative (%s) for ledger entry %s; flooring at 0",
            field, value, entry_id,
        )
        return zero_floor(value)
    return value


def calculate_new_arap_values(
    entry,
    payment_amount,
    operation: ArapOperation,
    discount_amount=ZERO,
) -> ARAPValues:
    """
    Compute an entry's AR/AP fields after adding or removing a payment.

    ``entry`` is anything with amount/total_paid/total_discount/
    writeoff_amount attributes. Totals and the remaining balance are
    floored at zero.
    """
    amount = to_decimal(entry.amount)
    if amount <= 0:
        raise DataIntegrityError(
            "Ledger entry amount must be positive",
            operation="calculate_new_arap_values",
            expected="> 0",
            actual=amount,
            entity_id=getattr(entry, "transaction_id", None),
        )

    current_paid = to_decimal(entry.total_paid)
    current_discount = to_decimal(entry.total_discount)
    writeoff = to_decimal(entry.writeoff_amount)
    entry_id = getattr(entry, "transaction_id", None)

    if operation == ArapOperation.ADD:
        new_paid = safe_add(current_paid, payment_amount)
        new_discount = safe_add(current_discount, discount_amount)
    else:
        new_paid = _floored(
            safe_subtract(current_paid, payment_amount), "total_paid", entry_id
        )
        new_discount = _floored(
            safe_subtract(current_discount, discount_amount),
            "total_discount", entry_id,
        )

    remaining = zero_floor(
        calculate_remaining_balance(amount, new_paid, new_discount, writeoff)
    )
    status = calculate_payment_status(new_paid, amount, new_discount, writeoff)
    return ARAPValues(new_paid, new_discount, remaining, status)


# --- Service ---

class ARAPService:

    def __init__(self, db: Session):
        self.db = db

    def _find_for_update(self, owner_id: str, **criteria) -> LedgerEntry:
        """
        Load an entry and lock its row until the caller commits.

        FOR UPDATE serializes concurrent payments against the same
        entry on databases that support row locks.
        """
        query = select(LedgerEntry).where(
            LedgerEntry.owner_id == owner_id,
            LedgerEntry.is_deleted.is_(False),
        )
        for column, value in criteria.items():
            query = query.where(getattr(LedgerEntry, column) == value)

        entry = self.db.execute(
            query.with_for_update()
        ).scalar_one_or_none()
        if not entry:
            reference = next(iter(criteria.values()))
            raise NotFoundError(
                f"No financial transaction found with id: {reference}"
            )
        if not entry.is_arap_entry:
            raise ARAPNotEnabledError(
                "This transaction is not tracked as receivable/payable"
            )
        return entry

    def _apply(
        self,
        entry: LedgerEntry,
        payment_amount,
        operation: ArapOperation,
        discount_amount=ZERO,
    ) -> ARAPValues:
        values = calculate_new_arap_values(
            entry, payment_amount, operation, discount_amount
        )
        entry.total_paid = values.new_total_paid
        entry.total_discount = values.new_total_discount
        entry.remaining_balance = values.new_remaining_balance
        entry.payment_status = values.new_status
        self.db.flush()
        return values

    def _run(
        self,
        owner_id: str,
        payment_amount,
        operation: ArapOperation,
        discount_amount,
        success_message: str | None,
        **criteria,
    ) -> ARAPUpdateResult:
        try:
            payment_amount = validate_payment_amount(payment_amount)
            discount_amount = to_decimal(discount_amount)
            if discount_amount < 0:
                raise ValidationError("Discount cannot be negative")

            entry = self._find_for_update(owner_id, **criteria)
            values = self._apply(
                entry, payment_amount, operation, discount_amount
            )
        except DataIntegrityError as e:
            logger.error("AR/AP data integrity error: %s", e)
            return ARAPUpdateResult(
                success=False,
                message=(
                    "Data integrity error: the ledger entry is inconsistent. "
                    "The operation may have been duplicated."
                ),
            )
        except ValueError as e:
            logger.info("AR/AP %s rejected: %s", operation.value, e)
            return ARAPUpdateResult(success=False, message=str(e))
        except SQLAlchemyError:
            logger.exception("Error updating AR/AP (%s)", operation.value)
            return ARAPUpdateResult(
                success=False,
                message="An error occurred while updating receivables",
            )

        message = success_message or (
            f"Updated: paid {values.new_total_paid:.2f} - "
            f"remaining {values.new_remaining_balance:.2f}"
        )
        return ARAPUpdateResult(
            success=True,
            message=message,
            new_total_paid=values.new_total_paid,
            new_total_discount=values.new_total_discount,
            new_remaining_balance=values.new_remaining_balance,
            new_status=values.new_status,
        )

    def update_on_payment_add(
        self,
        owner_id: str,
        transaction_id: str,
        payment_amount,
        discount_amount=ZERO,
    ) -> ARAPUpdateResult:
        """Apply a new payment to the ledger entry with this transaction id."""
        return self._run(
            owner_id, payment_amount, ArapOperation.ADD, discount_amount,
            None, transaction_id=transaction_id.strip(),
        )

    def reverse_on_payment_delete(
        self,
        owner_id: str,
        transaction_id: str,
        payment_amount,
        discount_amount=ZERO,
    ) -> ARAPUpdateResult:
        """Undo a deleted payment on the ledger entry with this transaction id."""
        return self._run(
            owner_id, payment_amount, ArapOperation.SUBTRACT, discount_amount,
            "Payment deleted and ledger balance updated",
            transaction_id=transaction_id.strip(),
        )

    def update_entry_by_id(
        self,
        owner_id: str,
        entry_id: int,
        payment_amount,
        operation: ArapOperation,
    ) -> ARAPUpdateResult:
        """Same as the two methods above, addressing the entry by primary key."""
        return self._run(
            owner_id, payment_amount, operation, ZERO, None, id=entry_id,
        )
