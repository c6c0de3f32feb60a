"""
Exception types raised by the accounting services.

Every error derives from ValueError so the API layer can keep
a single ``except ValueError`` branch per endpoint. The subclasses
let callers tell a missing record from a bad input when they care.
"""


class ValidationError(ValueError):
    """An input field is missing or out of bounds."""


class NotFoundError(ValueError):
    """A referenced ledger, journal or payment record does not exist."""


class ARAPNotEnabledError(ValueError):
    """The ledger entry is not tracked as a receivable/payable."""


class UnbalancedJournalError(ValueError):
    """Journal lines do not balance (debits != credits)."""

    def __init__(self, total_debits, total_credits):
        self.total_debits = total_debits
        self.total_credits = total_credits
        super().__init__(
            f"Journal entry does not balance: "
            f"debits={total_debits}, credits={total_credits}"
        )


class DataIntegrityError(ValueError):
    """
    Stored data would end up in an impossible state.

    Carries the operation name and the expected/actual values
    so the log line explains what went wrong.
    """

    def __init__(
        self,
        message: str,
        operation: str,
        expected=None,
        actual=None,
        entity_id: str | None = None,
    ):
        self.operation = operation
        self.expected = expected
        self.actual = actual
        self.entity_id = entity_id
        super().__init__(message)

    def __str__(self) -> str:
        entity = f" [{self.entity_id}]" if self.entity_id else ""
        return (
            f"{self.args[0]}{entity} | operation: {self.operation}, "
            f"expected: {self.expected}, actual: {self.actual}"
        )
