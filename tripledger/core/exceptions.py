"""
Domain exceptions for the splitting and settlement core.

EmptyParticipants, NegativeAmount and InvalidSplits are raised at the
boundary where the bad input is detected. SplitMismatch and
BalanceInconsistency describe data-quality problems: the core corrects or
reports them and keeps going, so they are handed back to callers as
values rather than raised.
"""
from decimal import Decimal


class LedgerError(Exception):
    """Base exception for splitting and settlement errors."""
    pass


class EmptyParticipants(LedgerError):
    """Raised when an amount has to be split among nobody."""

    def __init__(self, message="Cannot split an amount among zero participants"):
        super().__init__(message)


class NegativeAmount(LedgerError):
    """Raised when an expense amount or a share is below zero."""

    def __init__(self, amount, what="amount"):
        self.amount = amount
        super().__init__(f"{what} must not be negative, got {amount}")


class InvalidSplits(LedgerError):
    """Raised when user supplied custom shares cannot be stored."""
    pass


class SplitMismatch(LedgerError):
    """Stored shares of an expense do not add up to its amount."""

    def __init__(self, expense_id, expected: Decimal, actual: Decimal):
        self.expense_id = expense_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Splits of expense {expense_id} sum to {actual}, expected {expected}"
        )


class BalanceInconsistency(LedgerError):
    """Total credits and total debits of a balance sheet do not cancel out."""

    def __init__(self, credits: Decimal, debits: Decimal):
        self.credits = credits
        self.debits = debits
        self.difference = credits - debits
        super().__init__(
            f"Credits {credits} and debits {debits} differ by {self.difference}"
        )

    def as_dict(self):
        return {
            "credits": str(self.credits),
            "debits": str(self.debits),
            "difference": str(self.difference),
            "message": str(self),
        }
