"""Domain specific exceptions for checking accounts and withdrawals."""


class CheckingAccountError(Exception):
    """Base class for checking account domain errors."""


class InvalidRequestError(CheckingAccountError):
    """Raised when the caller supplies a malformed request."""


class InvalidAmountError(InvalidRequestError):
    """Raised when a monetary amount is not acceptable for the operation."""


class WithdrawalDeniedError(CheckingAccountError):
    """Business rejection of a withdrawal. Carries a human readable reason."""

    default_reason = "Withdrawal denied"

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason or self.default_reason
        super().__init__(self.reason)


class AccountNotFoundError(WithdrawalDeniedError):
    """Raised when no checking account exists for a user and currency."""

    default_reason = "Account not found"


class InsufficientFundsError(WithdrawalDeniedError):
    """Raised when the balance does not cover the requested amount."""

    default_reason = "Insufficient funds"


class LimitExceededError(WithdrawalDeniedError):
    """Raised when a daily or monthly withdrawal cap would be exceeded."""

    default_reason = "Withdrawal limit exceeded"


class ConcurrencyConflictError(CheckingAccountError):
    """Raised when an optimistic update was attempted against a stale version."""


class PersistenceError(CheckingAccountError):
    """Raised when a store fails for reasons unrelated to business rules."""


class PartialCommitInconsistencyError(PersistenceError):
    """The balance write is durable but its ledger entry is missing."""
