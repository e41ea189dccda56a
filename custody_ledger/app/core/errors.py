from __future__ import annotations

from typing import Optional


class CustodyAbort(Exception):
    """Base class for failures that abort the whole operation.

    Anything raised from this hierarchy rolls back the pending transaction.
    Expected business outcomes (duplicate account, bad amount, inactive
    account, insufficient balance) are reported as ``False`` instead.
    """

    reason = "custody operation aborted"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.reason)


class AuthorizationError(CustodyAbort):
    """Raised when the invoking party is not the identity it acts for."""

    reason = "caller is not authorized for this identity"


class InvalidOwnerError(CustodyAbort):
    """Raised when an owner identity cannot be used as a registry key."""

    reason = "invalid owner identity"


class InvalidThresholdError(CustodyAbort):
    """Raised when an account is created with fewer than two signers."""

    reason = "multi-signature requires at least 2 signatures"


class OutOfRangeError(CustodyAbort):
    """Raised when an integer argument does not fit its declared width."""

    reason = "value out of range"


class AccountNotFoundError(CustodyAbort):
    """Raised when a deposit or withdrawal targets a missing account."""

    reason = "custody account not found"


class InsufficientSignaturesError(CustodyAbort):
    """Raised when a withdrawal carries fewer signatures than required."""

    reason = "multi-signature verification failed"

    def __init__(self, required: int, provided: int) -> None:
        super().__init__(
            f"{self.reason}: required {required}, provided {provided}"
        )
        self.required = required
        self.provided = provided


class BalanceOverflowError(CustodyAbort):
    """Raised when a balance or counter would leave its integer range."""

    reason = "arithmetic overflow"


class StateArchivedError(CustodyAbort):
    """Raised when a stored entry is read after its retention window."""

    reason = "state entry has expired"
