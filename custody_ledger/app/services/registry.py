from __future__ import annotations

import logging
from typing import Optional

from ..core.errors import (
    BalanceOverflowError,
    InvalidOwnerError,
    InvalidThresholdError,
    OutOfRangeError,
)
from ..models import U32_MAX, U64_MAX, CustodyAccount
from .repository import StateRepository


logger = logging.getLogger(__name__)

ACCOUNT_PREFIX = "account"
KEY_DELIMITER = ":"
TOTAL_ACCOUNTS_KEY = "TOT_ACC"
MIN_REQUIRED_SIGNATURES = 2


def account_key(owner: str) -> str:
    return f"{ACCOUNT_PREFIX}{KEY_DELIMITER}{owner}"


class AccountRegistry:
    """Owner-keyed custody accounts and the global account counter."""

    def __init__(self, repository: StateRepository, max_owner_length: int = 256) -> None:
        self.repository = repository
        self.max_owner_length = max_owner_length

    def validate_owner(self, owner: str) -> str:
        if not isinstance(owner, str) or not owner.strip():
            raise InvalidOwnerError("Owner identity must be a non-empty string")
        if KEY_DELIMITER in owner:
            raise InvalidOwnerError(f"Illegal delimiter {KEY_DELIMITER!r} in owner identity")
        if len(owner) > self.max_owner_length:
            raise InvalidOwnerError(
                f"Owner identity is too long ({len(owner)}). Max is {self.max_owner_length}."
            )
        return owner

    # Reads ---------------------------------------------------------------
    def find(self, owner: str) -> Optional[CustodyAccount]:
        data = self.repository.get(account_key(self.validate_owner(owner)))
        if data is None:
            return None
        return CustodyAccount.model_validate(data)

    def lookup(self, owner: str) -> CustodyAccount:
        account = self.find(owner)
        if account is None:
            return CustodyAccount.missing(owner)
        return account

    def total_accounts(self) -> int:
        return self.repository.get(TOTAL_ACCOUNTS_KEY) or 0

    # Writes --------------------------------------------------------------
    def save(self, account: CustodyAccount) -> None:
        self.repository.set(account_key(account.owner), account.model_dump(mode="json"))

    def register(
        self,
        owner: str,
        required_signatures: int,
        insured: bool,
    ) -> Optional[CustodyAccount]:
        """Create and persist a new account.

        Returns ``None`` without writing anything when ``owner`` already has
        an account. A threshold below two is a contract violation and raises.
        """
        if self.find(owner) is not None:
            return None

        if isinstance(required_signatures, bool) or not isinstance(required_signatures, int):
            raise OutOfRangeError("required_signatures must be an integer")
        if required_signatures < MIN_REQUIRED_SIGNATURES:
            raise InvalidThresholdError(
                f"Minimum {MIN_REQUIRED_SIGNATURES} signatures required, got {required_signatures}"
            )
        if required_signatures > U32_MAX:
            raise OutOfRangeError(
                f"required_signatures {required_signatures} exceeds {U32_MAX}"
            )

        account = CustodyAccount(
            owner=owner,
            balance=0,
            required_signatures=required_signatures,
            is_insured=bool(insured),
            is_active=True,
        )
        self.save(account)
        self._increment_total()
        return account

    def _increment_total(self) -> int:
        total = self.total_accounts()
        if total >= U64_MAX:
            raise BalanceOverflowError("Total accounts counter overflow")
        total += 1
        self.repository.set(TOTAL_ACCOUNTS_KEY, total)
        logger.debug("custody.total_accounts", extra={"total_accounts": total})
        return total
