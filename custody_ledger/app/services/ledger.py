from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from ..core.auth import Authenticator
from ..core.config import Settings, get_settings
from ..core.errors import (
    AccountNotFoundError,
    BalanceOverflowError,
    CustodyAbort,
    OutOfRangeError,
)
from ..models import I128_MAX, I128_MIN, CustodyAccount
from .authorization import AuthorizationGate
from .registry import AccountRegistry
from .repository import StateRepository


logger = logging.getLogger(__name__)


class CustodyService:
    """Public custody operations, each run as one all-or-nothing transaction.

    Mutating operations return ``True`` on success and ``False`` for expected
    business rejections (nothing is written in that case). Contract
    violations raise a :class:`CustodyAbort` subclass after the pending
    writes have been rolled back.
    """

    def __init__(
        self,
        repository: StateRepository,
        auth: Authenticator,
        settings: Optional[Settings] = None,
        registry: Optional[AccountRegistry] = None,
        gate: Optional[AuthorizationGate] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.repository = repository
        self.auth = auth
        self.registry = registry or AccountRegistry(
            repository, max_owner_length=self.settings.max_owner_length
        )
        self.gate = gate or AuthorizationGate()

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    @contextmanager
    def _transaction(self, operation: str, owner: Any) -> Iterator[None]:
        try:
            yield
        except Exception as exc:
            self.repository.rollback()
            if isinstance(exc, CustodyAbort):
                logger.warning(
                    f"custody.{operation}.aborted",
                    extra={"owner": owner, "reason": str(exc)},
                )
            raise
        else:
            self.repository.commit()

    def _reject(self, operation: str, owner: str, reason: str, **fields: Any) -> bool:
        logger.info(
            f"custody.{operation}.rejected",
            extra={"owner": owner, "reason": reason, **fields},
        )
        return False

    def _check_amount(self, amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise OutOfRangeError("amount must be an integer")
        if not I128_MIN <= amount <= I128_MAX:
            raise OutOfRangeError(f"amount {amount} does not fit in 128 bits")

    def _get_account(self, owner: str) -> CustodyAccount:
        account = self.registry.find(owner)
        if account is None:
            raise AccountNotFoundError(f"Custody account for {owner!r} not found")
        return account

    def _extend_retention(self) -> None:
        self.repository.extend_lifetime(
            self.settings.retention_min_extent,
            self.settings.retention_target_extent,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def create_custody_account(
        self,
        owner: str,
        required_signatures: int,
        insured: bool,
    ) -> bool:
        with self._transaction("create", owner):
            self.auth.require_caller_is(owner)
            account = self.registry.register(owner, required_signatures, insured)
            if account is None:
                return self._reject(
                    "create", owner, "Custody account already exists for this address"
                )
            self._extend_retention()

        logger.info(
            "custody.account.created",
            extra={
                "owner": owner,
                "required_signatures": account.required_signatures,
                "is_insured": account.is_insured,
            },
        )
        return True

    def deposit_assets(self, owner: str, amount: int) -> bool:
        with self._transaction("deposit", owner):
            self.auth.require_caller_is(owner)
            self._check_amount(amount)
            if amount <= 0:
                return self._reject(
                    "deposit", owner, "Deposit amount must be positive", amount=amount
                )

            account = self._get_account(owner)
            if not account.is_active:
                return self._reject("deposit", owner, "Custody account is not active")

            new_balance = account.balance + amount
            if new_balance > I128_MAX:
                raise BalanceOverflowError(
                    f"Deposit of {amount} would overflow balance {account.balance}"
                )
            account.balance = new_balance
            self.registry.save(account)
            self._extend_retention()

        logger.info(
            "custody.deposit",
            extra={"owner": owner, "amount": amount, "balance": account.balance},
        )
        return True

    def withdraw_assets(self, owner: str, amount: int, signatures_count: int) -> bool:
        with self._transaction("withdraw", owner):
            self.auth.require_caller_is(owner)
            self._check_amount(amount)
            if amount <= 0:
                return self._reject(
                    "withdraw", owner, "Withdrawal amount must be positive", amount=amount
                )

            account = self._get_account(owner)
            if not account.is_active:
                return self._reject("withdraw", owner, "Custody account is not active")

            self.gate.require(account, signatures_count)

            if account.balance < amount:
                return self._reject(
                    "withdraw",
                    owner,
                    "Insufficient balance for withdrawal",
                    amount=amount,
                    balance=account.balance,
                )

            account.balance -= amount
            self.registry.save(account)
            self._extend_retention()

        logger.info(
            "custody.withdraw",
            extra={"owner": owner, "amount": amount, "balance": account.balance},
        )
        return True

    def view_custody_account(self, owner: str) -> CustodyAccount:
        return self.registry.lookup(owner)

    def find_custody_account(self, owner: str) -> Optional[CustodyAccount]:
        return self.registry.find(owner)

    def total_accounts(self) -> int:
        return self.registry.total_accounts()
