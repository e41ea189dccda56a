from __future__ import annotations

import logging

from ..core.errors import InsufficientSignaturesError, OutOfRangeError
from ..models import U32_MAX, CustodyAccount


logger = logging.getLogger(__name__)


class AuthorizationGate:
    """Multi-signature threshold check for releasing funds.

    The signature count is trusted as given; collecting and verifying the
    signatures themselves happens before the call reaches the ledger.
    """

    def require(self, account: CustodyAccount, signatures_count: int) -> None:
        if isinstance(signatures_count, bool) or not isinstance(signatures_count, int):
            raise OutOfRangeError("signatures_count must be an integer")
        if not 0 <= signatures_count <= U32_MAX:
            raise OutOfRangeError(
                f"signatures_count {signatures_count} is outside 0..{U32_MAX}"
            )

        if signatures_count < account.required_signatures:
            logger.warning(
                "custody.withdraw.unauthorized",
                extra={
                    "owner": account.owner,
                    "required_signatures": account.required_signatures,
                    "signatures_count": signatures_count,
                },
            )
            raise InsufficientSignaturesError(
                required=account.required_signatures,
                provided=signatures_count,
            )
