from __future__ import annotations

from typing import Optional, Protocol

from .errors import AuthorizationError


class Authenticator(Protocol):
    def require_caller_is(self, identity: str) -> None: ...


class CallerAuth:
    """Checks identities against the party an invocation was authenticated as.

    Proving who the caller is happens upstream; this only enforces that the
    proven caller is the identity an operation acts on behalf of. A missing
    caller fails every check.
    """

    def __init__(self, caller: Optional[str]) -> None:
        self.caller = caller

    def require_caller_is(self, identity: str) -> None:
        if self.caller is None or self.caller != identity:
            raise AuthorizationError(
                f"Caller {self.caller!r} is not authorized to act for {identity!r}"
            )
