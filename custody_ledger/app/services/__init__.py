from .authorization import AuthorizationGate
from .ledger import CustodyService
from .registry import AccountRegistry
from .repository import StateRepository

__all__ = [
    "AccountRegistry",
    "AuthorizationGate",
    "CustodyService",
    "StateRepository",
]
