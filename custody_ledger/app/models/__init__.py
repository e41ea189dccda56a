from .db import StateEntry as StateEntryModel
from .schemas import I128_MAX, I128_MIN, U32_MAX, U64_MAX, CustodyAccount

__all__ = [
    "CustodyAccount",
    "StateEntryModel",
    "I128_MAX",
    "I128_MIN",
    "U32_MAX",
    "U64_MAX",
]
