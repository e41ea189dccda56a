from pydantic import BaseModel, Field

I128_MIN = -(2**127)
I128_MAX = 2**127 - 1
U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1


class CustodyAccount(BaseModel):
    owner: str = Field(..., min_length=1, description="Identity of the account holder")
    balance: int = Field(
        default=0, ge=0, le=I128_MAX, description="Custodied asset units"
    )
    required_signatures: int = Field(
        default=0, ge=0, le=U32_MAX, description="Signatures needed to withdraw"
    )
    is_insured: bool = False
    is_active: bool = False

    @classmethod
    def missing(cls, owner: str) -> "CustodyAccount":
        """Zero-valued record reported for owners with no account."""
        return cls(owner=owner)
