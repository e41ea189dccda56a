from __future__ import annotations

from sqlmodel import Field, SQLModel


class StateEntry(SQLModel, table=True):
    namespace: str = Field(primary_key=True)
    key: str = Field(primary_key=True)
    value: str
    live_until: int = Field(index=True)
    updated_at: int
