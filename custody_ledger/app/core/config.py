from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Custody Ledger"
    database_url: str = "sqlite:///custody_ledger.db"
    log_level: str = "INFO"

    contract_namespace: str = Field(default="custody", min_length=1)
    # Retention windows are expressed in seconds.
    retention_min_extent: int = Field(default=5000, ge=1)
    retention_target_extent: int = Field(default=5000, ge=1)
    max_owner_length: int = Field(default=256, ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CUSTODY_",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_retention(self) -> "Settings":
        if self.retention_target_extent < self.retention_min_extent:
            raise ValueError(
                "retention_target_extent must be >= retention_min_extent"
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
