"""Application configuration settings."""
from __future__ import annotations

import os
from functools import lru_cache

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Runtime toggles -----------------------------------------------------
# Execution environment: "dev" | "staging" | "prod"
ENV = os.getenv("FORGE_ENV", "dev").lower()

DEFAULT_PROGRAM_ID = "7UMWhVX2ZpqLa1iWqUM1tJz6LjRYWQ1oheZpuMtQKxs1"


class Settings(BaseSettings):
    """Environment configuration for the escrow service."""

    app_env: str = ENV
    database_url: str = "sqlite:///forge_escrow.db"
    API_KEY: str = Field(
        default="dev-secret-key",
        validation_alias=AliasChoices("API_KEY", "DEV_API_KEY"),
    )
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: list[str] = ["http://localhost:3000"]
    SENTRY_DSN: str | None = None
    PROMETHEUS_ENABLED: bool = True
    ALLOW_DB_CREATE_ALL: bool = False

    # --- Escrow program ----------------------------------------------------
    ESCROW_PROGRAM_ID: str = DEFAULT_PROGRAM_ID
    VAULT_SEED_TAG: str = "escrow"
    FEE_WALLET: str = "fee-wallet"
    # Receives the second fee half until the conversion step exists.
    HOLDING_WALLET: str = "temp-fee-wallet"

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="", env_file_encoding="utf-8"
    )

    @field_validator("ESCROW_PROGRAM_ID", "VAULT_SEED_TAG", "FEE_WALLET", "HOLDING_WALLET")
    @classmethod
    def _require_non_blank(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("must not be blank")
        return cleaned


class ProgramConfig(BaseModel):
    """Identity and fee destinations handed to the escrow controller."""

    program_id: str
    vault_seed_tag: str = "escrow"
    fee_wallet: str
    holding_wallet: str

    model_config = ConfigDict(frozen=True)


class AppInfo(BaseModel):
    name: str = "forge-escrow"
    version: str = "0.1.0"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()


def get_program_config(settings: Settings | None = None) -> ProgramConfig:
    """Build the controller configuration from the runtime settings."""

    settings = settings or get_settings()
    return ProgramConfig(
        program_id=settings.ESCROW_PROGRAM_ID,
        vault_seed_tag=settings.VAULT_SEED_TAG,
        fee_wallet=settings.FEE_WALLET,
        holding_wallet=settings.HOLDING_WALLET,
    )


__all__ = [
    "ENV",
    "DEFAULT_PROGRAM_ID",
    "Settings",
    "ProgramConfig",
    "AppInfo",
    "get_settings",
    "get_program_config",
]
