"""Escrow schemas."""
from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from forge_escrow.models.escrow import AssetKindCode, EscrowStatus
from forge_escrow.services.assets import AssetKind, parse_asset

# Ids and amounts are stored as signed 64-bit SQL integers.
MAX_U63 = 2**63 - 1

Address = Annotated[str, Field(min_length=1, max_length=64)]


class EscrowCreate(BaseModel):
    escrow_id: int = Field(ge=0, le=MAX_U63)
    amount: int = Field(gt=0, le=MAX_U63)
    asset: Literal["native", "token"] = "native"
    token_mint: str | None = Field(default=None, max_length=64)
    arbiter: Address
    recipient: Address
    initiator: Address

    @model_validator(mode="after")
    def _check_token_mint(self) -> "EscrowCreate":
        self.to_asset()
        return self

    def to_asset(self) -> AssetKind:
        return parse_asset(self.asset, self.token_mint)


class EscrowRead(BaseModel):
    id: int
    escrow_id: int
    initiator: str
    recipient: str
    arbiter: str
    amount: int
    released_amount: int
    remaining: int
    asset_kind: AssetKindCode
    token_mint: str | None
    status: EscrowStatus
    vault_address: str
    vault_address_seed: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReleaseRequest(BaseModel):
    percentage: int
    caller: Address


class ReleaseRead(BaseModel):
    escrow_id: int
    gross: int
    net_to_recipient: int
    fee_leg_1: int
    fee_leg_2: int
    dust: int
    released_amount: int
    remaining: int
    status: EscrowStatus


class CancelRequest(BaseModel):
    caller: Address


class CancelRead(BaseModel):
    escrow_id: int
    refunded: int
    status: EscrowStatus


class RemainingRead(BaseModel):
    escrow_id: int
    remaining: int


class EscrowEventRead(BaseModel):
    id: int
    kind: str
    data_json: dict
    at: datetime

    model_config = ConfigDict(from_attributes=True)
