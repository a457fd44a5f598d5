"""Holding schemas."""
from pydantic import BaseModel, ConfigDict


class HoldingRead(BaseModel):
    owner: str
    asset_key: str
    balance: int
    program_owned: bool
    is_frozen: bool

    model_config = ConfigDict(from_attributes=True)
