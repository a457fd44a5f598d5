"""Asset kinds an escrow can hold."""
from __future__ import annotations

from dataclasses import dataclass
from typing import assert_never

from forge_escrow.models.escrow import AssetKindCode, EscrowRecord
from forge_escrow.models.holding import NATIVE_ASSET_KEY


@dataclass(frozen=True)
class Native:
    """The chain-native coin."""


@dataclass(frozen=True)
class Token:
    """A fungible token identified by its mint."""

    mint: str

    def __post_init__(self) -> None:
        if not self.mint or self.mint == NATIVE_ASSET_KEY:
            raise ValueError(f"invalid token mint: {self.mint!r}")


AssetKind = Native | Token


def asset_key(asset: AssetKind) -> str:
    """Ledger key under which holdings of ``asset`` are stored."""

    match asset:
        case Native():
            return NATIVE_ASSET_KEY
        case Token(mint=mint):
            return mint
        case _:
            assert_never(asset)


def to_columns(asset: AssetKind) -> tuple[AssetKindCode, str | None]:
    match asset:
        case Native():
            return AssetKindCode.NATIVE, None
        case Token(mint=mint):
            return AssetKindCode.TOKEN, mint
        case _:
            assert_never(asset)


def from_record(record: EscrowRecord) -> AssetKind:
    """Rebuild the asset kind persisted on ``record``."""

    match record.asset_kind:
        case AssetKindCode.NATIVE:
            return Native()
        case AssetKindCode.TOKEN:
            if not record.token_mint:
                raise ValueError(f"token escrow {record.escrow_id} has no token mint")
            return Token(record.token_mint)
        case _:
            assert_never(record.asset_kind)


def parse_asset(kind: str, token_mint: str | None = None) -> AssetKind:
    """Build an asset kind from its wire form (``"native"`` or ``"token"``)."""

    normalized = kind.strip().lower()
    if normalized == "native":
        if token_mint:
            raise ValueError("native escrows do not take a token mint")
        return Native()
    if normalized == "token":
        if not token_mint:
            raise ValueError("token escrows require a token mint")
        return Token(token_mint)
    raise ValueError(f"unknown asset kind: {kind!r}")


__all__ = ["Native", "Token", "AssetKind", "asset_key", "to_columns", "from_record", "parse_asset"]
