import pytest

from forge_escrow.models import AssetKindCode, EscrowRecord
from forge_escrow.services.assets import Native, Token, asset_key, from_record, parse_asset, to_columns


def test_asset_keys():
    assert asset_key(Native()) == "native"
    assert asset_key(Token("FORGEmint")) == "FORGEmint"


def test_to_columns():
    assert to_columns(Native()) == (AssetKindCode.NATIVE, None)
    assert to_columns(Token("FORGEmint")) == (AssetKindCode.TOKEN, "FORGEmint")


def test_parse_asset_accepts_wire_forms():
    assert parse_asset("native") == Native()
    assert parse_asset("Token", "FORGEmint") == Token("FORGEmint")


@pytest.mark.parametrize(
    ("kind", "mint"),
    [("token", None), ("native", "FORGEmint"), ("nft", None), ("token", "native")],
)
def test_parse_asset_rejects_inconsistent_input(kind, mint):
    with pytest.raises(ValueError):
        parse_asset(kind, mint)


def test_from_record_round_trips_columns():
    native = EscrowRecord(escrow_id=1, asset_kind=AssetKindCode.NATIVE, token_mint=None)
    token = EscrowRecord(escrow_id=2, asset_kind=AssetKindCode.TOKEN, token_mint="FORGEmint")

    assert from_record(native) == Native()
    assert from_record(token) == Token("FORGEmint")


def test_from_record_rejects_token_row_without_mint():
    record = EscrowRecord(escrow_id=3, asset_kind=AssetKindCode.TOKEN, token_mint=None)

    with pytest.raises(ValueError, match="no token mint"):
        from_record(record)
