"""Fee split applied to every escrow release."""
from __future__ import annotations

from dataclasses import dataclass

# Share of each release withheld as fees, in percent.
TOTAL_FEE_PERCENT = 10


@dataclass(frozen=True)
class FeeSplit:
    """Destination amounts for one gross release.

    ``fee_a`` goes to the fee wallet, ``fee_b`` to the holding wallet. Both
    halves are floored, so an odd total fee leaves one unit of ``dust`` behind
    in the vault.
    """

    gross: int
    net: int
    fee_a: int
    fee_b: int

    @property
    def total_fee(self) -> int:
        return self.gross - self.net

    @property
    def dust(self) -> int:
        return self.gross - self.net - self.fee_a - self.fee_b

    def legs(self) -> tuple[int, int, int]:
        return self.net, self.fee_a, self.fee_b


def fee_split(gross: int) -> FeeSplit:
    """Split ``gross`` into the recipient's net share and two fee halves."""

    if gross < 0:
        raise ValueError(f"gross release amount must be non-negative, got {gross}")
    total_fee = gross * TOTAL_FEE_PERCENT // 100
    half_fee = total_fee // 2
    return FeeSplit(gross=gross, net=gross - total_fee, fee_a=half_fee, fee_b=half_fee)


def gross_release(remaining: int, percentage: int) -> int:
    """Pre-fee amount released when ``percentage`` of ``remaining`` is paid out."""

    return remaining * percentage // 100


__all__ = ["TOTAL_FEE_PERCENT", "FeeSplit", "fee_split", "gross_release"]
