"""Keyless custody vaults and the signers allowed to move funds."""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import ClassVar

from forge_escrow.config import ProgramConfig
from forge_escrow.models.escrow import EscrowRecord
from forge_escrow.models.holding import Holding
from forge_escrow.utils.errors import TransferFailure

# Domain separator mixed into every derived address.
_DERIVATION_MARKER = b"ForgeEscrowDerivedAddress"


@dataclass(frozen=True)
class VaultAddress:
    address: str
    seed: str


def vault_seed(tag: str, escrow_id: int) -> bytes:
    """Derivation input for ``escrow_id``: namespace tag then the id as 8 LE bytes."""

    return tag.encode("utf-8") + escrow_id.to_bytes(8, "little")


def derive_vault(program_id: str, tag: str, escrow_id: int) -> VaultAddress:
    """Compute the custody vault address of ``escrow_id``.

    The address is a pure function of its inputs and no private key exists for
    it; only code holding the same program id and tag can re-derive it.
    """

    seed = vault_seed(tag, escrow_id)
    digest = hashlib.sha256(seed + program_id.encode("utf-8") + _DERIVATION_MARKER).hexdigest()
    return VaultAddress(address=digest, seed=seed.hex())


@dataclass(frozen=True)
class PrincipalSigner:
    """An external principal authorising debits from its own holdings."""

    address: str
    # Namespace of the holdings this signer debits.
    program_owned: ClassVar[bool] = False

    def authorizes(self, holding: Holding) -> bool:
        return not holding.program_owned and holding.authority == self.address


@dataclass(frozen=True)
class VaultSigner:
    """Capability to debit one custody vault, obtained only by re-derivation."""

    address: str
    seed: str
    program_owned: ClassVar[bool] = True

    @classmethod
    def for_escrow(cls, config: ProgramConfig, record: EscrowRecord) -> VaultSigner:
        derived = derive_vault(config.program_id, config.vault_seed_tag, record.escrow_id)
        if derived.address != record.vault_address or derived.seed != record.vault_address_seed:
            raise TransferFailure(
                "Vault derivation does not match the escrow record.",
                details={"escrow_id": record.escrow_id},
            )
        return cls(address=derived.address, seed=derived.seed)

    def authorizes(self, holding: Holding) -> bool:
        return holding.program_owned and holding.authority == self.address and holding.owner == self.address


Signer = PrincipalSigner | VaultSigner


__all__ = [
    "VaultAddress",
    "vault_seed",
    "derive_vault",
    "PrincipalSigner",
    "VaultSigner",
    "Signer",
]
