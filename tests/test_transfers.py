import pytest

from forge_escrow.models import Holding
from forge_escrow.services.assets import Native, Token
from forge_escrow.services.transfers import TransferExecutor, TransferLeg
from forge_escrow.services.vault import PrincipalSigner, VaultSigner, derive_vault
from forge_escrow.utils.errors import TransferFailure

MINT = "FORGEmint11111111111111111111111111111111"


@pytest.fixture
def executor(db_session):
    return TransferExecutor(db_session)


def test_native_legs_move_balances_and_create_destinations(executor, fund, db_session):
    fund("alice", 100)

    moved = executor.execute(
        Native(),
        [TransferLeg("alice", "bob", 60, "one"), TransferLeg("alice", "dave", 40, "two")],
        PrincipalSigner("alice"),
    )
    db_session.commit()

    assert [leg.label for leg in moved] == ["one", "two"]
    assert executor.balance_of("alice", Native()) == 0
    assert executor.balance_of("bob", Native()) == 60
    assert executor.balance_of("dave", Native()) == 40


def test_zero_legs_are_skipped(executor, fund):
    fund("alice", 10)

    moved = executor.execute(Native(), [TransferLeg("alice", "bob", 0)], PrincipalSigner("alice"))

    assert moved == []
    assert executor.holding("bob", Native()) is None


def test_batch_is_validated_before_any_balance_changes(executor, fund):
    alice = fund("alice", 100)

    with pytest.raises(TransferFailure):
        executor.execute(
            Native(),
            [TransferLeg("alice", "bob", 70, "first"), TransferLeg("alice", "dave", 40, "second")],
            PrincipalSigner("alice"),
        )

    # Nothing was applied even before the caller rolls back.
    assert alice.balance == 100


def test_signer_must_control_source(executor, fund):
    fund("alice", 100)

    with pytest.raises(TransferFailure):
        executor.execute(Native(), [TransferLeg("alice", "mallory", 10)], PrincipalSigner("mallory"))


def test_missing_source_holding_fails(executor):
    with pytest.raises(TransferFailure):
        executor.execute(Native(), [TransferLeg("ghost", "bob", 1)], PrincipalSigner("ghost"))


def test_frozen_destination_fails(executor, fund):
    fund("alice", 100)
    fund("bob", 0, frozen=True)

    with pytest.raises(TransferFailure):
        executor.execute(Native(), [TransferLeg("alice", "bob", 10)], PrincipalSigner("alice"))


def test_negative_leg_is_rejected(executor, fund):
    fund("alice", 100)

    with pytest.raises(TransferFailure):
        executor.execute(Native(), [TransferLeg("alice", "bob", -1)], PrincipalSigner("alice"))


def test_token_legs_only_touch_token_holdings(executor, fund, db_session):
    fund("alice", 500, Token(MINT))
    fund("alice", 7)

    executor.execute(Token(MINT), [TransferLeg("alice", "bob", 200)], PrincipalSigner("alice"))
    db_session.commit()

    assert executor.balance_of("alice", Token(MINT)) == 300
    assert executor.balance_of("bob", Token(MINT)) == 200
    assert executor.balance_of("alice", Native()) == 7
    assert executor.holding("bob", Native()) is None


def test_token_transfer_without_token_holding_fails(executor, fund):
    fund("alice", 500)

    with pytest.raises(TransferFailure):
        executor.execute(Token(MINT), [TransferLeg("alice", "bob", 1)], PrincipalSigner("alice"))


def test_open_vault_is_program_owned_and_unique(executor, program_config, db_session):
    vault = derive_vault(program_config.program_id, program_config.vault_seed_tag, 9)

    holding = executor.open_vault(vault, Native())
    db_session.commit()

    assert holding.program_owned is True
    assert holding.authority == vault.address
    with pytest.raises(TransferFailure):
        executor.open_vault(vault, Native())


def test_vault_debit_requires_vault_signer(executor, fund, db_session, program_config):
    vault = derive_vault(program_config.program_id, program_config.vault_seed_tag, 9)
    holding = executor.open_vault(vault, Native())
    holding.balance = 50
    db_session.commit()

    with pytest.raises(TransferFailure):
        executor.execute(Native(), [TransferLeg(vault.address, "bob", 10)], PrincipalSigner(vault.address))

    signer = VaultSigner(address=vault.address, seed=vault.seed)
    executor.execute(Native(), [TransferLeg(vault.address, "bob", 10)], signer)
    db_session.commit()
    assert executor.balance_of(vault.address, Native(), vault=True) == 40
    assert isinstance(executor.holding("bob", Native()), Holding)


def test_vault_and_external_holding_share_an_address_without_colliding(executor, fund, db_session, program_config):
    vault = derive_vault(program_config.program_id, program_config.vault_seed_tag, 11)
    fund("alice", 100)
    executor.execute(Native(), [TransferLeg("alice", vault.address, 30, "squat")], PrincipalSigner("alice"))
    db_session.commit()

    holding = executor.open_vault(vault, Native())
    executor.execute(
        Native(), [TransferLeg("alice", vault.address, 50, "deposit", to_vault=True)], PrincipalSigner("alice")
    )
    db_session.commit()

    assert holding.program_owned is True
    assert executor.balance_of(vault.address, Native()) == 30
    assert executor.balance_of(vault.address, Native(), vault=True) == 50

    # The external twin is debited by its principal; the vault stays untouched.
    executor.execute(Native(), [TransferLeg(vault.address, "bob", 30)], PrincipalSigner(vault.address))
    db_session.commit()
    assert executor.balance_of(vault.address, Native(), vault=True) == 50


def test_credit_to_unopened_vault_fails(executor, fund, program_config):
    vault = derive_vault(program_config.program_id, program_config.vault_seed_tag, 12)
    fund("alice", 100)

    with pytest.raises(TransferFailure):
        executor.execute(
            Native(), [TransferLeg("alice", vault.address, 10, "deposit", to_vault=True)], PrincipalSigner("alice")
        )
    assert executor.holding(vault.address, Native()) is None
