import pytest

from forge_escrow.models import EscrowRecord
from forge_escrow.services.authorization import authorize, require_authorized
from forge_escrow.utils.errors import Unauthorized


@pytest.fixture
def record() -> EscrowRecord:
    return EscrowRecord(escrow_id=1, initiator="alice", recipient="bob", arbiter="carol")


@pytest.mark.parametrize("caller", ["alice", "carol"])
def test_initiator_and_arbiter_are_authorized(record, caller):
    assert authorize(record, caller)
    require_authorized(record, caller)


@pytest.mark.parametrize("caller", ["bob", "mallory", "", "ALICE"])
def test_everyone_else_is_refused(record, caller):
    assert not authorize(record, caller)
    with pytest.raises(Unauthorized) as excinfo:
        require_authorized(record, caller)
    assert excinfo.value.status_code == 403
    assert excinfo.value.detail["error"]["code"] == "UNAUTHORIZED"
