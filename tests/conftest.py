"""Test configuration."""
import os
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path

from alembic import command
from alembic.config import Config
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

# --- Default env, set before the app reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("API_KEY", "test-secret-key")
os.environ.setdefault("FORGE_ENV", "test")

from forge_escrow.config import ProgramConfig  # noqa: E402
from forge_escrow.db import get_db  # noqa: E402
from forge_escrow.main import app  # noqa: E402
from forge_escrow.models import Holding  # noqa: E402
from forge_escrow.routers.escrow import get_controller  # noqa: E402
from forge_escrow.services.assets import AssetKind, Native, asset_key  # noqa: E402
from forge_escrow.services.escrow import EscrowController  # noqa: E402

ROOT = Path(__file__).resolve().parents[1]

INITIATOR = "alice"
RECIPIENT = "bob"
ARBITER = "carol"
OUTSIDER = "mallory"
FEE_WALLET = "fee-wallet"
HOLDING_WALLET = "temp-fee-wallet"


def _run_migrations(database_url: str) -> None:
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    cfg.attributes["configure_logger"] = False
    command.upgrade(cfg, "head")


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Fresh SQLite file per test, schema built through Alembic only."""

    database_url = f"sqlite:///{tmp_path / 'forge_escrow_test.db'}"
    _run_migrations(database_url)
    engine = create_engine(database_url, connect_args={"check_same_thread": False}, future=True)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def db_session(db_engine: Engine) -> Iterator[Session]:
    factory = sessionmaker(bind=db_engine, autoflush=False, autocommit=False, future=True, expire_on_commit=False)
    session = factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def program_config() -> ProgramConfig:
    return ProgramConfig(
        program_id="TestEscrowProgram1111111111111111111111111",
        vault_seed_tag="escrow",
        fee_wallet=FEE_WALLET,
        holding_wallet=HOLDING_WALLET,
    )


@pytest.fixture
def controller(db_session: Session, program_config: ProgramConfig) -> EscrowController:
    return EscrowController(db_session, program_config)


@pytest.fixture
def fund(db_session: Session) -> Callable[..., Holding]:
    """Factory crediting an external holding directly on the ledger."""

    def _factory(owner: str, amount: int, asset: AssetKind = Native(), *, frozen: bool = False) -> Holding:
        holding = Holding(
            owner=owner,
            asset_key=asset_key(asset),
            balance=amount,
            authority=owner,
            program_owned=False,
            is_frozen=frozen,
        )
        db_session.add(holding)
        db_session.commit()
        return holding

    return _factory


@pytest.fixture
def balance(controller: EscrowController) -> Callable[..., int]:
    def _balance(owner: str, asset: AssetKind = Native(), *, vault: bool = False) -> int:
        return controller.transfers.balance_of(owner, asset, vault=vault)

    return _balance


@pytest.fixture
def funded_escrow(controller: EscrowController, fund: Callable[..., Holding]):
    """Escrow 1 holding 1000 native units, funded by alice for bob, arbitrated by carol."""

    fund(INITIATOR, 1000)
    return controller.initialize_and_fund(
        1, 1000, Native(), arbiter=ARBITER, recipient=RECIPIENT, initiator=INITIATOR
    )


@pytest.fixture(autouse=True)
def override_dependencies(db_session: Session, program_config: ProgramConfig) -> Iterator[None]:
    def _get_db() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_controller] = lambda: EscrowController(db_session, program_config)
    yield
    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_controller, None)


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {os.environ['API_KEY']}"}


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
