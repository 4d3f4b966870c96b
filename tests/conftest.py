import asyncio
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from faucet.domain.claims import ClaimCoordinator, DistributorError, InvalidAddressError, VerificationUnavailableError
from faucet.infrastructure.database import build_session_factory, init_db
from faucet.infrastructure.database.repositories import SqlClaimLedger
from faucet.infrastructure.solana import is_valid_solana_address

WALLET = "11111111111111111111111111111111"
OTHER_WALLET = "So11111111111111111111111111111111111111112"
COOLDOWN = timedelta(hours=24)


class FakeDistributor:
    def __init__(self, balance: float = 12.5) -> None:
        self.balance = balance
        self.balance_calls = 0
        self.transfers: list[tuple[str, float]] = []
        self.fail_transfer = False
        self.reject_recipient = False
        self.fail_balance = False

    def is_valid_address(self, address: str) -> bool:
        return is_valid_solana_address(address)

    async def transfer(self, address: str, amount: float) -> str:
        await asyncio.sleep(0)
        if self.reject_recipient:
            raise InvalidAddressError(f"invalid recipient address: {address}")
        if self.fail_transfer:
            raise DistributorError("send transaction failed: node is behind")
        self.transfers.append((address, amount))
        return f"sig{len(self.transfers)}"

    async def query_balance(self) -> float:
        self.balance_calls += 1
        await asyncio.sleep(0)
        if self.fail_balance:
            raise DistributorError("get balance failed: connection refused")
        return self.balance


class FakeVerifier:
    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.unavailable = False
        self.calls: list[tuple[str, str | None]] = []

    async def verify(self, token: str, remote_ip: str | None = None) -> bool:
        self.calls.append((token, remote_ip))
        if self.unavailable:
            raise VerificationUnavailableError("turnstile request failed: timed out")
        return self.result


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def distributor():
    return FakeDistributor()


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'faucet.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def ledger(engine):
    return SqlClaimLedger(build_session_factory(engine))


@pytest.fixture
def coordinator(ledger, distributor, verifier, clock):
    return ClaimCoordinator(
        ledger=ledger,
        distributor=distributor,
        verifier=verifier,
        amount=1.0,
        cooldown=COOLDOWN,
        clock=clock,
    )
