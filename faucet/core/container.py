"""Simple dependency container for wiring core services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from faucet.core.config import Settings
from faucet.domain.balance import BalanceCache
from faucet.domain.claims import ClaimCoordinator
from faucet.domain.gateways import Distributor, HumanVerifier
from faucet.infrastructure.database import build_engine, build_session_factory, init_db
from faucet.infrastructure.database.repositories import SqlClaimLedger

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApplicationContainer:
    """Process-lifetime singletons: engine, external clients, cache, coordinator."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    ledger: SqlClaimLedger
    distributor: Distributor
    verifier: HumanVerifier
    balance_cache: BalanceCache
    coordinator: ClaimCoordinator

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        distributor: Distributor | None = None,
        verifier: HumanVerifier | None = None,
    ) -> "ApplicationContainer":
        # Imported here so tests that inject fakes never load the RPC stack.
        if distributor is None:
            from faucet.infrastructure.solana import SolanaDistributor

            distributor = SolanaDistributor.from_settings(settings.solana)
        if verifier is None:
            from faucet.infrastructure.verification import build_verifier

            verifier = build_verifier(settings.security)

        engine = build_engine(settings)
        session_factory = build_session_factory(engine)
        ledger = SqlClaimLedger(session_factory)
        coordinator = ClaimCoordinator(
            ledger=ledger,
            distributor=distributor,
            verifier=verifier,
            amount=settings.amount_per_request,
            cooldown=timedelta(seconds=settings.claim_cooldown),
        )
        return cls(
            settings=settings,
            engine=engine,
            session_factory=session_factory,
            ledger=ledger,
            distributor=distributor,
            verifier=verifier,
            balance_cache=BalanceCache(distributor),
            coordinator=coordinator,
        )

    async def startup(self) -> None:
        await init_db(self.engine)
        await self.ledger.normalize_timestamps()

    async def shutdown(self) -> None:
        for client in (self.distributor, self.verifier):
            close = getattr(client, "close", None)
            if close is not None:
                await close()
        await self.engine.dispose()


__all__ = ["ApplicationContainer"]
