"""Reusable FastAPI dependencies."""

from fastapi import Depends, Request

from faucet.core.container import ApplicationContainer
from faucet.domain.balance import BalanceCache
from faucet.domain.claims import ClaimCoordinator, ClaimLedger


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_balance_cache(container: ApplicationContainer = Depends(get_container)) -> BalanceCache:
    return container.balance_cache


def get_claim_coordinator(container: ApplicationContainer = Depends(get_container)) -> ClaimCoordinator:
    return container.coordinator


def get_claim_ledger(container: ApplicationContainer = Depends(get_container)) -> ClaimLedger:
    return container.ledger


def get_client_ip(request: Request) -> str:
    """First hop of ``X-Forwarded-For`` when present, else the socket peer."""
    forwarded_for = request.headers.get("x-forwarded-for", "")
    if forwarded_for.strip():
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else ""


__all__ = [
    "get_balance_cache",
    "get_claim_coordinator",
    "get_claim_ledger",
    "get_client_ip",
    "get_container",
]
