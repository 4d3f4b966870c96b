"""Public faucet endpoints: health, balance, claims and recent payouts."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from faucet.api.deps import get_balance_cache, get_claim_coordinator, get_claim_ledger, get_client_ip
from faucet.domain.balance import BalanceCache
from faucet.domain.claims import (
    Admitted,
    ClaimCoordinator,
    ClaimLedger,
    LedgerError,
    Rejected,
    RejectionReason,
    UpstreamUnavailableError,
)
from faucet.schemas import (
    BalanceResponse,
    ErrorResponse,
    FundRequest,
    FundResponse,
    HealthResponse,
    TransactionListResponse,
    TransactionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

RECENT_TRANSACTIONS_LIMIT = 10


def error_response(status_code: int, message: str, next_claim_time: Optional[int] = None) -> JSONResponse:
    body = ErrorResponse(error=message, next_claim_time=next_claim_time)
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, exclude_none=True))


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health() -> HealthResponse:
    return HealthResponse()


@router.get(
    "/balance",
    response_model=BalanceResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Faucet wallet balance in SOL",
)
async def get_balance(cache: BalanceCache = Depends(get_balance_cache)):
    try:
        reading = await cache.get_balance()
    except UpstreamUnavailableError:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to get balance")
    return BalanceResponse(balance=reading.amount, cached=reading.cached)


@router.post(
    "/request-funds",
    response_model=FundResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Claim the faucet amount for a wallet",
)
async def request_funds(
    payload: FundRequest,
    client_ip: str = Depends(get_client_ip),
    coordinator: ClaimCoordinator = Depends(get_claim_coordinator),
):
    logger.info("Received request for wallet: %s", payload.wallet_address)
    outcome = await coordinator.request_funds(payload.wallet_address, payload.cf_turnstile_response, client_ip)

    if isinstance(outcome, Admitted):
        return FundResponse(
            amount=outcome.amount,
            transaction_hash=outcome.transfer_reference,
            warning="; ".join(outcome.warnings) or None,
        )
    if isinstance(outcome, Rejected):
        if outcome.reason is RejectionReason.COOLDOWN_ACTIVE and outcome.next_claim_time is not None:
            return error_response(
                status.HTTP_429_TOO_MANY_REQUESTS,
                outcome.detail,
                next_claim_time=int(outcome.next_claim_time.timestamp()),
            )
        return error_response(status.HTTP_400_BAD_REQUEST, outcome.detail)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, outcome.detail)


@router.get(
    "/transactions",
    response_model=TransactionListResponse,
    response_model_exclude_none=True,
    summary="Most recent faucet payouts",
)
async def list_transactions(
    wallet_address: Optional[str] = None,
    ledger: ClaimLedger = Depends(get_claim_ledger),
):
    try:
        if wallet_address:
            records = await ledger.transactions_for_wallet(wallet_address, RECENT_TRANSACTIONS_LIMIT)
        else:
            records = await ledger.recent_transactions(RECENT_TRANSACTIONS_LIMIT)
    except LedgerError as exc:
        logger.error("Error getting transactions: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Failed to get transactions"},
        )
    return TransactionListResponse(transactions=[TransactionResponse.from_record(record) for record in records])
