"""Claim admission and disbursement."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable

from faucet.domain.gateways import Distributor, HumanVerifier

from .cooldown import can_claim, cooldown_message
from .exceptions import DistributorError, InvalidAddressError, LedgerError, VerificationUnavailableError
from .locks import WalletLockRegistry
from .models import (
    Admitted,
    ClaimOutcome,
    Rejected,
    RejectionReason,
    TransactionRecord,
    TransactionStatus,
    UpstreamFailure,
    UpstreamReason,
)
from .repository import ClaimLedger

logger = logging.getLogger(__name__)

TRANSACTION_NOT_RECORDED = "Transaction record could not be saved"
CLAIM_NOT_RECORDED = "Claim history could not be updated"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class ClaimCoordinator:
    """Decides whether a wallet may claim and, if so, pays it exactly once.

    Admission for one wallet is serialized through ``locks``; the lock is held
    from the cooldown lookup until the claim record is written, so two
    concurrent requests for the same address cannot both see an expired
    cooldown. Different wallets proceed in parallel.

    After a successful transfer the outcome is written in two steps, the
    transaction log entry first and the cooldown record second. Either write
    may fail without undoing the transfer. If the cooldown record is lost the
    wallet can claim again immediately; that window is accepted rather than
    risking a second send on retry.
    """

    ledger: ClaimLedger
    distributor: Distributor
    verifier: HumanVerifier
    amount: float
    cooldown: timedelta
    locks: WalletLockRegistry = field(default_factory=WalletLockRegistry)
    clock: Callable[[], datetime] = utcnow

    async def request_funds(self, wallet_address: str, verification_token: str, source_ip: str) -> ClaimOutcome:
        wallet_address = (wallet_address or "").strip()
        if not wallet_address:
            return Rejected(RejectionReason.INVALID_INPUT, "Wallet address is required")
        if not self.distributor.is_valid_address(wallet_address):
            return Rejected(RejectionReason.INVALID_ADDRESS, "Invalid Solana wallet address format")
        if not verification_token:
            return Rejected(RejectionReason.INVALID_INPUT, "Turnstile response is required")

        failure = await self._verify(wallet_address, verification_token, source_ip)
        if failure is not None:
            return failure

        async with self.locks.hold(wallet_address):
            return await self._admit(wallet_address, source_ip)

    async def _verify(self, wallet_address: str, token: str, source_ip: str) -> Rejected | UpstreamFailure | None:
        try:
            passed = await self.verifier.verify(token, remote_ip=source_ip or None)
        except VerificationUnavailableError as exc:
            logger.error("Verification service error for %s: %s", wallet_address, exc)
            return UpstreamFailure(UpstreamReason.VERIFICATION_UNAVAILABLE, "Failed to verify Turnstile token")
        if not passed:
            logger.info("Verification rejected for %s from %s", wallet_address, source_ip)
            return Rejected(RejectionReason.VERIFICATION_FAILED, "Invalid Turnstile token")
        return None

    async def _admit(self, wallet_address: str, source_ip: str) -> ClaimOutcome:
        try:
            record = await self.ledger.get_claim_record(wallet_address)
        except LedgerError as exc:
            logger.error("Error checking claim history for %s: %s", wallet_address, exc)
            return UpstreamFailure(UpstreamReason.LEDGER_UNAVAILABLE, "Failed to check claim history")

        now = self.clock()
        allowed, next_time = can_claim(record, self.cooldown, now)
        if not allowed:
            assert next_time is not None
            logger.debug("Cooldown active for %s until %s", wallet_address, next_time.isoformat())
            return Rejected(RejectionReason.COOLDOWN_ACTIVE, cooldown_message(next_time, now), next_time)

        # No retry here: the send may have landed even when the call failed.
        try:
            reference = await self.distributor.transfer(wallet_address, self.amount)
        except InvalidAddressError as exc:
            logger.info("Distributor refused recipient %s: %s", wallet_address, exc)
            return Rejected(RejectionReason.INVALID_ADDRESS, "Invalid Solana wallet address format")
        except DistributorError as exc:
            logger.error("Error sending %s SOL to %s: %s", self.amount, wallet_address, exc)
            return UpstreamFailure(UpstreamReason.TRANSFER_FAILED, "Failed to send transaction")

        logger.info("Sent %s SOL to %s, transaction %s", self.amount, wallet_address, reference)
        warnings = await self._record(wallet_address, source_ip, reference, self.clock())
        return Admitted(transfer_reference=reference, amount=self.amount, warnings=warnings)

    async def _record(self, wallet_address: str, source_ip: str, reference: str, claimed_at: datetime) -> tuple[str, ...]:
        warnings: list[str] = []
        try:
            await self.ledger.append_transaction(
                TransactionRecord(
                    wallet_address=wallet_address,
                    amount=self.amount,
                    status=TransactionStatus.COMPLETED,
                    timestamp=claimed_at,
                    source_ip=source_ip,
                    transfer_reference=reference,
                )
            )
        except LedgerError as exc:
            logger.critical(
                "Funds sent to %s (transaction %s) but the transaction record was not saved: %s",
                wallet_address,
                reference,
                exc,
            )
            warnings.append(TRANSACTION_NOT_RECORDED)

        try:
            await self.ledger.upsert_claim_record(wallet_address, source_ip, claimed_at)
        except LedgerError as exc:
            logger.critical(
                "Funds sent to %s (transaction %s) but the claim history was not updated, "
                "cooldown is not enforced for this wallet: %s",
                wallet_address,
                reference,
                exc,
            )
            warnings.append(CLAIM_NOT_RECORDED)
        return tuple(warnings)
