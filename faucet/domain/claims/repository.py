"""Repository protocol for claim and transaction history."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .models import ClaimRecord, TransactionRecord, TransactionStatus


class ClaimLedger(Protocol):
    async def get_claim_record(self, wallet_address: str) -> ClaimRecord | None:
        ...

    async def upsert_claim_record(self, wallet_address: str, source_ip: str, claimed_at: datetime) -> ClaimRecord:
        """Create the record with a count of one, or bump count and time.

        Must be atomic per wallet address.
        """
        ...

    async def claim_records_by_ip(self, source_ip: str) -> Sequence[ClaimRecord]:
        ...

    async def append_transaction(self, record: TransactionRecord) -> int:
        ...

    async def update_transaction(
        self,
        transaction_id: int,
        *,
        status: TransactionStatus,
        transfer_reference: str | None = None,
        error_detail: str | None = None,
    ) -> None:
        ...

    async def recent_transactions(self, limit: int) -> Sequence[TransactionRecord]:
        ...

    async def transactions_for_wallet(self, wallet_address: str, limit: int) -> Sequence[TransactionRecord]:
        ...
