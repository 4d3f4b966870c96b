"""SQLAlchemy implementation of the claim ledger"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

from sqlalchemy import String, desc, select, type_coerce, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from faucet.domain.claims.exceptions import LedgerError
from faucet.domain.claims.models import ClaimRecord, TransactionRecord, TransactionStatus
from faucet.infrastructure.database.models import ClaimHistory, Transaction
from faucet.infrastructure.database.types import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


@asynccontextmanager
async def _storage_errors(operation: str) -> AsyncIterator[None]:
    try:
        yield
    except (SQLAlchemyError, ValueError) as exc:
        raise LedgerError(f"{operation} failed: {exc}") from exc


class SqlClaimLedger:
    """Claim ledger backed by an async SQLAlchemy engine.

    Every call runs in its own session and commits before returning.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_claim_record(self, wallet_address: str) -> ClaimRecord | None:
        stmt = select(ClaimHistory).where(ClaimHistory.wallet_address == wallet_address)
        async with _storage_errors("get claim record"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                row = result.scalars().first()
        return self._to_claim(row) if row else None

    async def upsert_claim_record(self, wallet_address: str, source_ip: str, claimed_at: datetime) -> ClaimRecord:
        async with _storage_errors("upsert claim record"):
            async with self._session_factory.begin() as session:
                dialect = session.get_bind().dialect.name
                insert = _UPSERT_DIALECTS.get(dialect)
                if insert is None:
                    raise LedgerError(f"claim upsert is not supported on {dialect}")
                stmt = insert(ClaimHistory).values(
                    wallet_address=wallet_address,
                    ip_address=source_ip,
                    last_claim_time=claimed_at,
                    claim_count=1,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[ClaimHistory.wallet_address],
                    set_={
                        "ip_address": stmt.excluded.ip_address,
                        "last_claim_time": stmt.excluded.last_claim_time,
                        "claim_count": ClaimHistory.claim_count + 1,
                    },
                )
                await session.execute(stmt)
                result = await session.execute(
                    select(ClaimHistory)
                    .where(ClaimHistory.wallet_address == wallet_address)
                    .execution_options(populate_existing=True)
                )
                row = result.scalars().one()
                return self._to_claim(row)

    async def claim_records_by_ip(self, source_ip: str) -> list[ClaimRecord]:
        stmt = select(ClaimHistory).where(ClaimHistory.ip_address == source_ip)
        async with _storage_errors("list claim records by ip"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [self._to_claim(row) for row in result.scalars().all()]

    async def append_transaction(self, record: TransactionRecord) -> int:
        row = Transaction(
            wallet_address=record.wallet_address,
            ip_address=record.source_ip,
            amount=record.amount,
            status=TransactionStatus(record.status).value,
            tx_hash=record.transfer_reference,
            error_message=record.error_detail,
            timestamp=record.timestamp,
        )
        async with _storage_errors("append transaction"):
            async with self._session_factory.begin() as session:
                session.add(row)
                await session.flush()
                return row.id

    async def update_transaction(
        self,
        transaction_id: int,
        *,
        status: TransactionStatus,
        transfer_reference: str | None = None,
        error_detail: str | None = None,
    ) -> None:
        stmt = (
            update(Transaction)
            .where(Transaction.id == transaction_id)
            .values(status=TransactionStatus(status).value, tx_hash=transfer_reference, error_message=error_detail)
        )
        async with _storage_errors("update transaction"):
            async with self._session_factory.begin() as session:
                result = await session.execute(stmt)
                if result.rowcount == 0:
                    raise LedgerError(f"transaction {transaction_id} does not exist")

    async def recent_transactions(self, limit: int) -> list[TransactionRecord]:
        stmt = select(Transaction).order_by(desc(Transaction.timestamp), desc(Transaction.id)).limit(limit)
        return await self._list_transactions(stmt, "list recent transactions")

    async def transactions_for_wallet(self, wallet_address: str, limit: int) -> list[TransactionRecord]:
        stmt = (
            select(Transaction)
            .where(Transaction.wallet_address == wallet_address)
            .order_by(desc(Transaction.timestamp), desc(Transaction.id))
            .limit(limit)
        )
        return await self._list_transactions(stmt, "list wallet transactions")

    async def normalize_timestamps(self) -> int:
        """Rewrite legacy or non-canonical timestamps in place; return the count."""
        changed = 0
        targets = (
            (Transaction.__table__, Transaction.__table__.c.timestamp),
            (ClaimHistory.__table__, ClaimHistory.__table__.c.last_claim_time),
        )
        async with _storage_errors("normalize timestamps"):
            async with self._session_factory.begin() as session:
                for table, column in targets:
                    result = await session.execute(select(table.c.id, type_coerce(column, String())))
                    for row_id, raw in result.all():
                        if raw is None:
                            continue
                        try:
                            parsed = parse_timestamp(raw)
                        except ValueError:
                            logger.warning("Skipping unparseable timestamp %r in %s row %s", raw, table.name, row_id)
                            continue
                        if format_timestamp(parsed) == raw:
                            continue
                        await session.execute(update(table).where(table.c.id == row_id).values({column.name: parsed}))
                        changed += 1
        if changed:
            logger.info("Normalized %d stored timestamps to ISO-8601 UTC", changed)
        return changed

    async def _list_transactions(self, stmt, operation: str) -> list[TransactionRecord]:
        async with _storage_errors(operation):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [self._to_transaction(row) for row in result.scalars().all()]

    @staticmethod
    def _to_claim(model: ClaimHistory) -> ClaimRecord:
        return ClaimRecord(
            id=model.id,
            wallet_address=model.wallet_address,
            source_ip=model.ip_address,
            last_claim_time=model.last_claim_time,
            claim_count=model.claim_count,
        )

    @staticmethod
    def _to_transaction(model: Transaction) -> TransactionRecord:
        return TransactionRecord(
            id=model.id,
            wallet_address=model.wallet_address,
            source_ip=model.ip_address,
            amount=model.amount,
            status=TransactionStatus(model.status),
            transfer_reference=model.tx_hash,
            error_detail=model.error_message,
            timestamp=model.timestamp,
        )
