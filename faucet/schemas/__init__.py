"""Pydantic schemas for the public HTTP API."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from faucet.domain.claims import TransactionRecord


class HealthResponse(BaseModel):
    ok: bool = True


class BalanceResponse(BaseModel):
    balance: float
    cached: bool


class FundRequest(BaseModel):
    wallet_address: str = ""
    cf_turnstile_response: str = ""


class FundResponse(BaseModel):
    success: bool = True
    amount: float
    transaction_hash: str
    warning: Optional[str] = None


class ErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    success: bool = False
    error: str
    next_claim_time: Optional[int] = None


class TransactionResponse(BaseModel):
    """A transaction log entry; the requester IP is deliberately absent."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    id: int
    wallet_address: str
    amount: float
    status: str
    tx_hash: Optional[str] = None
    error_message: Optional[str] = None
    timestamp: datetime

    @classmethod
    def from_record(cls, record: TransactionRecord) -> "TransactionResponse":
        return cls(
            id=record.id,
            wallet_address=record.wallet_address,
            amount=record.amount,
            status=record.status.value,
            tx_hash=record.transfer_reference or None,
            error_message=record.error_detail or None,
            timestamp=record.timestamp,
        )


class TransactionListResponse(BaseModel):
    success: bool = True
    transactions: list[TransactionResponse]
