"""Domain models for claims, transactions and claim outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(slots=True)
class ClaimRecord:
    wallet_address: str
    source_ip: str
    last_claim_time: datetime
    claim_count: int
    id: Optional[int] = None


@dataclass(slots=True)
class TransactionRecord:
    wallet_address: str
    amount: float
    status: TransactionStatus
    timestamp: datetime
    source_ip: str = ""
    transfer_reference: Optional[str] = None
    error_detail: Optional[str] = None
    id: Optional[int] = None


class RejectionReason(str, Enum):
    INVALID_INPUT = "invalid_input"
    INVALID_ADDRESS = "invalid_address"
    VERIFICATION_FAILED = "verification_failed"
    COOLDOWN_ACTIVE = "cooldown_active"


class UpstreamReason(str, Enum):
    VERIFICATION_UNAVAILABLE = "verification_unavailable"
    LEDGER_UNAVAILABLE = "ledger_unavailable"
    TRANSFER_FAILED = "transfer_failed"


@dataclass(slots=True, frozen=True)
class Admitted:
    """Funds were sent. ``warnings`` lists post-transfer writes that failed."""

    transfer_reference: str
    amount: float
    warnings: tuple[str, ...] = field(default=())

    @property
    def recorded(self) -> bool:
        return not self.warnings


@dataclass(slots=True, frozen=True)
class Rejected:
    reason: RejectionReason
    detail: str
    next_claim_time: Optional[datetime] = None


@dataclass(slots=True, frozen=True)
class UpstreamFailure:
    reason: UpstreamReason
    detail: str


ClaimOutcome = Union[Admitted, Rejected, UpstreamFailure]
