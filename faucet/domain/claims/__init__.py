"""Claim domain exports"""

from .exceptions import (
    DistributorError,
    FaucetError,
    InvalidAddressError,
    LedgerError,
    UpstreamUnavailableError,
    VerificationUnavailableError,
)
from .locks import WalletLockRegistry
from .models import (
    Admitted,
    ClaimOutcome,
    ClaimRecord,
    Rejected,
    RejectionReason,
    TransactionRecord,
    TransactionStatus,
    UpstreamFailure,
    UpstreamReason,
)
from .repository import ClaimLedger
from .service import ClaimCoordinator

__all__ = [
    "Admitted",
    "ClaimCoordinator",
    "ClaimLedger",
    "ClaimOutcome",
    "ClaimRecord",
    "DistributorError",
    "FaucetError",
    "InvalidAddressError",
    "LedgerError",
    "Rejected",
    "RejectionReason",
    "TransactionRecord",
    "TransactionStatus",
    "UpstreamFailure",
    "UpstreamReason",
    "UpstreamUnavailableError",
    "VerificationUnavailableError",
    "WalletLockRegistry",
]
