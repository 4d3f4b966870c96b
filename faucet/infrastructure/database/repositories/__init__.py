"""SQLAlchemy-backed repository implementations."""

from .claim_ledger_repository import SqlClaimLedger

__all__ = ["SqlClaimLedger"]
